"""Unit tests for value validation."""

import pytest

from uitypes.composer import Composer
from uitypes.errors import CyclicValueError, ResolutionDepthError, UnknownTypeError
from uitypes.expression import Reference, parse
from uitypes.registry import Registry

from .lib import MISSING, ValidationResult, Validator, is_absent

TABLE = [
    ("Unit", '"ch"_"em"_"ex"_"px"_"rem"'),
    ("Length", {"value": "number", "unit": "Unit"}),
    ("Size", "Length|number"),
    ("Widget", {"hidden": "Flag", "status": "Text?"}),
    ("Sizeable", {"height": "Size?", "width": "Size?"}),
    ("Label", {"$super": "Widget", "text": "Text", "align": '"left"|"right"'}),
    ("List", {"$macro": ["W=Widget"], "$super": "Widget", "items": "[W]", "named": "<W>?"}),
    ("Ghost", {"link": "Missing?"}),
    ("Tree", {"label": "string", "children": "[Tree]?"}),
    ("Loop", "Echo"),
    ("Echo", "Loop"),
]


@pytest.fixture
def composer() -> Composer:
    registry = Registry()
    registry.register_all(TABLE)
    registry.freeze()
    return Composer(registry, max_depth=16)


@pytest.fixture
def validator(composer) -> Validator:
    return Validator(composer)


class TestPrimitives:
    """Tests for scalar checks."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [0, 1.5, -3])
    def test_number_accepts_ints_and_floats(self, validator, value):
        """Numbers are ints or floats."""
        assert validator.validate(value, parse("number")).valid

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [True, "1", None])
    def test_number_rejects_other_values(self, validator, value):
        """Booleans and strings are not numbers."""
        assert not validator.validate(value, parse("number")).valid

    @pytest.mark.unit
    def test_boolean_does_not_coerce(self, validator):
        """Integers are not booleans."""
        result = validator.validate(1, parse("boolean"))
        assert result.failures[0].error_type == "type_mismatch"
        assert result.failures[0].path == "root"

    @pytest.mark.unit
    def test_none_accepts_absence_only(self, validator):
        """The none primitive matches no value at all."""
        assert validator.validate(None, parse("none")).valid
        assert not validator.validate("", parse("none")).valid

    @pytest.mark.unit
    def test_single_literal(self, validator):
        """A literal matches exactly its string."""
        assert validator.validate("left", parse('"left"')).valid
        result = validator.validate("right", parse('"left"'))
        assert result.failures[0].error_type == "invalid_literal"


class TestEnumSets:
    """Tests for literal set membership."""

    @pytest.mark.unit
    def test_member_is_accepted(self, validator):
        """Any member of the set validates."""
        assert validator.validate("em", "Unit").valid

    @pytest.mark.unit
    def test_enum_exactness(self, validator):
        """Matching is case-sensitive and names the permitted set."""
        result = validator.validate("EM", "Unit")
        assert not result.valid
        failure = result.failures[0]
        assert failure.error_type == "invalid_enum"
        assert "'EM'" in failure.reason
        assert "['ch', 'em', 'ex', 'px', 'rem']" in failure.reason


class TestOptional:
    """Tests for absence handling."""

    @pytest.mark.unit
    def test_absence_short_circuits(self, validator):
        """Absent optional values never look at the inner type."""
        assert validator.validate(None, parse("Missing?")).valid
        assert validator.validate({}, "Ghost").valid

    @pytest.mark.unit
    def test_present_value_resolves_inner_type(self, validator):
        """Dangling references surface once a value must be checked."""
        with pytest.raises(UnknownTypeError):
            validator.validate({"link": 1}, "Ghost")

    @pytest.mark.unit
    def test_missing_sentinel(self):
        """MISSING is a falsy singleton counted as absence."""
        assert repr(MISSING) == "MISSING"
        assert not MISSING
        assert is_absent(MISSING) and is_absent(None)
        assert not is_absent(0)


class TestStructs:
    """Tests for struct validation."""

    @pytest.mark.unit
    def test_optional_fields_may_be_omitted(self, validator):
        """Flag and Text? fields are not required."""
        assert validator.validate({}, "Widget").valid

    @pytest.mark.unit
    def test_field_type_mismatch(self, validator):
        """Fields are checked against their resolved type."""
        result = validator.validate({"hidden": "yes"}, "Widget")
        assert [f.path for f in result.failures] == ["root.hidden"]

    @pytest.mark.unit
    def test_required_fields(self, validator):
        """Fields that do not admit absence are required."""
        assert validator.required_fields("Label") == ["text", "align"]
        result = validator.validate({"align": "left"}, "Label")
        assert [(f.path, f.error_type) for f in result.failures] == [
            ("root.text", "missing_field")
        ]

    @pytest.mark.unit
    def test_unknown_keys_are_ignored(self, validator):
        """Extra keys do not fail validation."""
        assert validator.validate({"hidden": True, "scrollX": 4}, "Widget").valid

    @pytest.mark.unit
    def test_struct_requires_dict(self, validator):
        """Non-dict values fail struct validation."""
        result = validator.validate([], "Widget")
        assert result.failures[0].error_type == "type_mismatch"

    @pytest.mark.unit
    def test_absent_struct(self, validator):
        """A required struct value may not be absent."""
        result = validator.validate(None, "Widget")
        assert result.failures[0].error_type == "missing"

    @pytest.mark.unit
    def test_generic_schema(self, validator, composer):
        """Generic arguments decide the element schema."""
        schema = composer.resolve("List", [Reference("Label")])
        result = validator.validate({"items": [{"hidden": True, "status": "x"}]}, schema)
        assert [f.path for f in result.failures] == [
            "root.items[0].text",
            "root.items[0].align",
        ]


class TestCollections:
    """Tests for sequence and mapping paths."""

    @pytest.mark.unit
    def test_sequence_paths(self, validator):
        """Sequence failures carry the element index."""
        value = {"items": [{"hidden": True}, {"hidden": 1}]}
        result = validator.validate(value, "List")
        assert [f.path for f in result.failures] == ["root.items[1].hidden"]

    @pytest.mark.unit
    def test_mapping_paths(self, validator):
        """Mapping failures carry the key."""
        value = {"items": [], "named": {"header": {"hidden": 2}}}
        result = validator.validate(value, "List")
        assert [f.path for f in result.failures] == ["root.named.header.hidden"]

    @pytest.mark.unit
    def test_sequence_requires_list(self, validator):
        """Strings are not sequences."""
        result = validator.validate({"items": "abc"}, "List")
        assert result.failures[0].path == "root.items"

    @pytest.mark.unit
    def test_cyclic_value(self, validator):
        """A value containing itself raises CyclicValueError."""
        node = {"label": "a", "children": []}
        node["children"].append(node)
        with pytest.raises(CyclicValueError) as exc_info:
            validator.validate(node, "Tree")
        assert exc_info.value.path == "root.children[0]"

    @pytest.mark.unit
    def test_shared_value_is_not_a_cycle(self, validator):
        """The same child may appear twice in one tree."""
        child = {"label": "c"}
        assert validator.validate({"label": "r", "children": [child, child]}, "Tree").valid


class TestUnionsAndIntersections:
    """Tests for union branches and intersection members."""

    @pytest.mark.unit
    def test_union_accepts_any_branch(self, validator):
        """Text is a string or a list of strings."""
        assert validator.validate({"status": "ok"}, "Widget").valid
        assert validator.validate({"status": ["a", "b"]}, "Widget").valid

    @pytest.mark.unit
    def test_union_failure_lists_branches(self, validator):
        """A value matching no branch yields one failure naming them all."""
        result = validator.validate({"height": {"value": 2, "unit": "pt"}}, "Sizeable")
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.path == "root.height"
        assert failure.error_type == "no_matching_branch"
        assert "Length" in failure.reason and "number" in failure.reason

    @pytest.mark.unit
    def test_union_with_struct_branch(self, validator):
        """Struct branches of a union validate as structs."""
        value = {"height": {"value": 2, "unit": "em"}, "width": 10}
        assert validator.validate(value, "Sizeable").valid

    @pytest.mark.unit
    def test_intersection_checks_every_member(self, validator):
        """Intersections require all members to hold."""
        expr = parse("Widget+Sizeable")
        assert validator.validate({"hidden": True, "width": 3}, expr).valid
        result = validator.validate({"width": "x"}, expr)
        assert [f.path for f in result.failures] == ["root.width"]

    @pytest.mark.unit
    def test_alias_loop_is_bounded(self, validator):
        """Aliases that only name each other stop at the depth bound."""
        with pytest.raises(ResolutionDepthError):
            validator.validate(1, "Loop")


class TestValidationResult:
    """Tests for the result container."""

    @pytest.mark.unit
    def test_truthiness_and_to_dict(self, validator):
        """Results are truthy when valid and render to dictionaries."""
        assert validator.validate({}, "Widget")
        result = validator.validate("EM", "Unit")
        assert not result
        data = result.to_dict()
        assert data["valid"] is False
        assert data["failures"][0]["path"] == "root"

    @pytest.mark.unit
    def test_empty_result_is_valid(self):
        """A result without failures is valid."""
        assert ValidationResult().valid
