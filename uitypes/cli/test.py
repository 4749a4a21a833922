"""Unit tests for the command line interface."""

import json

import pytest

from .lib import build_parser, main


class TestParser:
    """Tests for argument parsing."""

    @pytest.mark.unit
    def test_resolve_arguments(self):
        """Generic arguments are collected after the type name."""
        args = build_parser().parse_args(["resolve", "UI.Frame", "UI.Button", "-c", "pub"])
        assert (args.name, args.args, args.catalogue) == ("UI.Frame", ["UI.Button"], "pub")

    @pytest.mark.unit
    def test_unknown_catalogue_rejected(self):
        """Only built-in catalogues are accepted."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["types", "-c", "oma"])


class TestCommands:
    """Tests for running commands in-process."""

    @pytest.mark.unit
    def test_catalogues(self, capsys):
        """Both catalogues are listed."""
        assert main(["catalogues"]) == 0
        out = capsys.readouterr().out
        assert "std" in out and "pub" in out

    @pytest.mark.unit
    def test_types(self, capsys):
        """Type names are printed one per line."""
        assert main(["types", "-c", "pub"]) == 0
        assert "UI.Flow.Cut" in capsys.readouterr().out.splitlines()

    @pytest.mark.unit
    def test_resolve_struct(self, capsys):
        """Struct types print as JSON."""
        assert main(["resolve", "UI.Frame", "UI.Button", "-c", "std"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["args"] == ["UI.Button"]
        assert data["fields"]["subject"]["type"] == "UI.Button?"

    @pytest.mark.unit
    def test_resolve_alias(self, capsys):
        """Aliases print their expression."""
        assert main(["resolve", "UI.Size", "-c", "std"]) == 0
        assert capsys.readouterr().out.strip() == "UI.Length|number"

    @pytest.mark.unit
    def test_resolve_unknown_type(self):
        """Schema errors exit with status 2."""
        assert main(["resolve", "UI.Missing", "-c", "std"]) == 2

    @pytest.mark.unit
    def test_validate_file(self, tmp_path, capsys):
        """Invalid documents exit with status 1 and list failures."""
        document = tmp_path / "list.json"
        document.write_text(json.dumps({"direction": "diagonal"}), encoding="utf-8")
        assert main(["validate", "UI.List", str(document), "-c", "std"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["failures"][0]["path"] == "root.direction"

    @pytest.mark.unit
    def test_validate_missing_file(self, tmp_path):
        """Unreadable input exits with status 2."""
        assert main(["validate", "UI.List", str(tmp_path / "none.json")]) == 2
