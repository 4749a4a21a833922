"""Parser for the compact type expression grammar.

Grammar, loosest binding first:

    Expr         := Union
    Union        := Intersection ('|' Intersection)*
    Intersection := Modifier ('+' Modifier)*
    Modifier     := ('[' Expr ']' | '<' Expr '>' | Atom) '?'?
    Atom         := QualifiedName ('(' Expr (',' Expr)* ')')?
                  | LiteralSet
                  | '(' Expr ')'
    LiteralSet   := QuotedString ('_' QuotedString)*

Example:
    >>> parse('UI.Length|number')
    Union(members=(Reference(name='UI.Length'), Primitive(name='number')))
    >>> str(parse('Maybe([W]|<W>)'))
    'Maybe([W]|<W>)'
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from uitypes.errors import ExpressionSyntaxError

from .models import (
    PRIMITIVE_NAMES,
    EnumSet,
    Generic,
    Intersection,
    Literal,
    Mapping,
    Optional,
    Primitive,
    Reference,
    Sequence,
    TypeExpression,
    Union,
)

_NAME = r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*"

_TOKEN_PATTERN = re.compile(
    rf"""
    (?P<space>\s+)
  | (?P<string>"[^"]*")
  | (?P<sep>_(?=\s*"))
  | (?P<name>{_NAME})
  | (?P<punct>[|+?\[\]<>(),])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    """A lexical token with its position in the source string."""

    kind: str
    text: str
    offset: int


def tokenize(raw: str) -> list[Token]:
    """Split an expression into tokens.

    Raises:
        ExpressionSyntaxError: On characters outside the grammar.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(raw):
        match = _TOKEN_PATTERN.match(raw, pos)
        if match is None:
            if raw[pos] == '"':
                raise ExpressionSyntaxError("unterminated string literal", raw, pos)
            raise ExpressionSyntaxError(f"unexpected character {raw[pos]!r}", raw, pos)
        kind = match.lastgroup
        if kind != "space":
            text = match.group()
            tokens.append(Token(text if kind == "punct" else kind, text, pos))
        pos = match.end()
    return tokens


@dataclass
class _Parsed:
    """Intermediate parse result.

    bare_set marks an ungrouped literal set, which may not be an operand of
    '|' or '+'.
    """

    expr: TypeExpression
    bare_set: bool = False


class _Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, raw: str):
        self.raw = raw
        self.tokens = tokenize(raw)
        self.pos = 0

    # -- token helpers ------------------------------------------------------

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _offset(self) -> int:
        token = self._peek()
        return token.offset if token else len(self.raw)

    def _error(self, reason: str, offset: int | None = None) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(
            reason, self.raw, self._offset() if offset is None else offset
        )

    def _accept(self, kind: str) -> Token | None:
        token = self._peek()
        if token is not None and token.kind == kind:
            self.pos += 1
            return token
        return None

    def _expect(self, kind: str) -> Token:
        token = self._accept(kind)
        if token is None:
            found = self._peek()
            what = repr(found.text) if found else "end of expression"
            raise self._error(f"expected {kind!r}, found {what}")
        return token

    # -- grammar ------------------------------------------------------------

    def parse(self) -> TypeExpression:
        if not self.tokens:
            raise self._error("empty type expression")
        result = self._union()
        token = self._peek()
        if token is not None:
            raise self._error(f"unexpected token {token.text!r}")
        return result.expr

    def _union(self) -> _Parsed:
        start = self._offset()
        parts = [self._intersection()]
        while self._accept("|"):
            parts.append(self._intersection())
        if len(parts) == 1:
            return parts[0]
        self._reject_bare_sets(parts, "|", start)
        return _Parsed(Union(tuple(p.expr for p in parts)))

    def _intersection(self) -> _Parsed:
        start = self._offset()
        parts = [self._modifier()]
        while self._accept("+"):
            parts.append(self._modifier())
        if len(parts) == 1:
            return parts[0]
        self._reject_bare_sets(parts, "+", start)
        return _Parsed(Intersection(tuple(p.expr for p in parts)))

    def _reject_bare_sets(self, parts: list[_Parsed], operator: str, start: int) -> None:
        if any(p.bare_set for p in parts):
            raise self._error(
                f"literal set cannot be combined with '{operator}' without grouping",
                start,
            )

    def _modifier(self) -> _Parsed:
        if self._accept("["):
            result = _Parsed(Sequence(self._union().expr))
            self._expect("]")
        elif self._accept("<"):
            result = _Parsed(Mapping(self._union().expr))
            self._expect(">")
        else:
            result = self._atom()
        if self._accept("?"):
            result = _Parsed(Optional(result.expr), result.bare_set)
        return result

    def _atom(self) -> _Parsed:
        token = self._peek()
        if token is None:
            raise self._error("expected type expression, found end of expression")
        if token.kind == "name":
            self.pos += 1
            return _Parsed(self._named(token))
        if token.kind == "string":
            return self._literal_set()
        if token.kind == "(":
            self.pos += 1
            inner = self._union()
            self._expect(")")
            return _Parsed(inner.expr)
        raise self._error(f"expected type expression, found {token.text!r}")

    def _named(self, token: Token) -> TypeExpression:
        if not self._accept("("):
            if token.text in PRIMITIVE_NAMES:
                return Primitive(token.text)
            return Reference(token.text)
        if token.text in PRIMITIVE_NAMES:
            raise self._error(
                f"primitive '{token.text}' cannot take generic arguments", token.offset
            )
        if self._peek() is not None and self._peek().kind == ")":
            raise self._error("empty generic argument list")
        args = [self._union().expr]
        while self._accept(","):
            args.append(self._union().expr)
        self._expect(")")
        return Generic(token.text, tuple(args))

    def _literal_set(self) -> _Parsed:
        first = self._expect("string")
        values = [first.text[1:-1]]
        while self._accept("sep"):
            token = self._expect("string")
            value = token.text[1:-1]
            if value in values:
                raise self._error(f"duplicate literal {token.text}", token.offset)
            values.append(value)
        if len(values) == 1:
            return _Parsed(Literal(values[0]))
        return _Parsed(EnumSet(frozenset(values)), bare_set=True)


@lru_cache(maxsize=4096)
def parse(raw: str) -> TypeExpression:
    """Parse a type expression string.

    Parsing never consults a registry; unknown names are kept as references
    and only checked during composition. Results are cached per raw string,
    which is safe because expressions are immutable.

    Args:
        raw: Expression text such as 'UI.Decorator(W)+UI.Sizeable'.

    Returns:
        Parsed TypeExpression tree.

    Raises:
        ExpressionSyntaxError: When the text does not match the grammar.
    """
    return _Parser(raw).parse()


__all__ = ["Token", "tokenize", "parse"]
