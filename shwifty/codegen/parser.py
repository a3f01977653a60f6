"""Parser for Haskell-style type expression text.

Descriptor files describe field types as strings such as
``Maybe (Either String a)`` or ``[(Int, b)]``.  This module turns that text into
:mod:`~shwifty.codegen.typexpr` nodes.  Supported syntax:

* constructor application ``Map k v`` (qualified names keep their last segment)
* variables (lower-case identifiers), optionally annotated ``(a :: k)``
* list ``[a]``, unit ``()``, tuples ``(a, b)``, function arrows ``a -> b``
* prefix forms ``[]``, ``(,)``, ``(,,)`` and ``(->)``
* ``forall a b. t`` quantifiers and string literals ``"A"``

Kinds use ``*`` (or ``Type``), lower-case kind variables and ``->``.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import typexpr
from .typexpr import Kind, KindArrow, KindVar, TypeExpr, TyVarBinder


class TypeParseError(ValueError):
    """Parse failure carrying the column of the offending token."""

    def __init__(self, message: str, column: int, source: str = "") -> None:
        prefix = f"{source!r}:{column}: " if source else f"{column}: "
        super().__init__(prefix + message)
        self.message = message
        self.column = column
        self.source = source


@dataclass(slots=True)
class Token:
    """Single lexical token."""

    kind: str
    value: str
    column: int


PUNCTUATION = {"(", ")", "[", "]", ",", "."}


class Tokenizer:
    """Hand-written tokenizer for type expressions."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.index = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while not self._eof:
            ch = self._peek()
            if ch.isspace():
                self.index += 1
                continue
            if ch.isalpha() or ch == "_":
                tokens.append(self._consume_identifier())
                continue
            if ch == '"':
                tokens.append(self._consume_string())
                continue
            tokens.append(self._consume_punctuation())
        tokens.append(Token("EOF", "", self.index + 1))
        return tokens

    @property
    def _eof(self) -> bool:
        return self.index >= self.length

    def _peek(self, offset: int = 0) -> str:
        if self.index + offset >= self.length:
            return "\0"
        return self.source[self.index + offset]

    def _consume_identifier(self) -> Token:
        start = self.index
        while True:
            ch = self._peek()
            if ch.isalnum() or ch in "_'":
                self.index += 1
            elif ch == "." and self.source[start].isupper() and self._peek(1).isalpha():
                # qualified name, e.g. ``M.Map``
                self.index += 1
            else:
                break
        value = self.source[start : self.index]
        kind = "FORALL" if value == "forall" else "IDENT"
        return Token(kind, value, start + 1)

    def _consume_string(self) -> Token:
        start = self.index
        self.index += 1
        end = self.source.find('"', self.index)
        if end < 0:
            raise TypeParseError("Unterminated string literal", start + 1, self.source)
        value = self.source[self.index : end]
        self.index = end + 1
        return Token("STRING", value, start + 1)

    def _consume_punctuation(self) -> Token:
        start = self.index
        ch = self._peek()
        if ch == "-" and self._peek(1) == ">":
            self.index += 2
            return Token("ARROW", "->", start + 1)
        if ch == ":" and self._peek(1) == ":":
            self.index += 2
            return Token("DCOLON", "::", start + 1)
        if ch == "*":
            self.index += 1
            return Token("STAR", "*", start + 1)
        if ch in PUNCTUATION:
            self.index += 1
            return Token(ch, ch, start + 1)
        raise TypeParseError(f"Unexpected character {ch!r}", start + 1, self.source)


class Parser:
    """Recursive-descent parser over :class:`Token` streams."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = Tokenizer(source).tokenize()
        self.position = 0

    # -- token helpers ------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self.tokens[self.position]

    def _lookahead(self, offset: int = 1) -> Token:
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _match(self, kind: str) -> bool:
        if self._current.kind == kind:
            self.position += 1
            return True
        return False

    def _expect(self, kind: str, what: str | None = None) -> Token:
        token = self._current
        if token.kind != kind:
            found = token.value or "end of input"
            raise TypeParseError(
                f"Expected {what or kind!s} but found {found!r}", token.column, self.source
            )
        self.position += 1
        return token

    def expect_end(self) -> None:
        self._expect("EOF", "end of input")

    # -- types --------------------------------------------------------------

    def parse_type(self) -> TypeExpr:
        if self._current.kind == "FORALL":
            self.position += 1
            binders: list[TyVarBinder] = []
            while not self._match("."):
                binders.append(self.parse_binder())
            if not binders:
                raise TypeParseError(
                    "forall requires at least one binder", self._current.column, self.source
                )
            return typexpr.ForAll(tuple(binders), self.parse_type())
        domain = self._parse_btype()
        if self._match("ARROW"):
            return typexpr.fun(domain, self.parse_type())
        return domain

    def _parse_btype(self) -> TypeExpr:
        result = self._parse_atype()
        while self._starts_atype():
            result = typexpr.TyApp(result, self._parse_atype())
        return result

    def _starts_atype(self) -> bool:
        return self._current.kind in {"IDENT", "STRING", "(", "["}

    def _parse_atype(self) -> TypeExpr:
        token = self._current
        if token.kind == "IDENT":
            self.position += 1
            return _identifier(token.value)
        if token.kind == "STRING":
            self.position += 1
            return typexpr.TyLit(token.value)
        if token.kind == "[":
            self.position += 1
            if self._match("]"):
                return typexpr.TyCon(typexpr.LIST_CON)
            element = self.parse_type()
            self._expect("]", "']'")
            return typexpr.list_of(element)
        if token.kind == "(":
            return self._parse_parenthesised()
        found = token.value or "end of input"
        raise TypeParseError(f"Expected a type but found {found!r}", token.column, self.source)

    def _parse_parenthesised(self) -> TypeExpr:
        self._expect("(", "'('")
        if self._match(")"):
            return typexpr.TyCon(typexpr.UNIT_CON)
        if self._current.kind == ",":
            commas = 0
            while self._match(","):
                commas += 1
            self._expect(")", "')'")
            return typexpr.TyCon(typexpr.tuple_con(commas + 1))
        if self._current.kind == "ARROW" and self._lookahead().kind == ")":
            self.position += 2
            return typexpr.TyCon(typexpr.ARROW_CON)
        first = self.parse_type()
        if self._match("DCOLON"):
            kind = self.parse_kind()
            self._expect(")", "')'")
            if isinstance(first, typexpr.TyVar) and first.kind is None:
                return typexpr.TyVar(first.name, kind)
            return typexpr.SigT(first, kind)
        elements = [first]
        while self._match(","):
            elements.append(self.parse_type())
        self._expect(")", "')'")
        if len(elements) == 1:
            return first
        return typexpr.tuple_of(*elements)

    # -- binders and kinds --------------------------------------------------

    def parse_binder(self) -> TyVarBinder:
        if self._match("("):
            name = self._expect("IDENT", "a type variable").value
            self._expect("DCOLON", "'::'")
            kind = self.parse_kind()
            self._expect(")", "')'")
            return TyVarBinder(name, kind)
        token = self._expect("IDENT", "a type variable")
        if not _is_variable_name(token.value):
            raise TypeParseError(
                f"Expected a type variable but found {token.value!r}", token.column, self.source
            )
        if self._match("DCOLON"):
            return TyVarBinder(token.value, self.parse_kind())
        return TyVarBinder(token.value)

    def parse_kind(self) -> Kind:
        arg = self._parse_kind_atom()
        if self._match("ARROW"):
            return KindArrow(arg, self.parse_kind())
        return arg

    def _parse_kind_atom(self) -> Kind:
        token = self._current
        if self._match("STAR"):
            return typexpr.STAR
        if token.kind == "IDENT":
            self.position += 1
            if token.value == "Type":
                return typexpr.STAR
            if _is_variable_name(token.value):
                return KindVar(token.value)
            raise TypeParseError(f"Unknown kind {token.value!r}", token.column, self.source)
        if self._match("("):
            kind = self.parse_kind()
            self._expect(")", "')'")
            return kind
        found = token.value or "end of input"
        raise TypeParseError(f"Expected a kind but found {found!r}", token.column, self.source)


def parse_type(source: str) -> TypeExpr:
    """Parse ``source`` into a type expression."""

    parser = Parser(source)
    result = parser.parse_type()
    parser.expect_end()
    return result


def parse_kind(source: str) -> Kind:
    parser = Parser(source)
    result = parser.parse_kind()
    parser.expect_end()
    return result


def parse_binder(source: str) -> TyVarBinder:
    """Parse ``a``, ``a :: k`` or ``(a :: * -> *)``."""

    parser = Parser(source)
    result = parser.parse_binder()
    parser.expect_end()
    return result


def _identifier(value: str) -> TypeExpr:
    name = value.rsplit(".", 1)[-1]
    if _is_variable_name(name):
        return typexpr.TyVar(name)
    return typexpr.TyCon(name)


def _is_variable_name(name: str) -> bool:
    return bool(name) and (name[0].islower() or name[0] == "_")


__all__ = ["Parser", "Token", "Tokenizer", "TypeParseError", "parse_binder", "parse_kind", "parse_type"]
