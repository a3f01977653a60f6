"""Tests for the type expression parser."""

from __future__ import annotations

import pytest

from shwifty.codegen import typexpr
from shwifty.codegen.parser import TypeParseError, parse_binder, parse_kind, parse_type
from shwifty.codegen.typexpr import (
    STAR,
    ForAll,
    KindArrow,
    KindVar,
    SigT,
    TyCon,
    TyLit,
    TyVar,
    TyVarBinder,
    app,
    var,
)


def test_application_is_left_associative() -> None:
    assert parse_type("Map k v") == app("Map", var("k"), var("v"))
    assert parse_type("Either (Maybe a) b") == app("Either", app("Maybe", var("a")), var("b"))


def test_qualified_names_keep_last_segment() -> None:
    assert parse_type("Data.Map.Strict.Map Int Bool") == app("Map", "Int", "Bool")
    assert parse_type("T.Text") == TyCon("Text")


def test_lists_tuples_and_unit() -> None:
    assert parse_type("[Int]") == typexpr.list_of("Int")
    assert parse_type("()") == TyCon("()")
    assert parse_type("(Int, a)") == app("(,)", "Int", var("a"))
    assert parse_type("(Int, Bool, Char)") == app("(,,)", "Int", "Bool", "Char")
    assert parse_type("(Int)") == TyCon("Int")


def test_prefix_constructors() -> None:
    assert parse_type("[] Int") == typexpr.list_of("Int")
    assert parse_type("(,) Int Bool") == app("(,)", "Int", "Bool")
    assert parse_type("(,,) a b c") == app("(,,)", var("a"), var("b"), var("c"))
    assert parse_type("(->) Int Bool") == typexpr.fun("Int", "Bool")


def test_arrows_associate_to_the_right() -> None:
    assert parse_type("Int -> Bool -> Char") == typexpr.fun("Int", typexpr.fun("Bool", "Char"))
    assert parse_type("(Int -> Bool) -> Char") == typexpr.fun(typexpr.fun("Int", "Bool"), "Char")


def test_kind_annotations() -> None:
    assert parse_type("(a :: *)") == TyVar("a", STAR)
    assert parse_type("(a :: k)") == TyVar("a", KindVar("k"))
    assert parse_type("(Maybe :: * -> *)") == SigT(TyCon("Maybe"), KindArrow(STAR, STAR))


def test_forall_and_symbols() -> None:
    parsed = parse_type("forall a (b :: k). Either a b")
    assert parsed == ForAll(
        (TyVarBinder("a"), TyVarBinder("b", KindVar("k"))),
        app("Either", var("a"), var("b")),
    )
    assert parse_type('SingSymbol "A"') == typexpr.TyApp(TyCon("SingSymbol"), TyLit("A"))


def test_kinds_and_binders() -> None:
    assert parse_kind("Type") == STAR
    assert parse_kind("(* -> *) -> *") == KindArrow(KindArrow(STAR, STAR), STAR)
    assert parse_binder("f :: * -> *") == TyVarBinder("f", KindArrow(STAR, STAR))
    assert parse_binder("(t :: k)") == TyVarBinder("t", KindVar("k"))


@pytest.mark.parametrize(
    "source",
    ["", "Maybe (", "[Int", "Int ]", "Int $ Bool", '"open', "forall . a", "(a :: Foo)"],
)
def test_invalid_input(source: str) -> None:
    with pytest.raises(TypeParseError):
        parse_type(source)


def test_error_reports_column() -> None:
    with pytest.raises(TypeParseError) as excinfo:
        parse_type("Maybe $")
    assert excinfo.value.column == 7


def test_round_trips_through_formatter() -> None:
    source = "Either [(Int, a)] (Maybe (Int -> b))"
    assert typexpr.format_type_expr(parse_type(source)) == source
