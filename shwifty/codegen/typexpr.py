"""Source-side type expressions consumed by the classifier.

These nodes describe the *input* to code generation: field types of an
algebraic data type as reported by whatever reflects the host declaration.  The
shape follows the usual applicative encoding of types: a head constructor
(:class:`TyCon`) or variable (:class:`TyVar`) applied to arguments one at a time
through :class:`TyApp`.  Kind annotations (:class:`SigT`) and quantifiers
(:class:`ForAll`) may wrap any node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

# ---------------------------------------------------------------------------
# Kinds


@dataclass(frozen=True, slots=True)
class Kind:
    """Base class for kinds."""


@dataclass(frozen=True, slots=True)
class Star(Kind):
    """The kind of saturated types."""


@dataclass(frozen=True, slots=True)
class KindVar(Kind):
    """Kind variable (``k``); can always be realised to ``*``."""

    name: str


@dataclass(frozen=True, slots=True)
class KindArrow(Kind):
    """Kind of a type constructor (``* -> *``)."""

    arg: Kind
    result: Kind


STAR = Star()


def format_kind(kind: Kind | None) -> str:
    if kind is None or isinstance(kind, Star):
        return "*"
    if isinstance(kind, KindVar):
        return kind.name
    if isinstance(kind, KindArrow):
        arg = format_kind(kind.arg)
        if isinstance(kind.arg, KindArrow):
            arg = f"({arg})"
        return f"{arg} -> {format_kind(kind.result)}"
    raise TypeError(f"Unsupported kind {kind!r}")


# ---------------------------------------------------------------------------
# Type expressions


@dataclass(frozen=True, slots=True)
class TypeExpr:
    """Base class for source-side type expressions."""


@dataclass(frozen=True, slots=True)
class TyCon(TypeExpr):
    """Named type constructor such as ``Int``, ``Maybe`` or ``(,)``."""

    name: str


@dataclass(frozen=True, slots=True)
class TyVar(TypeExpr):
    """Type variable, optionally carrying its kind."""

    name: str
    kind: Kind | None = None


@dataclass(frozen=True, slots=True)
class TyApp(TypeExpr):
    """Application of ``fn`` to a single argument."""

    fn: TypeExpr
    arg: TypeExpr


@dataclass(frozen=True, slots=True)
class SigT(TypeExpr):
    """Kind annotation ``(type :: kind)``."""

    type: TypeExpr
    kind: Kind


@dataclass(frozen=True, slots=True)
class TyVarBinder:
    """Binder introduced by a declaration head or a ``forall``."""

    name: str
    kind: Kind | None = None


@dataclass(frozen=True, slots=True)
class ForAll(TypeExpr):
    """Explicit quantifier; discarded by the classifier."""

    binders: tuple[TyVarBinder, ...]
    body: TypeExpr


@dataclass(frozen=True, slots=True)
class TyLit(TypeExpr):
    """Type-level symbol literal."""

    value: str


# ---------------------------------------------------------------------------
# Construction helpers

UNIT_CON = "()"
LIST_CON = "[]"
ARROW_CON = "->"


def tuple_con(arity: int) -> str:
    return "(" + "," * (arity - 1) + ")"


def con(name: str) -> TyCon:
    return TyCon(name)


def var(name: str, kind: Kind | None = None) -> TyVar:
    return TyVar(name, kind)


def app(head: TypeExpr | str, *args: TypeExpr | str) -> TypeExpr:
    """Left-fold ``head`` over ``args``; strings are promoted to constructors."""

    result = _coerce(head)
    for arg in args:
        result = TyApp(result, _coerce(arg))
    return result


def list_of(element: TypeExpr | str) -> TypeExpr:
    return app(LIST_CON, element)


def maybe(element: TypeExpr | str) -> TypeExpr:
    return app("Maybe", element)


def either(left: TypeExpr | str, right: TypeExpr | str) -> TypeExpr:
    return app("Either", left, right)


def fun(domain: TypeExpr | str, codomain: TypeExpr | str) -> TypeExpr:
    return app(ARROW_CON, domain, codomain)


def tuple_of(*elements: TypeExpr | str) -> TypeExpr:
    if len(elements) == 0:
        return TyCon(UNIT_CON)
    if len(elements) == 1:
        return _coerce(elements[0])
    return app(tuple_con(len(elements)), *elements)


def unapply(typ: TypeExpr) -> tuple[TypeExpr, list[TypeExpr]]:
    """Split ``typ`` into its head and ordered arguments.

    Kind annotations and quantifiers along the spine are peeled off, so the
    result loses any ``forall`` context the expression carried.
    """

    args: list[TypeExpr] = []
    current = typ
    while True:
        if isinstance(current, TyApp):
            args.append(current.arg)
            current = current.fn
        elif isinstance(current, SigT):
            current = current.type
        elif isinstance(current, ForAll):
            current = current.body
        else:
            break
    args.reverse()
    return current, args


def strip_annotations(typ: TypeExpr) -> TypeExpr:
    while isinstance(typ, (SigT, ForAll)):
        typ = typ.type if isinstance(typ, SigT) else typ.body
    return typ


def bare_variable(typ: TypeExpr) -> TyVar | None:
    """Return the variable when ``typ`` is a bare, optionally kinded, variable."""

    if isinstance(typ, TyVar):
        return typ
    if isinstance(typ, SigT):
        return bare_variable(typ.type)
    return None


def format_type_expr(typ: TypeExpr) -> str:
    """Render ``typ`` in Haskell-like syntax for diagnostics."""

    head, args = unapply(typ)
    if isinstance(head, TyCon):
        if head.name == LIST_CON and len(args) == 1:
            return f"[{format_type_expr(args[0])}]"
        if head.name == ARROW_CON and len(args) == 2:
            return f"{_format_atom(args[0], arrow=True)} -> {format_type_expr(args[1])}"
        if _is_tuple_con(head.name) and len(args) == len(head.name) - 1:
            return "(" + ", ".join(format_type_expr(arg) for arg in args) + ")"
    rendered = [_format_head(head), *(_format_atom(arg) for arg in args)]
    return " ".join(rendered)


def _format_head(head: TypeExpr) -> str:
    if isinstance(head, TyCon):
        return head.name
    if isinstance(head, TyVar):
        return head.name
    if isinstance(head, TyLit):
        return f'"{head.value}"'
    raise TypeError(f"Unsupported type expression {head!r}")


def _format_atom(typ: TypeExpr, *, arrow: bool = False) -> str:
    text = format_type_expr(typ)
    head, args = unapply(typ)
    if not args:
        return text
    if isinstance(head, TyCon) and (
        (head.name == LIST_CON and len(args) == 1)
        or (_is_tuple_con(head.name) and len(args) == len(head.name) - 1)
    ):
        return text
    if arrow and not (isinstance(head, TyCon) and head.name == ARROW_CON):
        return text
    return f"({text})"


def _is_tuple_con(name: str) -> bool:
    return len(name) >= 3 and name[0] == "(" and name[-1] == ")" and set(name[1:-1]) == {","}


def _coerce(value: TypeExpr | str) -> TypeExpr:
    if isinstance(value, TypeExpr):
        return value
    if isinstance(value, str):
        return TyCon(value)
    raise TypeError(f"expected a type expression, received {type(value).__name__}")


def binder_names(binders: Iterable[TyVarBinder]) -> list[str]:
    return [binder.name for binder in binders]


def binders_from(names: Sequence[str | TyVarBinder]) -> tuple[TyVarBinder, ...]:
    return tuple(name if isinstance(name, TyVarBinder) else TyVarBinder(name) for name in names)


__all__ = [
    "ARROW_CON",
    "ForAll",
    "Kind",
    "KindArrow",
    "KindVar",
    "LIST_CON",
    "STAR",
    "SigT",
    "Star",
    "TyApp",
    "TyCon",
    "TyLit",
    "TyVar",
    "TyVarBinder",
    "TypeExpr",
    "UNIT_CON",
    "app",
    "bare_variable",
    "binder_names",
    "binders_from",
    "con",
    "either",
    "format_kind",
    "format_type_expr",
    "fun",
    "list_of",
    "maybe",
    "strip_annotations",
    "tuple_con",
    "tuple_of",
    "unapply",
    "var",
]
