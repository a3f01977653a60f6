"""Classification of source-side type expressions into Swift :mod:`ty` nodes.

Three entry points share one fixed mapping table:

``classify``
    Normal classification.  Heads are looked up in the primitive table or in
    the :class:`TypeLookup` of user declarations; arguments are classified
    recursively.  A bare type variable has no mapping here.

``classify_poly``
    Hole-filling classification used for every field of a declaration body.
    Free variables become :class:`~shwifty.codegen.ty.Poly` placeholders no
    matter how deeply they are nested.  The expression is stretched out along
    its application spine into a :class:`Rose` tree, every variable leaf is
    replaced with the ``SingSymbol "NAME"`` marker, the tree is folded back
    into a single expression and the result goes through ``classify``.  The
    marker has its own row in the table, so placeholders are produced by the
    same path as every other type.

    ``compress(decompress(t))`` is not the identity: kind annotations and
    ``forall`` quantifiers on the spine are dropped and must not be relied on
    afterwards.

``classify_constraint``
    Used for a declaration's own parameters: a variable maps to whatever the
    environment binds it to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping, Protocol, Sequence

from . import ty
from .errors import UnknownType
from .typexpr import (
    TyApp,
    TyCon,
    TyLit,
    TypeExpr,
    TyVar,
    bare_variable,
    format_type_expr,
    unapply,
)

SING_SYMBOL = "SingSymbol"


class SwiftInstance(Protocol):
    """Anything that can turn classified type arguments into a ``Ty``."""

    arity: int

    def to_swift(self, *args: ty.Ty) -> ty.Ty: ...


TypeLookup = Mapping[str, SwiftInstance]


# ---------------------------------------------------------------------------
# Primitive mapping table

Classify = Callable[[TypeExpr], ty.Ty]
_Rule = Callable[[Sequence[TypeExpr], Classify], ty.Ty]

NULLARY: dict[str, ty.Ty] = {
    "()": ty.UNIT,
    "Bool": ty.BOOL,
    "Char": ty.CHARACTER,
    "String": ty.STRING,
    "Text": ty.STRING,
    "ByteString": ty.STRING,
    "Int": ty.INT,
    "Int8": ty.INT8,
    "Int16": ty.INT16,
    "Int32": ty.INT32,
    "Int64": ty.INT64,
    "Word": ty.UINT,
    "Word8": ty.UINT8,
    "Word16": ty.UINT16,
    "Word32": ty.UINT32,
    "Word64": ty.UINT64,
    "Float": ty.FLOAT32,
    "Double": ty.FLOAT64,
    "Decimal": ty.DECIMAL,
    "Scientific": ty.DECIMAL,
    "Integer": ty.BIG_INT,
    "UUID": ty.UUID,
    "UTCTime": ty.DATE,
    "Day": ty.DATE,
}


def _list_rule(args: Sequence[TypeExpr], recurse: Classify) -> ty.Ty:
    (element,) = args
    if isinstance(element, TyCon) and element.name == "Char":
        return ty.STRING
    return ty.Array(recurse(element))


def _sing_symbol_rule(args: Sequence[TypeExpr], recurse: Classify) -> ty.Ty:
    (literal,) = args
    if not isinstance(literal, TyLit):
        raise UnknownType(format_type_expr(TyApp(TyCon(SING_SYMBOL), literal)), "expected a symbol")
    return ty.Poly(literal.value)


APPLIED: dict[str, tuple[int, _Rule]] = {
    "Maybe": (1, lambda args, rec: ty.Optional(rec(args[0]))),
    # Swift's Result lists the success type first.
    "Either": (2, lambda args, rec: ty.Result(rec(args[1]), rec(args[0]))),
    "[]": (1, _list_rule),
    "Vector": (1, lambda args, rec: ty.Array(rec(args[0]))),
    "Map": (2, lambda args, rec: ty.Dictionary(rec(args[0]), rec(args[1]))),
    "HashMap": (2, lambda args, rec: ty.Dictionary(rec(args[0]), rec(args[1]))),
    "(,)": (2, lambda args, rec: ty.Tuple2(rec(args[0]), rec(args[1]))),
    "(,,)": (3, lambda args, rec: ty.Tuple3(rec(args[0]), rec(args[1]), rec(args[2]))),
    "->": (2, lambda args, rec: ty.App(rec(args[0]), rec(args[1]))),
    "CI": (1, lambda args, rec: ty.STRING),
    SING_SYMBOL: (1, _sing_symbol_rule),
}


def is_known_head(name: str) -> bool:
    return name in NULLARY or name in APPLIED


# ---------------------------------------------------------------------------
# Normal classification


def classify(expr: TypeExpr, registry: TypeLookup | None = None) -> ty.Ty:
    """Classify ``expr`` with the per-shape rules; variables are rejected."""

    return _classify(expr, registry or {}, None)


def classify_constraint(
    expr: TypeExpr,
    env: Mapping[str, ty.Ty],
    registry: TypeLookup | None = None,
) -> ty.Ty:
    """Classify ``expr`` resolving variables through ``env``."""

    return _classify(expr, registry or {}, env)


def _classify(
    expr: TypeExpr, registry: TypeLookup, env: Mapping[str, ty.Ty] | None
) -> ty.Ty:
    def recurse(sub: TypeExpr) -> ty.Ty:
        return _classify(sub, registry, env)

    head, args = unapply(expr)
    if isinstance(head, TyVar):
        if env is not None and not args and head.name in env:
            return env[head.name]
        raise UnknownType(
            format_type_expr(expr), f"type variable '{head.name}' has no Swift mapping"
        )
    if not isinstance(head, TyCon):
        raise UnknownType(format_type_expr(expr), "unsupported type head")

    name = head.name
    if name in NULLARY:
        if args:
            raise UnknownType(format_type_expr(expr), f"'{name}' takes no type arguments")
        return NULLARY[name]
    if name in APPLIED:
        arity, rule = APPLIED[name]
        if len(args) != arity:
            raise UnknownType(
                format_type_expr(expr),
                f"'{name}' expects {arity} type argument(s), got {len(args)}",
            )
        return rule(args, recurse)
    instance = registry.get(name)
    if instance is not None:
        if len(args) != instance.arity:
            raise UnknownType(
                format_type_expr(expr),
                f"'{name}' expects {instance.arity} type argument(s), got {len(args)}",
            )
        return instance.to_swift(*(recurse(arg) for arg in args))
    raise UnknownType(format_type_expr(expr), f"unknown type constructor '{name}'")


# ---------------------------------------------------------------------------
# Spine rewriting


@dataclass(frozen=True, slots=True)
class Rose:
    """A type stretched out along its spine: head label plus argument trees."""

    label: TypeExpr
    children: tuple["Rose", ...] = field(default_factory=tuple)

    def leaves(self) -> Iterator["Rose"]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()

    def map_leaves(self, fn: Callable[[TypeExpr], TypeExpr]) -> "Rose":
        if not self.children:
            return Rose(fn(self.label))
        return Rose(self.label, tuple(child.map_leaves(fn) for child in self.children))


def decompress(expr: TypeExpr) -> Rose:
    """Stretch ``expr`` out completely along its application spine."""

    head, args = unapply(expr)
    return Rose(head, tuple(decompress(arg) for arg in args))


def compress(tree: Rose) -> TypeExpr:
    """Fold a rose tree back into nested applications."""

    result = tree.label
    for child in tree.children:
        result = TyApp(result, compress(child))
    return result


def placeholder_name(name: str) -> str:
    return name.upper()


def sing_symbol(name: str) -> TypeExpr:
    """Marker type that classifies to ``Poly(name)``."""

    return TyApp(TyCon(SING_SYMBOL), TyLit(name))


def fill_holes(expr: TypeExpr) -> TypeExpr:
    """Replace every variable leaf of ``expr`` with its placeholder marker."""

    def rewrite(label: TypeExpr) -> TypeExpr:
        variable = bare_variable(label)
        if variable is None:
            return label
        return sing_symbol(placeholder_name(variable.name))

    return compress(decompress(expr).map_leaves(rewrite))


def classify_poly(expr: TypeExpr, registry: TypeLookup | None = None) -> ty.Ty:
    """Classify a field type, turning free variables into placeholders."""

    variable = bare_variable(expr)
    if variable is not None:
        return ty.Poly(placeholder_name(variable.name))
    return classify(fill_holes(expr), registry)


__all__ = [
    "APPLIED",
    "NULLARY",
    "Rose",
    "SING_SYMBOL",
    "SwiftInstance",
    "TypeLookup",
    "classify",
    "classify_constraint",
    "classify_poly",
    "compress",
    "decompress",
    "fill_holes",
    "is_known_head",
    "placeholder_name",
    "sing_symbol",
]
