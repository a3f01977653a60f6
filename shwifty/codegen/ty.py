"""Swift type AST produced by the classifier and consumed by the pretty printer.

The variant set is closed: every representable Swift type is either one of the
primitive singletons defined below, one of the composite dataclasses, a
polymorphic placeholder (:class:`Poly`) or a named application
(:class:`Concrete`).  All nodes are frozen dataclasses so equality, hashing and
printing are structural and values can be shared freely between declarations.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields
from typing import Iterator

# ---------------------------------------------------------------------------
# Base class


@dataclass(frozen=True, slots=True)
class Ty:
    """Base class for all Swift type nodes."""

    @property
    def node_type(self) -> str:
        return self.__class__.__name__

    def children(self) -> Iterator[Ty]:
        """Yield direct child types in declaration order."""

        for spec in fields(self):
            value = getattr(self, spec.name)
            if isinstance(value, Ty):
                yield value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Ty):
                        yield item

    def walk(self) -> Iterator[Ty]:
        """Depth-first traversal starting at this node."""

        yield self
        for child in self.children():
            yield from child.walk()


# ---------------------------------------------------------------------------
# Primitives


@dataclass(frozen=True, slots=True)
class Primitive(Ty):
    """Nullary Swift type identified by ``kind`` (e.g. ``"int64"``)."""

    kind: str

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Primitive({self.kind})"


UNIT = Primitive("unit")
BOOL = Primitive("bool")
CHARACTER = Primitive("character")
STRING = Primitive("string")
INT = Primitive("int")
INT8 = Primitive("int8")
INT16 = Primitive("int16")
INT32 = Primitive("int32")
INT64 = Primitive("int64")
UINT = Primitive("uint")
UINT8 = Primitive("uint8")
UINT16 = Primitive("uint16")
UINT32 = Primitive("uint32")
UINT64 = Primitive("uint64")
FLOAT32 = Primitive("float32")
FLOAT64 = Primitive("float64")
DECIMAL = Primitive("decimal")
BIG_SINT32 = Primitive("bigsint32")
BIG_SINT64 = Primitive("bigsint64")
UUID = Primitive("uuid")
DATE = Primitive("date")

PRIMITIVES: tuple[Primitive, ...] = (
    UNIT,
    BOOL,
    CHARACTER,
    STRING,
    INT,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    FLOAT32,
    FLOAT64,
    DECIMAL,
    BIG_SINT32,
    BIG_SINT64,
    UUID,
    DATE,
)

# Fixed once per process: arbitrary-precision integers follow the host word size.
WORD_SIZE_IN_BITS = struct.calcsize("P") * 8
BIG_INT = BIG_SINT32 if WORD_SIZE_IN_BITS == 32 else BIG_SINT64


# ---------------------------------------------------------------------------
# Composites


@dataclass(frozen=True, slots=True)
class Tuple2(Ty):
    first: Ty
    second: Ty


@dataclass(frozen=True, slots=True)
class Tuple3(Ty):
    first: Ty
    second: Ty
    third: Ty


@dataclass(frozen=True, slots=True)
class Optional(Ty):
    """``T?`` / ``Optional<T>``."""

    wrapped: Ty


@dataclass(frozen=True, slots=True)
class Result(Ty):
    """Swift ``Result<Success, Failure>``.

    The classifier stores the *second* branch of a source-side ``Either`` in
    ``success`` and the first in ``failure``, which is the order Swift expects.
    """

    success: Ty
    failure: Ty


@dataclass(frozen=True, slots=True)
class Dictionary(Ty):
    key: Ty
    value: Ty


@dataclass(frozen=True, slots=True)
class Array(Ty):
    element: Ty


@dataclass(frozen=True, slots=True)
class App(Ty):
    """Function type ``(domain) -> codomain``."""

    domain: Ty
    codomain: Ty


# ---------------------------------------------------------------------------
# Identifiers


@dataclass(frozen=True, slots=True)
class Poly(Ty):
    """Placeholder for a free type variable of the enclosing declaration."""

    name: str


@dataclass(frozen=True, slots=True)
class Concrete(Ty):
    """Named (possibly generic) type applied to ``ty_vars``."""

    name: str
    ty_vars: tuple[Ty, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.ty_vars, tuple):
            object.__setattr__(self, "ty_vars", tuple(self.ty_vars))


def placeholders(typ: Ty) -> list[str]:
    """Return the distinct placeholder names in ``typ`` in first-seen order."""

    seen: list[str] = []
    for node in typ.walk():
        if isinstance(node, Poly) and node.name not in seen:
            seen.append(node.name)
    return seen


__all__ = [
    "App",
    "Array",
    "BIG_INT",
    "BIG_SINT32",
    "BIG_SINT64",
    "BOOL",
    "CHARACTER",
    "Concrete",
    "DATE",
    "DECIMAL",
    "Dictionary",
    "FLOAT32",
    "FLOAT64",
    "INT",
    "INT16",
    "INT32",
    "INT64",
    "INT8",
    "Optional",
    "PRIMITIVES",
    "Poly",
    "Primitive",
    "Result",
    "STRING",
    "Tuple2",
    "Tuple3",
    "Ty",
    "UINT",
    "UINT16",
    "UINT32",
    "UINT64",
    "UINT8",
    "UNIT",
    "UUID",
    "WORD_SIZE_IN_BITS",
    "placeholders",
]
