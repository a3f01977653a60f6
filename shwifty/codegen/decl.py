"""Swift declarations (structs and enums) built from algebraic data types.

Single-constructor record types become structs, types with two or more
constructors become enums.  Both carry the uppercased generic parameter names of
the source declaration and the protocols requested through
:class:`~shwifty.codegen.options.Options`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .ty import Ty


class Protocol(str, enum.Enum):
    """Swift protocols the generator knows how to attach."""

    HASHABLE = "Hashable"
    CODABLE = "Codable"
    EQUATABLE = "Equatable"
    COMPARABLE = "Comparable"

    @classmethod
    def parse(cls, value: "str | Protocol") -> "Protocol":
        if isinstance(value, Protocol):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"Unknown protocol '{value}'")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class DataDecl:
    """Base class for generated declarations."""

    name: str
    ty_vars: tuple[str, ...] = ()
    protocols: tuple[Protocol, ...] = ()

    @property
    def kind(self) -> str:
        return "struct" if isinstance(self, StructDecl) else "enum"


@dataclass(frozen=True, slots=True)
class StructDecl(DataDecl):
    """Product type; ``fields`` is an ordered list of ``(name, type)`` pairs."""

    fields: tuple[tuple[str, Ty], ...] = ()

    def __post_init__(self) -> None:
        names = [name for name, _ in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate field names in struct {self.name}")


@dataclass(frozen=True, slots=True)
class EnumCase:
    """One enum case; unlabeled arguments carry ``None`` as their label."""

    name: str
    args: tuple[tuple[str | None, Ty], ...] = ()


@dataclass(frozen=True, slots=True)
class EnumDecl(DataDecl):
    """Sum type with at least two cases and an optional raw value type."""

    cases: tuple[EnumCase, ...] = field(default_factory=tuple)
    raw_value: Ty | None = None

    def __post_init__(self) -> None:
        if len(self.cases) < 2:
            raise ValueError(f"enum {self.name} requires at least two cases")


__all__ = ["DataDecl", "EnumCase", "EnumDecl", "Protocol", "StructDecl"]
