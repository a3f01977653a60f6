"""Declaration descriptors: the normalized input to code generation.

A :class:`DatatypeInfo` describes one algebraic data type the way a reflection
layer reports it.  Names are simple identifiers, already unqualified and cased
as written in the source.  Descriptors can be built directly in code or loaded
from YAML documents of the form::

    declarations:
      - name: Barcode
        constructors:
          - name: Upc
            fields: [Int, Int, Int, Int]
          - name: QrCode
            fields: [String]
      - name: Person
        constructors:
          - name: Person
            fields:
              - {name: name, type: String}
              - {name: age, type: Int}

Field types are parsed with :func:`shwifty.codegen.parser.parse_type`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from . import parser
from .typexpr import TypeExpr, TyVarBinder

# Host features a reflection layer must have enabled for generated code to work.
REQUIRED_EXTENSIONS: tuple[str, ...] = ("ScopedTypeVariables", "DataKinds", "DuplicateRecordFields")


class DescriptorError(ValueError):
    """Raised when a descriptor document does not match the expected schema."""


class ConstructorVariant(str, enum.Enum):
    NORMAL = "normal"
    RECORD = "record"
    INFIX = "infix"


@dataclass(frozen=True, slots=True)
class FieldInfo:
    type: TypeExpr
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ConstructorInfo:
    """One data constructor; ``variables`` holds constructor-local binders."""

    name: str
    variant: ConstructorVariant = ConstructorVariant.NORMAL
    fields: tuple[FieldInfo, ...] = ()
    variables: tuple[TyVarBinder, ...] = ()

    @property
    def field_types(self) -> tuple[TypeExpr, ...]:
        return tuple(info.type for info in self.fields)


@dataclass(frozen=True, slots=True)
class DatatypeInfo:
    """Reflected data type: name, parameters and constructors.

    ``extensions`` lists the host features known to be enabled; ``None`` means
    the reflection layer did not report them and no check is made.
    """

    name: str
    variables: tuple[TyVarBinder, ...] = ()
    constructors: tuple[ConstructorInfo, ...] = ()
    extensions: frozenset[str] | None = None

    @property
    def arity(self) -> int:
        return len(self.variables)


def record(name: str, *fields: tuple[str, TypeExpr | str]) -> ConstructorInfo:
    """Convenience builder for a record constructor."""

    return ConstructorInfo(
        name,
        ConstructorVariant.RECORD,
        tuple(FieldInfo(_coerce_type(typ), label) for label, typ in fields),
    )


def normal(name: str, *types: TypeExpr | str) -> ConstructorInfo:
    """Convenience builder for a positional constructor."""

    return ConstructorInfo(
        name, ConstructorVariant.NORMAL, tuple(FieldInfo(_coerce_type(typ)) for typ in types)
    )


def infix(name: str, left: TypeExpr | str, right: TypeExpr | str) -> ConstructorInfo:
    return ConstructorInfo(
        name,
        ConstructorVariant.INFIX,
        (FieldInfo(_coerce_type(left)), FieldInfo(_coerce_type(right))),
    )


def datatype(
    name: str,
    variables: Sequence[str | TyVarBinder] = (),
    constructors: Sequence[ConstructorInfo] = (),
) -> DatatypeInfo:
    binders = tuple(_coerce_binder(item) for item in variables)
    return DatatypeInfo(name, binders, tuple(constructors))


# ---------------------------------------------------------------------------
# YAML loading


def load_descriptors(path: str | Path) -> list[DatatypeInfo]:
    """Load every declaration from the YAML document at ``path``."""

    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"descriptor file not found: {source_path}")
    try:
        data = yaml.safe_load(source_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise DescriptorError(f"failed to parse descriptors: {exc}") from exc
    return parse_document(data)


def parse_document(document: Any) -> list[DatatypeInfo]:
    if isinstance(document, Mapping) and "declarations" in document:
        entries = document["declarations"]
    elif isinstance(document, Mapping):
        entries = [document]
    else:
        entries = document
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        raise DescriptorError("descriptor document must be a mapping or a list of mappings")
    return [parse_descriptor(entry) for entry in entries]


def parse_descriptor(entry: Any) -> DatatypeInfo:
    """Normalise an in-memory mapping into :class:`DatatypeInfo`."""

    if not isinstance(entry, Mapping):
        raise DescriptorError("declaration entries must be mappings")
    name = _require_str(entry, "name")
    variables = tuple(_parse_binder(item) for item in _as_list(entry.get("params")))
    constructors = tuple(
        _parse_constructor(item, owner=name) for item in _as_list(entry.get("constructors"))
    )
    extensions_value = entry.get("extensions")
    extensions = None
    if extensions_value is not None:
        extensions = frozenset(str(item) for item in _as_list(extensions_value))
    return DatatypeInfo(name, variables, constructors, extensions)


def _parse_constructor(entry: Any, *, owner: str) -> ConstructorInfo:
    if not isinstance(entry, Mapping):
        raise DescriptorError(f"{owner}: constructor entries must be mappings")
    name = _require_str(entry, "name")
    raw_fields = _as_list(entry.get("fields"))
    fields = tuple(_parse_field(item, owner=name) for item in raw_fields)

    shape = entry.get("shape")
    if shape is None:
        labeled = [info.name is not None for info in fields]
        if fields and all(labeled):
            variant = ConstructorVariant.RECORD
        elif any(labeled):
            raise DescriptorError(f"{name}: mixing labeled and unlabeled fields")
        else:
            variant = ConstructorVariant.NORMAL
    else:
        try:
            variant = ConstructorVariant(str(shape).lower())
        except ValueError as exc:
            raise DescriptorError(f"{name}: unknown constructor shape {shape!r}") from exc
    if variant is ConstructorVariant.RECORD and any(info.name is None for info in fields):
        raise DescriptorError(f"{name}: record fields require a 'name'")

    existentials = tuple(_parse_binder(item) for item in _as_list(entry.get("existentials")))
    return ConstructorInfo(name, variant, fields, existentials)


def _parse_field(entry: Any, *, owner: str) -> FieldInfo:
    if isinstance(entry, str):
        return FieldInfo(_parse_type(entry, owner))
    if isinstance(entry, Mapping):
        type_text = entry.get("type")
        if not isinstance(type_text, str):
            raise DescriptorError(f"{owner}: field entries must declare a string 'type'")
        label = entry.get("name")
        if label is not None and not isinstance(label, str):
            raise DescriptorError(f"{owner}: field names must be strings")
        return FieldInfo(_parse_type(type_text, owner), label)
    raise DescriptorError(f"{owner}: fields must be strings or mappings")


def _parse_binder(entry: Any) -> TyVarBinder:
    if isinstance(entry, str):
        text = entry
    elif isinstance(entry, Mapping):
        name = _require_str(entry, "name")
        kind = entry.get("kind")
        text = name if kind is None else f"{name} :: {kind}"
    else:
        raise DescriptorError("type parameters must be strings or mappings")
    try:
        return parser.parse_binder(text)
    except parser.TypeParseError as exc:
        raise DescriptorError(f"invalid type parameter {text!r}: {exc}") from exc


def _parse_type(text: str, owner: str) -> TypeExpr:
    try:
        return parser.parse_type(text)
    except parser.TypeParseError as exc:
        raise DescriptorError(f"{owner}: invalid field type {text!r}: {exc}") from exc


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, Mapping)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    raise DescriptorError(f"expected a list, received {type(value).__name__}")


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise DescriptorError(f"descriptor missing required string field '{key}'")
    return value


def _coerce_type(value: TypeExpr | str) -> TypeExpr:
    if isinstance(value, str):
        return parser.parse_type(value)
    return value


def _coerce_binder(value: str | TyVarBinder) -> TyVarBinder:
    if isinstance(value, TyVarBinder):
        return value
    return parser.parse_binder(value)


__all__ = [
    "ConstructorInfo",
    "ConstructorVariant",
    "DatatypeInfo",
    "DescriptorError",
    "FieldInfo",
    "REQUIRED_EXTENSIONS",
    "datatype",
    "infix",
    "load_descriptors",
    "normal",
    "parse_descriptor",
    "parse_document",
    "record",
]
