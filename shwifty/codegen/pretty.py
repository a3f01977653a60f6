"""Render Swift types and declarations as source text.

Rendering is a pure function of its inputs; the only knobs are
``Options.optional_expand`` (``A?`` versus ``Optional<A>``) and
``Options.indent``.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from . import ty
from .decl import DataDecl, EnumCase, EnumDecl, Protocol, StructDecl
from .options import DEFAULT_OPTIONS, Options

PRIMITIVE_NAMES: dict[ty.Primitive, str] = {
    ty.UNIT: "()",
    ty.BOOL: "Bool",
    ty.CHARACTER: "Character",
    ty.STRING: "String",
    ty.INT: "Int",
    ty.INT8: "Int8",
    ty.INT16: "Int16",
    ty.INT32: "Int32",
    ty.INT64: "Int64",
    ty.UINT: "UInt",
    ty.UINT8: "UInt8",
    ty.UINT16: "UInt16",
    ty.UINT32: "UInt32",
    ty.UINT64: "UInt64",
    ty.FLOAT32: "Float",
    ty.FLOAT64: "Double",
    ty.DECIMAL: "Decimal",
    ty.BIG_SINT32: "BigSInt32",
    ty.BIG_SINT64: "BigSInt64",
    ty.UUID: "UUID",
    ty.DATE: "Date",
}


def pretty_ty(typ: ty.Ty, options: Options = DEFAULT_OPTIONS) -> str:
    """Render ``typ`` as a Swift type."""

    def pretty(t: ty.Ty) -> str:
        if isinstance(t, ty.Primitive):
            return PRIMITIVE_NAMES[t]
        if isinstance(t, ty.Tuple2):
            return f"({pretty(t.first)}, {pretty(t.second)})"
        if isinstance(t, ty.Tuple3):
            return f"({pretty(t.first)}, {pretty(t.second)}, {pretty(t.third)})"
        if isinstance(t, ty.Optional):
            if options.optional_expand:
                return f"Optional<{pretty(t.wrapped)}>"
            return f"{pretty(t.wrapped)}?"
        if isinstance(t, ty.Result):
            return f"Result<{pretty(t.success)}, {pretty(t.failure)}>"
        if isinstance(t, ty.Dictionary):
            return f"Dictionary<{pretty(t.key)}, {pretty(t.value)}>"
        if isinstance(t, ty.Array):
            return f"Array<{pretty(t.element)}>"
        if isinstance(t, ty.App):
            return f"(({pretty(t.domain)}) -> {pretty(t.codomain)})"
        if isinstance(t, ty.Poly):
            return t.name
        if isinstance(t, ty.Concrete):
            if not t.ty_vars:
                return t.name
            return f"{t.name}<{', '.join(pretty(arg) for arg in t.ty_vars)}>"
        raise TypeError(f"Unsupported Swift type {t!r}")

    return pretty(typ)


def pretty_swift_data(decl: DataDecl, options: Options = DEFAULT_OPTIONS) -> str:
    """Render a struct or enum declaration, honouring ``options.indent``."""

    if isinstance(decl, StructDecl):
        return _emit_struct(decl, options)
    if isinstance(decl, EnumDecl):
        return _emit_enum(decl, options)
    raise TypeError(f"Unsupported declaration {decl!r}")


def render(value: ty.Ty | DataDecl, options: Options = DEFAULT_OPTIONS) -> str:
    if isinstance(value, ty.Ty):
        return pretty_ty(value, options)
    return pretty_swift_data(value, options)


def _emit_struct(decl: StructDecl, options: Options) -> str:
    header = f"struct {_type_header(decl.name, decl.ty_vars)}{_protocols(decl.protocols)}"
    if not decl.fields:
        return header + " { }"
    lines: list[str] = [header + " {"]
    for name, typ in decl.fields:
        lines.append(_indent(f"let {name}: {pretty_ty(typ, options)}", options))
    lines.append("}")
    return "\n".join(lines)


def _emit_enum(decl: EnumDecl, options: Options) -> str:
    header = (
        f"enum {_type_header(decl.name, decl.ty_vars)}"
        f"{_raw_value_and_protocols(decl.raw_value, decl.protocols, options)}"
    )
    lines: list[str] = [header + " {"]
    lines.extend(_indent(_emit_case(case, options), options) for case in decl.cases)
    lines.append("}")
    return "\n".join(lines)


def _emit_case(case: EnumCase, options: Options) -> str:
    if not case.args:
        return f"case {case.name}"
    args = ", ".join(_label_case(label, typ, options) for label, typ in case.args)
    return f"case {case.name}({args})"


def _label_case(label: str | None, typ: ty.Ty, options: Options) -> str:
    if label is None:
        return pretty_ty(typ, options)
    return f"{label}: {pretty_ty(typ, options)}"


def _type_header(name: str, ty_vars: Sequence[str]) -> str:
    if not ty_vars:
        return name
    return f"{name}<{', '.join(ty_vars)}>"


def _raw_value_and_protocols(
    raw_value: ty.Ty | None, protocols: Sequence[Protocol], options: Options
) -> str:
    if raw_value is None:
        return _protocols(protocols)
    names = [pretty_ty(raw_value, options), *_protocol_names(protocols)]
    return ": " + ", ".join(names)


def _protocols(protocols: Sequence[Protocol]) -> str:
    if not protocols:
        return ""
    return ": " + ", ".join(_protocol_names(protocols))


def _protocol_names(protocols: Iterable[Protocol]) -> list[str]:
    return [str(protocol) for protocol in protocols]


def _indent(text: str, options: Options) -> str:
    return " " * options.indent + text


__all__ = ["PRIMITIVE_NAMES", "pretty_swift_data", "pretty_ty", "render"]
