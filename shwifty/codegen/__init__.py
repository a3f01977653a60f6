"""Swift code generation from algebraic data type descriptors."""

from .builder import (
    BatchResult,
    Generated,
    TypeInstance,
    TypeRegistry,
    build_data_decl,
    build_type_instance,
    get_shwifty,
    get_shwifty_many,
)
from .classifier import classify, classify_poly
from .decl import DataDecl, EnumCase, EnumDecl, Protocol, StructDecl
from .errors import ShwiftyError
from .options import DEFAULT_OPTIONS, Options
from .pretty import pretty_swift_data, pretty_ty, render

__all__ = [
    "BatchResult",
    "DEFAULT_OPTIONS",
    "DataDecl",
    "EnumCase",
    "EnumDecl",
    "Generated",
    "Options",
    "Protocol",
    "ShwiftyError",
    "StructDecl",
    "TypeInstance",
    "TypeRegistry",
    "build_data_decl",
    "build_type_instance",
    "classify",
    "classify_poly",
    "get_shwifty",
    "get_shwifty_many",
    "pretty_swift_data",
    "pretty_ty",
    "render",
]
