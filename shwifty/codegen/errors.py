"""Structured errors raised while generating Swift declarations.

Every error is detected before any text is produced.  Messages name the
offending declaration, constructor or type so they can be surfaced verbatim by
callers such as the CLI.
"""

from __future__ import annotations

from typing import Sequence

from .typexpr import Kind, TyVarBinder, format_kind


class ShwiftyError(RuntimeError):
    """Base class for declaration and classification failures."""


class VoidType(ShwiftyError):
    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"{type_name}: Cannot get shwifty with void types. "
            f"{type_name} has no constructors. Try adding some!"
        )


class SingleConNonRecord(ShwiftyError):
    def __init__(self, con_name: str) -> None:
        self.con_name = con_name
        super().__init__(
            f"{con_name}: Cannot get shwifty with single-constructor non-record types. "
            "This is due to a restriction of Swift that prohibits structs from not "
            f"having named fields. Try turning {con_name} into a record!"
        )


class EncounteredInfixConstructor(ShwiftyError):
    def __init__(self, con_name: str) -> None:
        self.con_name = con_name
        super().__init__(
            f"{con_name}: Cannot get shwifty with infix constructors. "
            f"Swift doesn't support them. Try changing {con_name} into a prefix constructor!"
        )


class KindVariableCannotBeRealised(ShwiftyError):
    def __init__(self, type_name: str, variable: str, kind: Kind | None) -> None:
        self.type_name = type_name
        self.variable = variable
        self.kind = kind
        super().__init__(
            f"{type_name}: Encountered a type variable ({variable}) with a kind "
            f"({format_kind(kind)}) that can't get shwifty! Shwifty needs to be able "
            "to realise your kind variables to `*`, since that's all that makes sense "
            "in Swift. The only kinds that can happen with are `*` and the free-est "
            "kind, `k`."
        )


class ExtensionNotEnabled(ShwiftyError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"{extension} is not enabled. Shwifty needs it to work!")


class ExistentialTypes(ShwiftyError):
    def __init__(self, con_name: str, binders: Sequence[TyVarBinder]) -> None:
        self.con_name = con_name
        self.binders = tuple(binders)
        names = ", ".join(binder.name for binder in self.binders)
        super().__init__(
            f"{con_name} has existential type variables ({names})! "
            "Shwifty doesn't support these."
        )


class DuplicateFieldName(ShwiftyError):
    def __init__(self, type_name: str, label: str) -> None:
        self.type_name = type_name
        self.label = label
        super().__init__(
            f"{type_name}: Cannot get shwifty with two fields both named `{label}`. "
            "Check that your field label modifier keeps the names of "
            f"{type_name} distinct!"
        )


class UnknownType(ShwiftyError):
    """Raised when a type has no Swift mapping and no registered declaration."""

    def __init__(self, type_text: str, reason: str | None = None) -> None:
        self.type_text = type_text
        self.reason = reason
        message = f"No Swift type for `{type_text}`"
        if reason:
            message += f": {reason}"
        super().__init__(message)


__all__ = [
    "DuplicateFieldName",
    "EncounteredInfixConstructor",
    "ExistentialTypes",
    "ExtensionNotEnabled",
    "KindVariableCannotBeRealised",
    "ShwiftyError",
    "SingleConNonRecord",
    "UnknownType",
    "VoidType",
]
