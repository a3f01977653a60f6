"""Options controlling how declarations are built and rendered."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Sequence

from . import classifier, parser
from .decl import Protocol
from .ty import Ty

NameModifier = Callable[[str], str]


def identity(name: str) -> str:
    return name


def camel_case(name: str) -> str:
    """``snake_case`` to ``camelCase``; leading underscores are dropped."""

    parts = [part for part in name.split("_") if part]
    if not parts:
        return name
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def drop_prefix(prefix: str) -> NameModifier:
    def modifier(name: str) -> str:
        if prefix and name.startswith(prefix) and len(name) > len(prefix):
            return name[len(prefix) :]
        return name

    modifier.__name__ = f"drop_prefix_{prefix}"
    return modifier


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def modifier_from_spec(spec: str | NameModifier | None) -> NameModifier:
    """Resolve a named rewrite (``identity``, ``camel_case``, ``drop_prefix:p``)."""

    if spec is None:
        return identity
    if callable(spec):
        return spec
    if not isinstance(spec, str):
        raise TypeError(f"name modifier must be a string or callable, received {type(spec).__name__}")
    key, _, argument = spec.partition(":")
    key = key.strip()
    if key in {"", "identity", "id"}:
        return identity
    if key == "camel_case":
        return camel_case
    if key == "drop_prefix":
        if not argument:
            raise ValueError("drop_prefix requires a prefix, e.g. 'drop_prefix:_person'")
        return drop_prefix(argument)
    raise ValueError(f"Unknown name modifier '{spec}'")


@dataclass(frozen=True, slots=True)
class Options:
    """How to encode a declaration as Swift.

    ``field_label_modifier`` and ``constructor_modifier`` rewrite record labels
    and constructor names.  ``optional_expand`` renders ``Optional<A>`` rather
    than the ``A?`` sugar.  ``indent`` is the number of spaces before fields and
    cases.  ``generate_to_swift`` / ``generate_to_swift_data`` toggle the
    type-level and declaration-level artifacts independently.
    ``data_protocols`` are attached to every declaration; ``data_raw_value``
    only to enums.  Nothing checks that a raw value type is sensible.
    """

    field_label_modifier: NameModifier = identity
    constructor_modifier: NameModifier = identity
    optional_expand: bool = False
    indent: int = 4
    generate_to_swift: bool = True
    generate_to_swift_data: bool = True
    data_protocols: tuple[Protocol, ...] = field(default_factory=tuple)
    data_raw_value: Ty | None = None

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError("indent must be non-negative")
        object.__setattr__(
            self, "data_protocols", tuple(Protocol.parse(p) for p in self.data_protocols)
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Options":
        """Build options from a configuration mapping (e.g. parsed YAML)."""

        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("options must be a mapping")
        return cls().merge(data)

    def merge(self, overrides: Mapping[str, Any] | None) -> "Options":
        """Return a copy with ``overrides`` applied; unknown keys are rejected."""

        if not overrides:
            return self
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key == "field_label_modifier":
                changes[key] = modifier_from_spec(value)
            elif key == "constructor_modifier":
                changes[key] = modifier_from_spec(value)
            elif key == "optional_expand":
                changes[key] = _coerce_bool(key, value)
            elif key == "indent":
                changes[key] = int(value)
            elif key in {"generate_to_swift", "generate_to_swift_data"}:
                changes[key] = _coerce_bool(key, value)
            elif key in {"protocols", "data_protocols"}:
                changes["data_protocols"] = _parse_protocols(value)
            elif key in {"raw_value", "data_raw_value"}:
                changes["data_raw_value"] = _parse_raw_value(value)
            else:
                raise ValueError(f"Unknown option '{key}'")
        return replace(self, **changes)


DEFAULT_OPTIONS = Options()


def _coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "yes", "1", "false", "no", "0"}:
        return value.lower() in {"true", "yes", "1"}
    raise ValueError(f"option '{key}' must be a boolean")


def _parse_protocols(value: Any) -> tuple[Protocol, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Protocol)):
        return (Protocol.parse(value),)
    if isinstance(value, Sequence):
        return tuple(Protocol.parse(item) for item in value)
    raise TypeError("protocols must be a string or a list of strings")


def _parse_raw_value(value: Any) -> Ty | None:
    if value is None or isinstance(value, Ty):
        return value
    if isinstance(value, str):
        return classifier.classify(parser.parse_type(value))
    raise TypeError("raw_value must be a type expression string")


__all__ = [
    "DEFAULT_OPTIONS",
    "NameModifier",
    "Options",
    "camel_case",
    "drop_prefix",
    "identity",
    "lower_first",
    "modifier_from_spec",
]
