"""Canonical JSON serializer for Swift types and declarations.

Output is deterministic so generated artifacts can be cached and diffed.  Each
node carries a content-addressed ``id`` derived from its structural encoding;
the deserializer recomputes the hash to guarantee integrity.
"""

from __future__ import annotations

import hashlib
import json
from collections import OrderedDict
from dataclasses import fields
from typing import Any, Mapping

from . import ty
from .decl import DataDecl, EnumCase, EnumDecl, Protocol, StructDecl


def to_json(value: ty.Ty | DataDecl, *, ensure_ascii: bool = True) -> str:
    """Serialize ``value`` into canonical JSON."""

    payload = to_payload(value)
    return json.dumps(payload, indent=2, separators=(",", ": "), ensure_ascii=ensure_ascii)


def from_json(payload: str) -> ty.Ty | DataDecl:
    """Deserialize JSON produced by :func:`to_json`, validating all node hashes."""

    return from_payload(json.loads(payload))


def to_payload(value: ty.Ty | DataDecl) -> OrderedDict[str, Any]:
    """Plain-data form of ``value`` (used for JSON and YAML output)."""

    if isinstance(value, ty.Ty):
        return _serialize_ty(value)
    if isinstance(value, DataDecl):
        return _serialize_decl(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def from_payload(data: Mapping[str, Any]) -> ty.Ty | DataDecl:
    if data.get("type") in DECL_TYPES:
        return _deserialize_decl(data)
    return _deserialize_ty(data)


# ---------------------------------------------------------------------------
# Serialization helpers


def _serialize_ty(node: ty.Ty) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["type"] = node.node_type
    for field_info in fields(node):
        value = getattr(node, field_info.name)
        if isinstance(value, ty.Ty):
            data[field_info.name] = _serialize_ty(value)
        elif isinstance(value, tuple):
            data[field_info.name] = [_serialize_ty(item) for item in value]
        else:
            data[field_info.name] = value
    data["id"] = _hash_payload(data)
    return data


def _serialize_decl(decl: DataDecl) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["type"] = decl.__class__.__name__
    data["name"] = decl.name
    data["ty_vars"] = list(decl.ty_vars)
    data["protocols"] = [str(protocol) for protocol in decl.protocols]
    if isinstance(decl, StructDecl):
        data["fields"] = [
            OrderedDict([("name", name), ("ty", _serialize_ty(typ))]) for name, typ in decl.fields
        ]
    elif isinstance(decl, EnumDecl):
        data["cases"] = [_serialize_case(case) for case in decl.cases]
        data["raw_value"] = None if decl.raw_value is None else _serialize_ty(decl.raw_value)
    data["id"] = _hash_payload(data)
    return data


def _serialize_case(case: EnumCase) -> OrderedDict[str, Any]:
    payload = OrderedDict(
        [
            ("name", case.name),
            (
                "args",
                [
                    OrderedDict([("label", label), ("ty", _serialize_ty(typ))])
                    for label, typ in case.args
                ],
            ),
        ]
    )
    payload["id"] = _hash_payload(payload)
    return payload


def _hash_payload(data: Mapping[str, Any]) -> str:
    normalized = json.dumps(
        _strip_ids(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def _strip_ids(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {key: _strip_ids(value) for key, value in data.items() if key != "id"}
    if isinstance(data, list):
        return [_strip_ids(item) for item in data]
    return data


# ---------------------------------------------------------------------------
# Deserialization helpers


TY_TYPES: dict[str, type[ty.Ty]] = {
    cls.__name__: cls
    for cls in (
        ty.Primitive,
        ty.Tuple2,
        ty.Tuple3,
        ty.Optional,
        ty.Result,
        ty.Dictionary,
        ty.Array,
        ty.App,
        ty.Poly,
        ty.Concrete,
    )
}

DECL_TYPES: dict[str, type[DataDecl]] = {cls.__name__: cls for cls in (StructDecl, EnumDecl)}


def _deserialize_ty(data: Mapping[str, Any]) -> ty.Ty:
    _verify_hash(data)
    node_type = data.get("type")
    if node_type not in TY_TYPES:
        raise ValueError(f"Unknown type node '{node_type}'")
    cls = TY_TYPES[node_type]
    kwargs: dict[str, Any] = {}
    for field_info in fields(cls):
        raw_value = data.get(field_info.name)
        if isinstance(raw_value, Mapping):
            kwargs[field_info.name] = _deserialize_ty(raw_value)
        elif isinstance(raw_value, list):
            kwargs[field_info.name] = tuple(_deserialize_ty(item) for item in raw_value)
        else:
            kwargs[field_info.name] = raw_value
    return cls(**kwargs)


def _deserialize_decl(data: Mapping[str, Any]) -> DataDecl:
    _verify_hash(data)
    cls = DECL_TYPES[data["type"]]
    common: dict[str, Any] = {
        "name": data["name"],
        "ty_vars": tuple(data.get("ty_vars", ())),
        "protocols": tuple(Protocol.parse(item) for item in data.get("protocols", ())),
    }
    if cls is StructDecl:
        return StructDecl(
            **common,
            fields=tuple(
                (entry["name"], _deserialize_ty(entry["ty"])) for entry in data.get("fields", ())
            ),
        )
    raw_value = data.get("raw_value")
    return EnumDecl(
        **common,
        cases=tuple(_deserialize_case(entry) for entry in data.get("cases", ())),
        raw_value=None if raw_value is None else _deserialize_ty(raw_value),
    )


def _deserialize_case(data: Mapping[str, Any]) -> EnumCase:
    _verify_hash(data)
    return EnumCase(
        name=data["name"],
        args=tuple((entry.get("label"), _deserialize_ty(entry["ty"])) for entry in data["args"]),
    )


def _verify_hash(data: Mapping[str, Any]) -> None:
    stored = data.get("id")
    if stored is None:
        raise ValueError("Serialized node is missing 'id'")
    computed = _hash_payload(data)
    if stored != computed:
        raise ValueError("Serialized node failed integrity check")


__all__ = ["from_json", "from_payload", "to_json", "to_payload"]
