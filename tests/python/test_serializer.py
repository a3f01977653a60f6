"""Tests for canonical JSON serialisation of Swift types and declarations."""

import json

import pytest

from shwifty.codegen import serializer, ty
from shwifty.codegen.builder import build_data_decl
from shwifty.codegen.decl import EnumCase, EnumDecl, Protocol, StructDecl
from shwifty.codegen.descriptor import datatype, normal, record

SAMPLES = [
    ty.INT,
    ty.Optional(ty.Array(ty.Poly("A"))),
    ty.Result(ty.Tuple3(ty.BOOL, ty.STRING, ty.UUID), ty.App(ty.INT, ty.DATE)),
    ty.Dictionary(ty.STRING, ty.Concrete("Pair", (ty.INT, ty.Tuple2(ty.INT8, ty.UINT64)))),
    StructDecl(
        name="Person",
        protocols=(Protocol.CODABLE,),
        fields=(("name", ty.STRING), ("age", ty.Optional(ty.INT))),
    ),
    EnumDecl(
        name="Either",
        ty_vars=("A", "B"),
        cases=(
            EnumCase("left", ((None, ty.Poly("A")),)),
            EnumCase("right", (("value", ty.Poly("B")),)),
        ),
        raw_value=ty.STRING,
    ),
]


@pytest.mark.parametrize("value", SAMPLES, ids=lambda value: type(value).__name__)
def test_round_trip_is_canonical(value):
    payload = serializer.to_json(value)
    restored = serializer.from_json(payload)
    assert restored == value
    assert serializer.to_json(restored) == payload


def test_built_declarations_round_trip():
    info = datatype(
        "Shape",
        ["a"],
        [record("Circle", ("radius", "Double")), normal("Poly", "[a]")],
    )
    decl = build_data_decl(info)
    assert serializer.from_json(serializer.to_json(decl)) == decl


def test_ids_are_content_addressed():
    first = json.loads(serializer.to_json(ty.Optional(ty.INT)))
    second = json.loads(serializer.to_json(ty.Optional(ty.INT)))
    other = json.loads(serializer.to_json(ty.Optional(ty.INT64)))
    assert first["id"] == second["id"]
    assert first["id"] != other["id"]
    assert first["wrapped"]["type"] == "Primitive"


def test_corrupted_hash_is_detected():
    data = json.loads(serializer.to_json(SAMPLES[4]))
    data["fields"][0]["ty"]["kind"] = "int"
    with pytest.raises(ValueError, match="integrity"):
        serializer.from_json(json.dumps(data))


def test_missing_id_is_rejected():
    data = json.loads(serializer.to_json(ty.BOOL))
    del data["id"]
    with pytest.raises(ValueError, match="missing"):
        serializer.from_json(json.dumps(data))


def test_unknown_node_type_is_rejected():
    with pytest.raises(TypeError):
        serializer.to_payload("Int")
