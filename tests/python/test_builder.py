"""Tests for building Swift declarations from datatype descriptors."""

from __future__ import annotations

from dataclasses import replace

import pytest

from shwifty.codegen import ty
from shwifty.codegen.builder import (
    TypeInstance,
    TypeRegistry,
    build_data_decl,
    build_type_instance,
    get_shwifty,
    get_shwifty_many,
)
from shwifty.codegen.decl import EnumDecl, Protocol, StructDecl
from shwifty.codegen.descriptor import (
    REQUIRED_EXTENSIONS,
    ConstructorInfo,
    ConstructorVariant,
    FieldInfo,
    datatype,
    infix,
    normal,
    record,
)
from shwifty.codegen.errors import (
    DuplicateFieldName,
    EncounteredInfixConstructor,
    ExistentialTypes,
    ExtensionNotEnabled,
    KindVariableCannotBeRealised,
    SingleConNonRecord,
    UnknownType,
    VoidType,
)
from shwifty.codegen.options import Options, camel_case, drop_prefix
from shwifty.codegen.parser import parse_binder, parse_type
from shwifty.codegen.pretty import pretty_swift_data, pretty_ty

BARCODE = datatype(
    "Barcode",
    constructors=[normal("Upc", "Int", "Int", "Int", "Int"), normal("QrCode", "String")],
)

PERSON = datatype(
    "Person",
    constructors=[
        record(
            "Person",
            ("name", "String"),
            ("age", "Int"),
            ("numOfChildren", "Maybe Int"),
            ("moneyInBankAccount", "Decimal"),
        )
    ],
)


def _existential(name: str, *binders: str) -> ConstructorInfo:
    return ConstructorInfo(
        name,
        ConstructorVariant.NORMAL,
        (FieldInfo(parse_type(binders[0])),),
        tuple(parse_binder(binder) for binder in binders),
    )


def test_barcode_enum() -> None:
    decl = build_data_decl(BARCODE)

    assert isinstance(decl, EnumDecl)
    assert pretty_swift_data(decl) == (
        "enum Barcode {\n"
        "    case upc(Int, Int, Int, Int)\n"
        "    case qrCode(String)\n"
        "}"
    )


def test_person_struct() -> None:
    decl = build_data_decl(PERSON)

    assert isinstance(decl, StructDecl)
    assert decl.fields[2] == ("numOfChildren", ty.Optional(ty.INT))
    assert pretty_swift_data(decl) == (
        "struct Person {\n"
        "    let name: String\n"
        "    let age: Int\n"
        "    let numOfChildren: Int?\n"
        "    let moneyInBankAccount: Decimal\n"
        "}"
    )


@pytest.mark.parametrize(
    "constructor", [normal("Marker"), record("Marker")], ids=["positional", "record"]
)
def test_fieldless_single_constructor_is_empty_struct(constructor: ConstructorInfo) -> None:
    decl = build_data_decl(datatype("Marker", constructors=[constructor]))

    assert decl == StructDecl(name="Marker")
    assert pretty_swift_data(decl) == "struct Marker { }"


def test_generic_enum_with_labels_and_nullary_case() -> None:
    info = datatype(
        "SumType",
        ["a", "b", "c"],
        [
            normal("Sum1", "Int", "a", "Maybe b"),
            normal("Sum2", "b"),
            record("Sum3", ("X", "Int"), ("y", "Int")),
            normal("Sum4"),
        ],
    )

    assert pretty_swift_data(build_data_decl(info)) == (
        "enum SumType<A, B, C> {\n"
        "    case sum1(Int, A, B?)\n"
        "    case sum2(B)\n"
        "    case sum3(x: Int, y: Int)\n"
        "    case sum4\n"
        "}"
    )


def test_field_label_modifier_then_lower_first() -> None:
    info = datatype(
        "Person",
        constructors=[record("Person", ("_personName", "String"), ("_personAge", "Int"))],
    )
    options = Options(field_label_modifier=drop_prefix("_person"))

    decl = build_data_decl(info, options)

    assert [label for label, _ in decl.fields] == ["name", "age"]


def test_enum_name_modifiers() -> None:
    info = datatype(
        "Shape",
        constructors=[
            record("Circle", ("Radius", "Double")),
            normal("Square", "Double"),
        ],
    )
    options = Options(constructor_modifier=str.upper, field_label_modifier=lambda s: s + "_")

    decl = build_data_decl(info, options)

    assert [case.name for case in decl.cases] == ["CIRCLE", "SQUARE"]
    assert decl.cases[0].args == (("radius_", ty.FLOAT64),)


def test_protocols_on_every_declaration_raw_value_only_on_enums() -> None:
    options = Options(
        data_protocols=(Protocol.CODABLE, Protocol.HASHABLE), data_raw_value=ty.STRING
    )

    struct = build_data_decl(PERSON, options)
    enum = build_data_decl(
        datatype("Direction", constructors=[normal("North"), normal("South")]), options
    )

    assert struct.protocols == enum.protocols == (Protocol.CODABLE, Protocol.HASHABLE)
    assert not hasattr(struct, "raw_value")
    assert enum.raw_value == ty.STRING
    assert pretty_swift_data(struct).splitlines()[0] == "struct Person: Codable, Hashable {"
    assert pretty_swift_data(enum).splitlines()[0] == "enum Direction: String, Codable, Hashable {"


def test_recursive_type_refers_to_itself() -> None:
    info = datatype("List", ["a"], [normal("Nil"), normal("Cons", "a", "List a")])

    assert pretty_swift_data(build_data_decl(info)) == (
        "enum List<A> {\n"
        "    case nil\n"
        "    case cons(A, List<A>)\n"
        "}"
    )


def test_registered_types_are_concrete_fields() -> None:
    registry = TypeRegistry([TypeInstance("MyFirstType", ("a",))])
    info = datatype("Holder", constructors=[record("Holder", ("thing", "MyFirstType Int"))])

    decl = build_data_decl(info, registry=registry)

    assert decl.fields == (("thing", ty.Concrete("MyFirstType", (ty.INT,))),)


def test_unknown_field_type_is_reported() -> None:
    info = datatype("Holder", constructors=[record("Holder", ("thing", "Mystery"))])

    with pytest.raises(UnknownType, match="Mystery"):
        build_data_decl(info)


def test_type_instance_generic_form() -> None:
    info = datatype("Pair", ["a", "b"], [record("Pair", ("first", "a"), ("second", "b"))])

    instance = build_type_instance(info)

    assert instance == TypeInstance("Pair", ("a", "b"))
    assert pretty_ty(instance.to_swift()) == "Pair<A, B>"
    assert instance.to_swift(ty.INT, ty.STRING) == ty.Concrete("Pair", (ty.INT, ty.STRING))
    with pytest.raises(ValueError):
        instance.to_swift(ty.INT)


def test_void_type() -> None:
    with pytest.raises(VoidType, match="Void"):
        build_data_decl(datatype("Void"))


@pytest.mark.parametrize(
    "constructor",
    [normal("Wrap", "Int"), normal("MkPoint", "Int", "Int")],
    ids=["one-field", "two-fields"],
)
def test_single_positional_constructor_is_rejected(constructor: ConstructorInfo) -> None:
    with pytest.raises(SingleConNonRecord) as excinfo:
        build_data_decl(datatype("Point", constructors=[constructor]))
    assert excinfo.value.con_name == constructor.name


def test_colliding_field_labels_are_rejected() -> None:
    info = datatype("Bad", constructors=[record("Bad", ("foo_bar", "Int"), ("fooBar", "Int"))])

    with pytest.raises(DuplicateFieldName) as excinfo:
        build_data_decl(info, Options(field_label_modifier=camel_case))
    assert excinfo.value.type_name == "Bad"
    assert excinfo.value.label == "fooBar"
    assert build_data_decl(info).fields[0][0] == "foo_bar"


def test_colliding_field_labels_only_fail_their_declaration() -> None:
    bad = datatype("Bad", constructors=[record("Bad", ("foo_bar", "Int"), ("fooBar", "Int"))])
    flag = datatype("Flag", constructors=[normal("On"), normal("Off")])

    result = get_shwifty_many([bad, flag], Options(field_label_modifier=camel_case))

    assert list(result.errors) == ["Bad"]
    assert isinstance(result.errors["Bad"], DuplicateFieldName)
    assert [item.name for item in result.generated] == ["Flag"]


def test_infix_constructors_are_rejected_in_structs_and_enums() -> None:
    with pytest.raises(EncounteredInfixConstructor):
        build_data_decl(datatype("Pair", constructors=[infix(":*:", "Int", "Int")]))
    with pytest.raises(EncounteredInfixConstructor) as excinfo:
        build_data_decl(
            datatype("Expr", constructors=[normal("Lit", "Int"), infix(":+:", "Int", "Int")])
        )
    assert excinfo.value.con_name == ":+:"


def test_existential_constructors_are_rejected() -> None:
    info = datatype("Some", constructors=[_existential("MkSome", "x")])

    with pytest.raises(ExistentialTypes, match="MkSome"):
        build_data_decl(info)
    with pytest.raises(ExistentialTypes):
        build_type_instance(info)


def test_higher_kinded_parameter_is_rejected() -> None:
    info = datatype("Wrap", ["f :: * -> *"], [record("Wrap", ("unwrap", "f Int"))])

    with pytest.raises(KindVariableCannotBeRealised) as excinfo:
        build_data_decl(info)
    assert excinfo.value.variable == "f"
    assert "* -> *" in str(excinfo.value)


def test_star_and_free_kinds_are_accepted() -> None:
    info = datatype("Tagged", ["(t :: k)", "a :: *"], [record("Tagged", ("value", "a"))])

    decl = build_data_decl(info)

    assert decl.ty_vars == ("T", "A")


def test_checks_run_in_a_fixed_order() -> None:
    infix_and_existential = replace(infix(":&:", "x", "Int"), variables=(parse_binder("x"),))
    with pytest.raises(EncounteredInfixConstructor):
        build_data_decl(datatype("Both", constructors=[infix_and_existential]))

    existential_and_kind = datatype(
        "Both", ["f :: * -> *"], [_existential("MkBoth", "x"), normal("Other")]
    )
    with pytest.raises(ExistentialTypes):
        build_data_decl(existential_and_kind)


def test_missing_extension_is_reported_first() -> None:
    info = replace(datatype("Void"), extensions=frozenset({"DataKinds"}))

    with pytest.raises(ExtensionNotEnabled) as excinfo:
        get_shwifty(info)
    assert excinfo.value.extension == "ScopedTypeVariables"

    enabled = replace(BARCODE, extensions=frozenset(REQUIRED_EXTENSIONS))
    assert get_shwifty(enabled).data is not None


def test_generation_toggles() -> None:
    both = get_shwifty(BARCODE)
    data_only = get_shwifty(BARCODE, Options(generate_to_swift=False))
    instance_only = get_shwifty(BARCODE, Options(generate_to_swift_data=False))

    assert both.data is not None and both.instance is not None
    assert data_only.instance is None and data_only.swift_type is None
    assert instance_only.data is None
    assert instance_only.swift_type == ty.Concrete("Barcode")


def test_instance_only_generation_skips_declaration_checks() -> None:
    generated = get_shwifty(datatype("Void"), Options(generate_to_swift_data=False))

    assert generated.data is None
    assert generated.instance == TypeInstance("Void")


def test_batch_generation_resolves_siblings_and_isolates_failures() -> None:
    holder = datatype("Holder", constructors=[record("Holder", ("code", "Maybe Barcode"))])

    result = get_shwifty_many([holder, datatype("Void"), BARCODE])

    assert not result.ok
    assert list(result.errors) == ["Void"]
    assert isinstance(result.errors["Void"], VoidType)
    assert [item.name for item in result.generated] == ["Holder", "Barcode"]
    assert result.generated[0].data.fields == (
        ("code", ty.Optional(ty.Concrete("Barcode"))),
    )


def test_generation_is_deterministic() -> None:
    first = pretty_swift_data(build_data_decl(BARCODE))
    second = pretty_swift_data(build_data_decl(BARCODE))
    assert first == second
