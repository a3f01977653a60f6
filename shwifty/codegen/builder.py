"""Build Swift declarations and type instances from datatype descriptors.

Types with a single constructor become structs, types with two or more become
enums; types with none are rejected.  Each declaration also yields a
:class:`TypeInstance`, the type-level artifact other declarations use when they
mention it in a field (``MyFirstType Int`` classifies to
``Concrete("MyFirstType", (INT,))``).

All checks run before anything is produced and the first failure is raised as
a :class:`~shwifty.codegen.errors.ShwiftyError`; nothing partial is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence

from ..telemetry.logger import get_logger
from . import classifier, ty
from .decl import DataDecl, EnumCase, EnumDecl, StructDecl
from .descriptor import (
    REQUIRED_EXTENSIONS,
    ConstructorInfo,
    ConstructorVariant,
    DatatypeInfo,
)
from .errors import (
    DuplicateFieldName,
    EncounteredInfixConstructor,
    ExistentialTypes,
    ExtensionNotEnabled,
    KindVariableCannotBeRealised,
    ShwiftyError,
    SingleConNonRecord,
    VoidType,
)
from .options import DEFAULT_OPTIONS, Options, lower_first
from .typexpr import KindVar, Star, TyVar, TyVarBinder

_LOG = get_logger("shwifty.codegen.builder")


# ---------------------------------------------------------------------------
# Type-level artifact


@dataclass(frozen=True, slots=True)
class TypeInstance:
    """Swift type of a generated declaration.

    ``to_swift`` binds each declaration parameter to the ``Ty`` supplied for it;
    called without arguments it returns the generic form with placeholders.
    """

    name: str
    params: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.params)

    def to_swift(self, *args: ty.Ty) -> ty.Ty:
        if not args:
            args = tuple(ty.Poly(classifier.placeholder_name(p)) for p in self.params)
        if len(args) != self.arity:
            raise ValueError(f"{self.name} expects {self.arity} type argument(s), got {len(args)}")
        env = dict(zip(self.params, args))
        return ty.Concrete(
            self.name,
            tuple(classifier.classify_constraint(TyVar(p), env) for p in self.params),
        )


class TypeRegistry(Mapping[str, TypeInstance]):
    """Name to :class:`TypeInstance` lookup consulted by the classifier."""

    def __init__(self, instances: Iterable[TypeInstance] = ()) -> None:
        self._instances: dict[str, TypeInstance] = {}
        for instance in instances:
            self.register(instance)

    def register(self, instance: TypeInstance) -> None:
        self._instances[instance.name] = instance

    def with_instance(self, instance: TypeInstance) -> "TypeRegistry":
        copy = TypeRegistry(self._instances.values())
        copy.register(instance)
        return copy

    def __getitem__(self, name: str) -> TypeInstance:
        return self._instances[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)


# ---------------------------------------------------------------------------
# Validation


def ensure_enabled(info: DatatypeInfo) -> None:
    if info.extensions is None:
        return
    for extension in REQUIRED_EXTENSIONS:
        if extension not in info.extensions:
            raise ExtensionNotEnabled(extension)


def no_existentials(constructors: Iterable[ConstructorInfo]) -> None:
    for con in constructors:
        if con.variables:
            raise ExistentialTypes(con.name, con.variables)


def no_infix(constructors: Iterable[ConstructorInfo]) -> None:
    for con in constructors:
        if con.variant is ConstructorVariant.INFIX:
            raise EncounteredInfixConstructor(con.name)


def can_realise_kind_star(binder: TyVarBinder) -> bool:
    return binder.kind is None or isinstance(binder.kind, (Star, KindVar))


def check_kinds(info: DatatypeInfo) -> None:
    for binder in info.variables:
        if not can_realise_kind_star(binder):
            raise KindVariableCannotBeRealised(info.name, binder.name, binder.kind)


def ty_vars(info: DatatypeInfo) -> tuple[str, ...]:
    return tuple(classifier.placeholder_name(binder.name) for binder in info.variables)


# ---------------------------------------------------------------------------
# Builders


def build_type_instance(info: DatatypeInfo) -> TypeInstance:
    no_existentials(info.constructors)
    check_kinds(info)
    return TypeInstance(info.name, tuple(binder.name for binder in info.variables))


def build_data_decl(
    info: DatatypeInfo,
    options: Options = DEFAULT_OPTIONS,
    registry: Mapping[str, TypeInstance] | None = None,
) -> DataDecl:
    """Turn ``info`` into a struct or enum declaration."""

    cons = info.constructors
    if not cons:
        raise VoidType(info.name)
    no_infix(cons)
    no_existentials(cons)
    check_kinds(info)

    lookup = _with_self(registry, info)
    if len(cons) == 1:
        decl: DataDecl = _make_struct(info, cons[0], options, lookup)
    else:
        decl = EnumDecl(
            name=info.name,
            ty_vars=ty_vars(info),
            protocols=options.data_protocols,
            cases=tuple(_make_case(con, options, lookup) for con in cons),
            raw_value=options.data_raw_value,
        )
    _LOG.debug("built %s %s with %d member(s)", decl.kind, decl.name, _member_count(decl))
    return decl


def _make_struct(
    info: DatatypeInfo,
    con: ConstructorInfo,
    options: Options,
    lookup: Mapping[str, TypeInstance],
) -> StructDecl:
    if not con.fields:
        fields: tuple[tuple[str, ty.Ty], ...] = ()
    elif con.variant is ConstructorVariant.RECORD:
        fields = tuple(
            (
                lower_first(options.field_label_modifier(field_info.name or "")),
                classifier.classify_poly(field_info.type, lookup),
            )
            for field_info in con.fields
        )
    else:
        raise SingleConNonRecord(con.name)
    seen: set[str] = set()
    for label, _ in fields:
        if label in seen:
            raise DuplicateFieldName(info.name, label)
        seen.add(label)
    return StructDecl(
        name=info.name,
        ty_vars=ty_vars(info),
        protocols=options.data_protocols,
        fields=fields,
    )


def _make_case(
    con: ConstructorInfo, options: Options, lookup: Mapping[str, TypeInstance]
) -> EnumCase:
    name = options.constructor_modifier(lower_first(con.name))
    if con.variant is ConstructorVariant.RECORD:
        args = tuple(
            (
                options.field_label_modifier(lower_first(field_info.name or "")),
                classifier.classify_poly(field_info.type, lookup),
            )
            for field_info in con.fields
        )
    else:
        args = tuple(
            (None, classifier.classify_poly(field_info.type, lookup)) for field_info in con.fields
        )
    return EnumCase(name, args)


def _with_self(
    registry: Mapping[str, TypeInstance] | None, info: DatatypeInfo
) -> Mapping[str, TypeInstance]:
    own = TypeInstance(info.name, tuple(binder.name for binder in info.variables))
    if registry is None:
        return TypeRegistry([own])
    if info.name in registry:
        return registry
    if isinstance(registry, TypeRegistry):
        return registry.with_instance(own)
    return {**registry, info.name: own}


def _member_count(decl: DataDecl) -> int:
    if isinstance(decl, StructDecl):
        return len(decl.fields)
    if isinstance(decl, EnumDecl):
        return len(decl.cases)
    return 0


# ---------------------------------------------------------------------------
# Entry points


@dataclass(frozen=True, slots=True)
class Generated:
    """Artifacts generated for one declaration; disabled ones are ``None``."""

    name: str
    instance: TypeInstance | None = None
    data: DataDecl | None = None

    @property
    def swift_type(self) -> ty.Ty | None:
        return self.instance.to_swift() if self.instance is not None else None


def get_shwifty(
    info: DatatypeInfo,
    options: Options = DEFAULT_OPTIONS,
    registry: Mapping[str, TypeInstance] | None = None,
) -> Generated:
    """Generate the declaration and/or type instance for ``info``."""

    ensure_enabled(info)
    data = build_data_decl(info, options, registry) if options.generate_to_swift_data else None
    instance = build_type_instance(info) if options.generate_to_swift else None
    return Generated(info.name, instance, data)


@dataclass(slots=True)
class BatchResult:
    """Outcome of :func:`get_shwifty_many`; failures do not affect other entries."""

    generated: list[Generated] = field(default_factory=list)
    errors: dict[str, ShwiftyError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def get_shwifty_many(
    infos: Sequence[DatatypeInfo],
    options: Options = DEFAULT_OPTIONS,
    registry: TypeRegistry | None = None,
) -> BatchResult:
    """Generate every declaration of a batch so they can refer to each other."""

    lookup = TypeRegistry(registry.values() if registry is not None else ())
    for info in infos:
        lookup.register(TypeInstance(info.name, tuple(binder.name for binder in info.variables)))

    result = BatchResult()
    for info in infos:
        try:
            result.generated.append(get_shwifty(info, options, lookup))
        except ShwiftyError as exc:
            _LOG.warning("skipping %s: %s", info.name, exc)
            result.errors[info.name] = exc
    return result


__all__ = [
    "BatchResult",
    "Generated",
    "TypeInstance",
    "TypeRegistry",
    "build_data_decl",
    "build_type_instance",
    "can_realise_kind_star",
    "check_kinds",
    "ensure_enabled",
    "get_shwifty",
    "get_shwifty_many",
    "no_existentials",
    "no_infix",
]
