"""Type references used at declaration and usage sites of the type graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TypeKind(Enum):
    """Structural kind of a type reference."""

    PRIMITIVE = "primitive"
    VOID = "void"
    CLASS = "class"
    ARRAY = "array"
    PARAMETERIZED = "parameterized"
    TYPE_VARIABLE = "type_variable"
    UNRESOLVED_TYPE_VARIABLE = "unresolved_type_variable"
    WILDCARD = "wildcard"


# Built-in primitive names understood by the type system
PRIMITIVE_TYPE_NAMES: frozenset[str] = frozenset(
    {
        "boolean",
        "character",
        "int8",
        "int16",
        "int32",
        "int64",
        "float32",
        "float64",
    }
)

VOID_NAME = "void"

# Names of the built-in nominal types every index carries
OBJECT = "Object"
COLLECTION = "Collection"
LIST = "List"
SET = "Set"
MAP = "Map"
ENUM = "Enum"


@dataclass(frozen=True)
class TypeRef:
    """Base class for all type references."""

    @property
    def kind(self) -> TypeKind:
        raise NotImplementedError

    @property
    def name(self) -> str:
        """Return the display name of this reference."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PrimitiveRef(TypeRef):
    """A primitive scalar such as ``int32`` or ``boolean``."""

    primitive: str

    @property
    def kind(self) -> TypeKind:
        return TypeKind.PRIMITIVE

    @property
    def name(self) -> str:
        return self.primitive


@dataclass(frozen=True)
class VoidRef(TypeRef):
    """The absence of a value."""

    @property
    def kind(self) -> TypeKind:
        return TypeKind.VOID

    @property
    def name(self) -> str:
        return VOID_NAME


@dataclass(frozen=True)
class ClassRef(TypeRef):
    """A nominal class used without generic arguments."""

    class_name: str

    @property
    def kind(self) -> TypeKind:
        return TypeKind.CLASS

    @property
    def name(self) -> str:
        return self.class_name


@dataclass(frozen=True)
class ArrayRef(TypeRef):
    """A one-dimensional array of ``component``."""

    component: TypeRef

    @property
    def kind(self) -> TypeKind:
        return TypeKind.ARRAY

    @property
    def name(self) -> str:
        return f"{self.component.name}[]"


@dataclass(frozen=True)
class ParameterizedRef(TypeRef):
    """A generic class applied to type arguments (e.g. ``Map<string, Foo>``)."""

    class_name: str
    arguments: tuple[TypeRef, ...] = ()

    @property
    def kind(self) -> TypeKind:
        return TypeKind.PARAMETERIZED

    @property
    def name(self) -> str:
        return self.class_name

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.class_name}<{args}>"


@dataclass(frozen=True)
class TypeVariableRef(TypeRef):
    """A declared generic parameter, e.g. ``T`` of ``Box<T>``."""

    identifier: str
    owner: str | None = None
    bounds: tuple[TypeRef, ...] = ()

    @property
    def kind(self) -> TypeKind:
        return TypeKind.TYPE_VARIABLE

    @property
    def name(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class UnresolvedTypeVariableRef(TypeRef):
    """A type variable whose declaring type is not available."""

    identifier: str

    @property
    def kind(self) -> TypeKind:
        return TypeKind.UNRESOLVED_TYPE_VARIABLE

    @property
    def name(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class WildcardRef(TypeRef):
    """A wildcard argument: ``?``, ``? extends X`` or ``? super X``."""

    extends_bound: TypeRef | None = None
    super_bound: TypeRef | None = None

    @property
    def kind(self) -> TypeKind:
        return TypeKind.WILDCARD

    @property
    def name(self) -> str:
        if self.extends_bound is not None:
            return f"? extends {self.extends_bound}"
        if self.super_bound is not None:
            return f"? super {self.super_bound}"
        return "?"


OBJECT_TYPE = ClassRef(OBJECT)
STRING_TYPE = ClassRef("string")
ARRAY_TYPE_OBJECT = ArrayRef(OBJECT_TYPE)

_VARIABLE_KINDS = (TypeKind.TYPE_VARIABLE, TypeKind.UNRESOLVED_TYPE_VARIABLE)


def is_type_variable(ref: TypeRef) -> bool:
    """Check if a reference is a (possibly unresolved) type variable."""
    return ref.kind in _VARIABLE_KINDS


def nominal_name(ref: TypeRef) -> str | None:
    """Return the nominal class name behind ``ref``, or None for non-nominal kinds."""
    if ref.kind in (TypeKind.CLASS, TypeKind.PARAMETERIZED):
        return ref.name
    return None


def type_arguments(ref: TypeRef) -> tuple[TypeRef, ...]:
    """Return the generic arguments of ``ref`` (empty unless parameterized)."""
    if isinstance(ref, ParameterizedRef):
        return ref.arguments
    return ()


def resolve_wildcard(ref: WildcardRef) -> TypeRef:
    """Return the effective type of a wildcard: its upper bound, else ``Object``."""
    if ref.extends_bound is not None:
        return ref.extends_bound
    return OBJECT_TYPE


def type_ref_from_name(name: str) -> TypeRef:
    """Build a reference from a bare type name."""
    if name in PRIMITIVE_TYPE_NAMES:
        return PrimitiveRef(name)
    if name == VOID_NAME:
        return VoidRef()
    return ClassRef(name)
