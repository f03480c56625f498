"""Type index: the read-only catalog of nominal types the scanner walks."""

from __future__ import annotations

from dataclasses import dataclass, field

from typed_schema.metadata import MetadataEntry
from typed_schema.types import (
    COLLECTION,
    ENUM,
    LIST,
    MAP,
    OBJECT,
    SET,
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    TypeRef,
    TypeVariableRef,
    nominal_name,
)

# Name of the compiler-generated field holding an enum's constants
ENUM_VALUES_FIELD = "$VALUES"


@dataclass
class FieldInfo:
    """A field declared on a type (own, not inherited)."""

    name: str
    type: TypeRef
    declaring_type: str
    is_static: bool = False
    annotations: list[MetadataEntry] = field(default_factory=list)


@dataclass
class TypeInfo:
    """Structural metadata for one nominal type."""

    name: str
    fields: list[FieldInfo] = field(default_factory=list)
    type_parameters: list[TypeVariableRef] = field(default_factory=list)
    supertype: TypeRef | None = None
    interfaces: list[TypeRef] = field(default_factory=list)
    annotations: list[MetadataEntry] = field(default_factory=list)

    @property
    def parameter_names(self) -> list[str]:
        return [p.identifier for p in self.type_parameters]

    def get_field(self, name: str) -> FieldInfo | None:
        """Get a declared field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


def _generic(name: str, *params: str, supertype: TypeRef | None = None) -> TypeInfo:
    variables = [TypeVariableRef(p, owner=name) for p in params]
    return TypeInfo(name=name, type_parameters=variables, supertype=supertype)


def _standin(name: str, *params: str) -> TypeInfo:
    """Stand-in for a raw container root: one synthetic field typed by the element parameter."""
    info = _generic(name, *params)
    element = info.type_parameters[-1]
    info.fields = [FieldInfo(name="element", type=element, declaring_type=name)]
    return info


COLLECTION_STANDIN = _standin("CollectionStandin", "E")
MAP_STANDIN = _standin("MapStandin", "K", "V")


def enum_type_info(name: str, constants: list[str], annotations: list[MetadataEntry] | None = None) -> TypeInfo:
    """Build the indexed form of an enumeration.

    Each constant is a static field typed by the enum itself, alongside the
    static ``$VALUES`` array that stores them.
    """
    self_ref = ClassRef(name)
    fields = [
        FieldInfo(name=c, type=self_ref, declaring_type=name, is_static=True)
        for c in constants
    ]
    fields.append(
        FieldInfo(name=ENUM_VALUES_FIELD, type=ArrayRef(self_ref), declaring_type=name, is_static=True)
    )
    return TypeInfo(
        name=name,
        fields=fields,
        supertype=ClassRef(ENUM),
        annotations=list(annotations or []),
    )


class TypeIndex:
    """Index of all known nominal types."""

    def __init__(self) -> None:
        self._types: dict[str, TypeInfo] = {}
        self._register_builtins()

    def _register_builtins(self) -> None:
        """Register the top type, the container capabilities and the enum marker."""
        self._types[OBJECT] = TypeInfo(name=OBJECT)
        collection = _generic(COLLECTION, "E")
        self._types[COLLECTION] = collection
        for name in (LIST, SET):
            info = _generic(name, "E")
            info.supertype = ParameterizedRef(COLLECTION, (info.type_parameters[0],))
            self._types[name] = info
        self._types[MAP] = _generic(MAP, "K", "V")
        self._types[ENUM] = TypeInfo(name=ENUM)

    def register(self, type_info: TypeInfo) -> None:
        """Register a type."""
        if type_info.name in self._types:
            raise ValueError(f"Type '{type_info.name}' is already defined")
        self._types[type_info.name] = type_info

    def get(self, name: str) -> TypeInfo | None:
        """Get a type by name."""
        return self._types.get(name)

    def get_or_raise(self, name: str) -> TypeInfo:
        """Get a type by name, raising if not found."""
        type_info = self._types.get(name)
        if type_info is None:
            raise KeyError(f"Type '{name}' not found")
        return type_info

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    # ---- Consumed by the scanner ----

    def is_known(self, ref: TypeRef) -> bool:
        """Check if the nominal type behind ``ref`` is indexed."""
        return self.type_info(ref) is not None

    contains = is_known

    def type_info(self, ref: TypeRef) -> TypeInfo | None:
        """Return the indexed type behind a class or parameterized reference."""
        name = nominal_name(ref)
        if name is None:
            return None
        return self._types.get(name)

    def metadata_on(self, target: TypeInfo | FieldInfo) -> list[MetadataEntry] | None:
        """Return the metadata attached to a type or field, or None if it has none."""
        if not target.annotations:
            return None
        return list(target.annotations)

    def is_a(self, ref: TypeRef, name: str) -> bool:
        """Check if ``ref`` is ``name`` or one of its subtypes."""
        start = nominal_name(ref)
        if start is None:
            return False
        pending = [start]
        seen: set[str] = set()
        while pending:
            current = pending.pop()
            if current == name:
                return True
            if current in seen:
                continue
            seen.add(current)
            info = self._types.get(current)
            if info is None:
                continue
            for parent in [info.supertype, *info.interfaces]:
                parent_name = nominal_name(parent) if parent is not None else None
                if parent_name is not None:
                    pending.append(parent_name)
        return False

    def __contains__(self, name: str) -> bool:
        return name in self._types
