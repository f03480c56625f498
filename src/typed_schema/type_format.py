"""Mapping from type references to schema types and formats."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from typed_schema.types import TypeKind, TypeRef, nominal_name


class SchemaType(Enum):
    """Schema type domain of the output document."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class TypeWithFormat:
    """Schema type and optional format inferred for a type."""

    schema_type: SchemaType | None
    format: str | None = None

    @property
    def has_format(self) -> bool:
        return self.format is not None


OBJECT_FORMAT = TypeWithFormat(SchemaType.OBJECT)
ARRAY_FORMAT = TypeWithFormat(SchemaType.ARRAY)
VOID_FORMAT = TypeWithFormat(None)

# Well-known scalar types, primitive and nominal
_TYPE_FORMATS: dict[str, TypeWithFormat] = {
    "boolean": TypeWithFormat(SchemaType.BOOLEAN),
    "character": TypeWithFormat(SchemaType.STRING),
    "int8": TypeWithFormat(SchemaType.INTEGER, "int32"),
    "int16": TypeWithFormat(SchemaType.INTEGER, "int32"),
    "int32": TypeWithFormat(SchemaType.INTEGER, "int32"),
    "int64": TypeWithFormat(SchemaType.INTEGER, "int64"),
    "float32": TypeWithFormat(SchemaType.NUMBER, "float"),
    "float64": TypeWithFormat(SchemaType.NUMBER, "double"),
    "string": TypeWithFormat(SchemaType.STRING),
    "bigint": TypeWithFormat(SchemaType.INTEGER),
    "decimal": TypeWithFormat(SchemaType.NUMBER),
    "date": TypeWithFormat(SchemaType.STRING, "date"),
    "datetime": TypeWithFormat(SchemaType.STRING, "date-time"),
    "time": TypeWithFormat(SchemaType.STRING, "time"),
    "uuid": TypeWithFormat(SchemaType.STRING, "uuid"),
    "uri": TypeWithFormat(SchemaType.STRING, "uri"),
    "bytes": TypeWithFormat(SchemaType.STRING, "byte"),
    "binary": TypeWithFormat(SchemaType.STRING, "binary"),
}

WELL_KNOWN_TYPE_NAMES: frozenset[str] = frozenset(_TYPE_FORMATS)


def get_type_format(ref: TypeRef) -> TypeWithFormat:
    """Return the schema type and format for ``ref``.

    Anything that is not a well-known scalar is an object, except arrays.
    """
    if ref.kind is TypeKind.ARRAY:
        return ARRAY_FORMAT
    if ref.kind is TypeKind.VOID:
        return VOID_FORMAT
    if ref.kind is TypeKind.PRIMITIVE:
        return _TYPE_FORMATS.get(ref.name, OBJECT_FORMAT)
    name = nominal_name(ref)
    if name is not None and name in _TYPE_FORMATS:
        return _TYPE_FORMATS[name]
    return OBJECT_FORMAT


def is_terminal_type(ref: TypeRef) -> bool:
    """Check if ``ref`` has no further structure to infer."""
    if ref.kind in (
        TypeKind.TYPE_VARIABLE,
        TypeKind.UNRESOLVED_TYPE_VARIABLE,
        TypeKind.WILDCARD,
        TypeKind.ARRAY,
    ):
        return False
    if ref.kind in (TypeKind.PRIMITIVE, TypeKind.VOID):
        return True
    schema_type = get_type_format(ref).schema_type
    return schema_type not in (SchemaType.OBJECT, SchemaType.ARRAY)
