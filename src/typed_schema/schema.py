"""Schema document produced by the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from typed_schema.type_format import SchemaType


@dataclass
class SchemaNode:
    """One mutable fragment of the output schema tree.

    Nested fragments are owned by their parent through ``properties``,
    ``items`` and ``additional_properties``; fragments are never shared.
    """

    type: SchemaType | None = None
    format: str | None = None
    ref: str | None = None
    title: str | None = None
    description: str | None = None
    default: Any = None
    example: Any = None
    nullable: bool | None = None
    read_only: bool | None = None
    write_only: bool | None = None
    deprecated: bool | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool | None = None
    exclusive_maximum: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    min_properties: int | None = None
    max_properties: int | None = None
    enumeration: list[str] = field(default_factory=list)
    required: list[str] = field(default_factory=list)
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    items: SchemaNode | None = None
    additional_properties: SchemaNode | None = None

    # ---- Document API ----

    def set_type(self, schema_type: SchemaType | None) -> None:
        self.type = schema_type

    def set_format(self, fmt: str | None) -> None:
        self.format = fmt

    def add_property(self, name: str, node: SchemaNode) -> None:
        """Attach ``node`` under ``name``, replacing any previous property of that name."""
        self.properties[name] = node

    def add_required(self, name: str) -> None:
        if name not in self.required:
            self.required.append(name)

    def add_enumeration_value(self, value: str) -> None:
        if value not in self.enumeration:
            self.enumeration.append(value)

    def set_items(self, node: SchemaNode | None) -> None:
        self.items = node

    def set_additional_properties(self, node: SchemaNode | None) -> None:
        self.additional_properties = node

    def set_description_if_absent(self, text: str) -> bool:
        """Set the description unless one is already present.

        Returns:
            True if the description was written.
        """
        if self.description is not None:
            return False
        self.description = text
        return True

    def copy_from(self, other: SchemaNode) -> None:
        """Replace this node's content with ``other``'s, keeping its identity."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))

    # ---- Serialization ----

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-Schema-like representation of this fragment."""
        result: dict[str, Any] = {}
        if self.ref is not None:
            result["$ref"] = self.ref
        if self.type is not None:
            result["type"] = self.type.value
        for attr, key in _SCALAR_KEYS:
            value = getattr(self, attr)
            if value is not None:
                result[key] = value
        if self.enumeration:
            result["enum"] = list(self.enumeration)
        if self.required:
            result["required"] = list(self.required)
        if self.properties:
            result["properties"] = {
                name: node.to_dict() for name, node in self.properties.items()
            }
        if self.items is not None:
            result["items"] = self.items.to_dict()
        if self.additional_properties is not None:
            result["additionalProperties"] = self.additional_properties.to_dict()
        return result


_SCALAR_KEYS: tuple[tuple[str, str], ...] = (
    ("format", "format"),
    ("title", "title"),
    ("description", "description"),
    ("default", "default"),
    ("example", "example"),
    ("nullable", "nullable"),
    ("read_only", "readOnly"),
    ("write_only", "writeOnly"),
    ("deprecated", "deprecated"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusive_minimum", "exclusiveMinimum"),
    ("exclusive_maximum", "exclusiveMaximum"),
    ("min_length", "minLength"),
    ("max_length", "maxLength"),
    ("pattern", "pattern"),
    ("min_items", "minItems"),
    ("max_items", "maxItems"),
    ("unique_items", "uniqueItems"),
    ("min_properties", "minProperties"),
    ("max_properties", "maxProperties"),
)
