"""Applies ``@schema`` override metadata on top of an inferred schema node."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from typed_schema.metadata import (
    PROP_FORMAT,
    PROP_REF,
    PROP_REQUIRED_PROPERTIES,
    PROP_TYPE,
    MetadataEntry,
    boolean_value,
    int_value,
    number_value,
    string_array_value,
    string_value,
)
from typed_schema.schema import SchemaNode
from typed_schema.type_format import SchemaType

logger = logging.getLogger(__name__)

_STRING_PROPS = ("title", "description", "pattern")
_BOOLEAN_PROPS = (
    "nullable",
    "read_only",
    "write_only",
    "deprecated",
    "exclusive_minimum",
    "exclusive_maximum",
    "unique_items",
)
_INT_PROPS = (
    "min_length",
    "max_length",
    "min_items",
    "max_items",
    "min_properties",
    "max_properties",
)
_NUMBER_PROPS = ("minimum", "maximum")
_RAW_PROPS = ("default", "example")


def read_schema(
    schema: SchemaNode,
    annotation: MetadataEntry | None,
    defaults: Mapping[str, Any] | None = None,
) -> SchemaNode:
    """Apply ``annotation`` to ``schema``.

    Explicit values always win over anything already on the node. The
    ``defaults`` mapping supplies low-priority ``type``/``format`` values
    used only when the annotation does not name them.

    Args:
        schema: Node populated by inference.
        annotation: The ``@schema`` entry; required.
        defaults: Inferred type and format.

    Returns:
        ``schema`` itself, or a new node when the annotation declares a
        ``ref`` (a reference replaces the inferred content entirely).

    Raises:
        ValueError: If no annotation is given.
    """
    if annotation is None:
        raise ValueError("Annotation must not be None")
    defaults = defaults or {}

    ref = string_value(annotation, PROP_REF)
    if ref is not None:
        return SchemaNode(ref=ref)

    schema_type = _schema_type_value(annotation)
    if schema_type is None:
        schema_type = defaults.get(PROP_TYPE, schema.type)
    schema.set_type(schema_type)

    fmt = string_value(annotation, PROP_FORMAT)
    if fmt is None:
        fmt = defaults.get(PROP_FORMAT) or schema.format
    schema.set_format(fmt)

    for prop in _STRING_PROPS:
        value = string_value(annotation, prop)
        if value is not None:
            setattr(schema, prop, value)
    for prop in _BOOLEAN_PROPS:
        value = boolean_value(annotation, prop)
        if value is not None:
            setattr(schema, prop, value)
    for prop in _INT_PROPS:
        value = int_value(annotation, prop)
        if value is not None:
            setattr(schema, prop, value)
    for prop in _NUMBER_PROPS:
        value = number_value(annotation, prop)
        if value is not None:
            setattr(schema, prop, value)
    for prop in _RAW_PROPS:
        value = annotation.value(prop)
        if value is not None:
            setattr(schema, prop, value)

    enumeration = string_array_value(annotation, "enumeration")
    if enumeration is not None:
        schema.enumeration = list(enumeration)

    for name in string_array_value(annotation, PROP_REQUIRED_PROPERTIES) or []:
        schema.add_required(name)

    return schema


def _schema_type_value(annotation: MetadataEntry) -> SchemaType | None:
    raw = string_value(annotation, PROP_TYPE)
    if raw is None:
        return None
    try:
        return SchemaType(raw.lower())
    except ValueError:
        logger.debug("Ignoring unknown schema type %r on %s", raw, annotation.name)
        return None
