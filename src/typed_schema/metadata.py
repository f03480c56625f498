"""Declarative metadata (annotations) attached to types and fields.

A metadata entry is a named directive with a mapping of property values,
e.g. ``@schema(required=true)`` becomes
``MetadataEntry("schema", {"required": True})``. The helpers here decode
typed values out of an entry; malformed payloads decode as absent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Directive names
SCHEMA = "schema"
IGNORE = "ignore"
IGNORE_PROPERTIES = "ignore_properties"
IGNORE_TYPE = "ignore_type"

# Property holding a directive's single unnamed argument
VALUE = "value"

# @schema properties
PROP_HIDDEN = "hidden"
PROP_REQUIRED = "required"
PROP_REQUIRED_PROPERTIES = "required_properties"
PROP_IMPLEMENTATION = "implementation"
PROP_REF = "ref"
PROP_TYPE = "type"
PROP_FORMAT = "format"


@dataclass
class MetadataEntry:
    """A single directive attached to a type or field."""

    name: str
    values: dict[str, Any] = field(default_factory=dict)

    def value(self, prop: str = VALUE) -> Any:
        """Return the raw value of ``prop``, or None if unset."""
        return self.values.get(prop)


class MetadataTarget(Protocol):
    """Anything that can carry metadata entries (types and fields)."""

    name: str
    annotations: list[MetadataEntry]


def get_annotation(target: MetadataTarget | None, name: str) -> MetadataEntry | None:
    """Return the first entry called ``name`` on ``target``."""
    if target is None:
        return None
    for entry in target.annotations:
        if entry.name == name:
            return entry
    return None


def string_value(entry: MetadataEntry | None, prop: str = VALUE) -> str | None:
    """Decode a string property."""
    if entry is None:
        return None
    raw = entry.value(prop)
    if raw is None:
        return None
    if not isinstance(raw, str):
        logger.debug("Ignoring non-string %s.%s: %r", entry.name, prop, raw)
        return None
    return raw


def string_array_value(entry: MetadataEntry | None, prop: str = VALUE) -> list[str] | None:
    """Decode a string-array property. A lone string is a one-element array."""
    if entry is None:
        return None
    raw = entry.value(prop)
    if raw is None:
        return None
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, Sequence) and all(isinstance(v, str) for v in raw):
        return list(raw)
    logger.debug("Ignoring malformed string array %s.%s: %r", entry.name, prop, raw)
    return None


def boolean_value(entry: MetadataEntry | None, prop: str = VALUE) -> bool | None:
    """Decode a boolean property; None when absent or malformed."""
    if entry is None:
        return None
    raw = entry.value(prop)
    if raw is None:
        return None
    if not isinstance(raw, bool):
        logger.debug("Ignoring non-boolean %s.%s: %r", entry.name, prop, raw)
        return None
    return raw


def boolean_value_with_default(entry: MetadataEntry | None, prop: str) -> bool:
    """Decode a boolean property that is false unless explicitly set."""
    return boolean_value(entry, prop) is True


def boolean_value_or_true(entry: MetadataEntry, prop: str = VALUE) -> bool:
    """Decode a boolean property of a present entry, defaulting to true."""
    value = boolean_value(entry, prop)
    return True if value is None else value


def int_value(entry: MetadataEntry | None, prop: str) -> int | None:
    """Decode an integer property."""
    if entry is None:
        return None
    raw = entry.value(prop)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int):
        logger.debug("Ignoring non-integer %s.%s: %r", entry.name, prop, raw)
        return None
    return raw


def number_value(entry: MetadataEntry | None, prop: str) -> int | float | None:
    """Decode a numeric property (integer or float)."""
    if entry is None:
        return None
    raw = entry.value(prop)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        logger.debug("Ignoring non-numeric %s.%s: %r", entry.name, prop, raw)
        return None
    return raw
