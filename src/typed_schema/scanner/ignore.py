"""Ignore policy for suppressing fields from the generated schema."""

from __future__ import annotations

import logging

from typed_schema.index import FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import (
    IGNORE,
    IGNORE_PROPERTIES,
    IGNORE_TYPE,
    MetadataEntry,
    boolean_value_or_true,
    get_annotation,
    string_array_value,
)
from typed_schema.scanner.deque import PathEntry
from typed_schema.types import nominal_name

logger = logging.getLogger(__name__)

Target = FieldInfo | TypeInfo


class IgnoreHandlerBase:
    """A single ignore rule keyed on one directive."""

    name: str = ""

    def should_ignore(self, target: Target, parent_path_entry: PathEntry | None) -> bool:
        raise NotImplementedError


class IgnorePropertiesHandler(IgnoreHandlerBase):
    """Suppresses fields listed in an ``@ignore_properties`` directive.

    The directive is honoured on the field's declaring type, and on the
    field (or type) that led to the enclosing traversal frame:

        type A {
            @ignore_properties("ignore_me")
            b: B,
        }

        type B {
            ignore_me: string,       # ignored when scanned via A.b only
            do_not_ignore_me: string,
        }
    """

    name = IGNORE_PROPERTIES

    def __init__(self, index: TypeIndex) -> None:
        self._index = index

    def should_ignore(self, target: Target, parent_path_entry: PathEntry | None) -> bool:
        if not isinstance(target, FieldInfo):
            return False
        nesting = parent_path_entry.annotation_target if parent_path_entry is not None else None
        return self._declaring_type_ignore(target) or self._nesting_field_ignore(nesting, target.name)

    def _declaring_type_ignore(self, field: FieldInfo) -> bool:
        declaring = self._index.get(field.declaring_type)
        return _lists_name(get_annotation(declaring, self.name), field.name)

    def _nesting_field_ignore(self, nesting: Target | None, field_name: str) -> bool:
        if nesting is None:
            return False
        return _lists_name(get_annotation(nesting, self.name), field_name)


class IgnoreHandler(IgnoreHandlerBase):
    """Suppresses a target carrying ``@ignore`` (``@ignore(false)`` opts back in)."""

    name = IGNORE

    def should_ignore(self, target: Target, parent_path_entry: PathEntry | None) -> bool:
        entry = get_annotation(target, self.name)
        if entry is not None:
            return boolean_value_or_true(entry)
        return False


class IgnoreTypeHandler(IgnoreHandlerBase):
    """Suppresses every use of a type carrying ``@ignore_type``.

    Ignored type names are memoized, so the memo lives as long as the
    handler (one scan).
    """

    name = IGNORE_TYPE

    def __init__(self, index: TypeIndex) -> None:
        self._index = index
        self._ignored_types: set[str] = set()

    @property
    def ignored_types(self) -> set[str]:
        return set(self._ignored_types)

    def should_ignore(self, target: Target, parent_path_entry: PathEntry | None) -> bool:
        if isinstance(target, FieldInfo):
            type_name = nominal_name(target.type)
            type_info = self._index.get(type_name) if type_name is not None else None
        else:
            type_name = target.name
            type_info = target

        if type_name is None:
            return False

        if type_name in self._ignored_types:
            logger.debug("Ignoring type that is member of ignore set: %s", type_name)
            return True

        entry = get_annotation(type_info, self.name)
        if entry is not None and boolean_value_or_true(entry):
            logger.debug("Ignoring type and adding to ignore set: %s", type_name)
            self._ignored_types.add(type_name)
            return True
        return False


class IgnoreResolver:
    """Evaluates the ignore handlers in order; the first match wins."""

    def __init__(self, index: TypeIndex) -> None:
        self._type_handler = IgnoreTypeHandler(index)
        self._handlers: list[IgnoreHandlerBase] = [
            IgnorePropertiesHandler(index),
            IgnoreHandler(),
            self._type_handler,
        ]

    @property
    def ignored_types(self) -> set[str]:
        """Type names found to carry ``@ignore_type`` so far."""
        return self._type_handler.ignored_types

    def is_ignore(self, target: Target, parent_path_entry: PathEntry | None) -> bool:
        for handler in self._handlers:
            if handler.should_ignore(target, parent_path_entry):
                logger.debug("Ignoring %s (%s)", target.name, handler.name)
                return True
        return False


def _lists_name(entry: MetadataEntry | None, target_name: str) -> bool:
    names = string_array_value(entry)
    if not names:
        return False
    return target_name in names
