"""Traversal stack for exploring the type graph depth first."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from typed_schema.config import DEFAULT_MAX_DEPTH
from typed_schema.index import FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import MetadataEntry
from typed_schema.scanner.resolver import TypeResolver
from typed_schema.schema import SchemaNode
from typed_schema.types import TypeRef, type_arguments

logger = logging.getLogger(__name__)

CYCLE_DESCRIPTION = "Cyclic reference to {}"
MAX_DEPTH_DESCRIPTION = "Maximum nesting depth reached at {}"


@dataclass(frozen=True, eq=False)
class PathEntry:
    """One pending (type, schema fragment) pair and its ancestor chain.

    ``annotation_target`` is the field (or type) whose metadata caused this
    entry; it is None for the root. ``field_annotation`` is the field's own
    ``@schema`` when ``schema`` is that field's fragment; it is re-applied
    after the type's class-level metadata so field values win.
    """

    enclosing: PathEntry | None
    annotation_target: FieldInfo | TypeInfo | None
    type_ref: TypeRef
    type_info: TypeInfo | None
    schema: SchemaNode
    resolver: TypeResolver
    depth: int = 0
    field_annotation: MetadataEntry | None = None

    @property
    def identity(self) -> tuple[str, tuple[TypeRef, ...]]:
        """Nominal type name plus generic arguments, used for cycle detection."""
        name = self.type_info.name if self.type_info is not None else self.type_ref.name
        return name, type_arguments(self.type_ref)

    def has_ancestor(self, candidate: PathEntry) -> bool:
        """Check if this entry or any enclosing entry has ``candidate``'s identity."""
        key = candidate.identity
        test: PathEntry | None = self
        while test is not None:
            if test.identity == key:
                return True
            test = test.enclosing
        return False

    def path_string(self) -> str:
        """Render the chain from the root down to this entry."""
        names: list[str] = []
        test: PathEntry | None = self
        while test is not None:
            names.append(str(test.type_ref))
            test = test.enclosing
        return " -> ".join(reversed(names))


class DataObjectDeque:
    """Stack of path entries awaiting traversal."""

    def __init__(self, index: TypeIndex, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._index = index
        self._max_depth = max_depth
        self._path: list[PathEntry] = []

    def size(self) -> int:
        return len(self._path)

    def is_empty(self) -> bool:
        return not self._path

    def peek(self) -> PathEntry | None:
        return self._path[-1] if self._path else None

    def push(self, entry: PathEntry) -> None:
        """Push an entry without cycle detection."""
        self._path.append(entry)

    def pop(self) -> PathEntry:
        return self._path.pop()

    def root_node(
        self,
        annotation_target: FieldInfo | TypeInfo | None,
        type_ref: TypeRef,
        type_info: TypeInfo | None,
        schema: SchemaNode,
    ) -> PathEntry:
        """Create the entry the traversal starts from."""
        resolver = TypeResolver.for_type(type_ref, type_info)
        return PathEntry(None, annotation_target, type_ref, type_info, schema, resolver)

    def leaf_node(
        self,
        parent: PathEntry,
        annotation_target: FieldInfo | TypeInfo | None,
        type_ref: TypeRef,
        schema: SchemaNode,
        resolver: TypeResolver | None = None,
        field_annotation: MetadataEntry | None = None,
    ) -> PathEntry:
        """Create a child entry of ``parent``.

        Args:
            parent: Enclosing entry.
            annotation_target: Field or type that led to this entry.
            type_ref: Type to traverse; variables are resolved in ``resolver``.
            schema: Fragment the entry populates.
            resolver: Generic scope the reference appears in. Defaults to
                the parent's own scope.
            field_annotation: Field-level ``@schema`` applied to ``schema``.
        """
        context = resolver if resolver is not None else parent.resolver
        resolved = context.resolve(type_ref)
        type_info = self._index.type_info(resolved)
        entry_resolver = TypeResolver.for_type(resolved, type_info, parent=context)
        return PathEntry(
            parent,
            annotation_target,
            resolved,
            type_info,
            schema,
            entry_resolver,
            depth=parent.depth + 1,
            field_annotation=field_annotation,
        )

    def push_field(
        self,
        annotation_target: FieldInfo | TypeInfo | None,
        parent: PathEntry,
        type_ref: TypeRef,
        schema: SchemaNode,
        resolver: TypeResolver | None = None,
        field_annotation: MetadataEntry | None = None,
    ) -> bool:
        """Create a child entry and push it unless it closes a cycle.

        On a cycle the fragment is described as a cyclic reference (an
        existing description is kept) and nothing is pushed.

        Returns:
            True if the entry was pushed.
        """
        entry = self.leaf_node(parent, annotation_target, type_ref, schema, resolver, field_annotation)
        if parent.has_ancestor(entry):
            logger.debug("Possible cycle detected at %s. Will not search further.", entry.type_ref)
            logger.debug("Path: %s", entry.path_string())
            schema.set_description_if_absent(CYCLE_DESCRIPTION.format(entry.type_ref))
            return False
        if entry.depth > self._max_depth:
            logger.debug("Maximum depth %d reached at %s", self._max_depth, entry.path_string())
            schema.set_description_if_absent(MAX_DEPTH_DESCRIPTION.format(entry.type_ref))
            return False
        logger.debug("Adding child node to path: %s", entry.type_ref)
        self._path.append(entry)
        return True
