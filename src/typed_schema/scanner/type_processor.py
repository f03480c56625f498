"""Type processor that classifies a type reference and builds its schema fragment."""

from __future__ import annotations

import logging

from typed_schema.index import ENUM_VALUES_FIELD, FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import MetadataEntry
from typed_schema.scanner.deque import DataObjectDeque, PathEntry
from typed_schema.scanner.resolver import TypeResolver
from typed_schema.schema import SchemaNode
from typed_schema.type_format import SchemaType, get_type_format, is_terminal_type
from typed_schema.types import (
    ARRAY_TYPE_OBJECT,
    COLLECTION,
    ENUM,
    MAP,
    OBJECT_TYPE,
    STRING_TYPE,
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    TypeKind,
    TypeRef,
    WildcardRef,
    is_type_variable,
    resolve_wildcard,
)

logger = logging.getLogger(__name__)


class TypeProcessor:
    """Builds the schema fragment for one type reference.

    ``process_type`` mutates the target schema and returns the type that
    should drive type/format inference downstream. Nested structured types
    are not walked here; they are pushed onto the traversal stack.
    Container element fragments get a nested processor without the
    field-level annotation.
    """

    def __init__(
        self,
        index: TypeIndex,
        object_stack: DataObjectDeque,
        resolver: TypeResolver,
        parent_path_entry: PathEntry,
        type_ref: TypeRef,
        schema: SchemaNode,
        annotation_target: FieldInfo | TypeInfo | None,
        field_annotation: MetadataEntry | None = None,
    ) -> None:
        self._index = index
        self._object_stack = object_stack
        self._resolver = resolver
        self._parent_path_entry = parent_path_entry
        self._type_ref = type_ref
        self._schema = schema
        self._annotation_target = annotation_target
        self._field_annotation = field_annotation

    @property
    def schema(self) -> SchemaNode:
        return self._schema

    def process_type(self) -> TypeRef:
        """Populate the schema for the processor's type and return the effective type."""
        return self._process(self._type_ref)

    def _process(self, ref: TypeRef) -> TypeRef:
        if is_terminal_type(ref):
            return ref

        if isinstance(ref, WildcardRef):
            bound = resolve_wildcard(ref)
            logger.debug("Resolved wildcard %s -> %s", ref, bound)
            return self._process(bound)

        if isinstance(ref, ArrayRef):
            return self._read_array(ref)

        if self._is_enum(ref):
            return self._read_enum(ref)

        if isinstance(ref, ParameterizedRef):
            return self._read_parameterized(ref)

        if is_type_variable(ref):
            return self._resolve_type_variable(self._schema, ref)

        # Raw collection
        if self._index.is_a(ref, COLLECTION):
            return ARRAY_TYPE_OBJECT

        # Raw map
        if self._index.is_a(ref, MAP):
            return OBJECT_TYPE

        if self._index.is_known(ref):
            self._push(ref, self._schema)
        else:
            logger.debug("Encountered type not in index that is not a well-known type. Will not traverse it: %s", ref)
        return ref

    # ---- Structured kinds ----

    def _read_array(self, ref: ArrayRef) -> TypeRef:
        logger.debug("Processing an array %s", ref)
        items = SchemaNode()
        self._schema.set_type(SchemaType.ARRAY)
        self._schema.set_items(items)
        self._read_element(ref.component, items)
        return ref

    def _read_enum(self, ref: TypeRef) -> TypeRef:
        logger.debug("Processing an enum %s", ref)
        enum_info = self._index.type_info(ref)
        self_ref = ClassRef(enum_info.name)
        for enum_field in enum_info.fields:
            # Constants are the fields typed by the enum itself; skip the values storage
            if not enum_field.name.endswith(ENUM_VALUES_FIELD) and enum_field.type == self_ref:
                self._schema.add_enumeration_value(enum_field.name)
        return STRING_TYPE

    def _read_parameterized(self, ref: ParameterizedRef) -> TypeRef:
        logger.debug("Processing parameterized type %s", ref)

        if self._index.is_a(ref, COLLECTION):
            logger.debug("Processing collection %s. Will treat as an array.", ref)
            items = SchemaNode()
            self._schema.set_type(SchemaType.ARRAY)
            self._schema.set_items(items)
            if ref.arguments:
                self._read_element(ref.arguments[0], items)
            return ARRAY_TYPE_OBJECT

        if self._index.is_a(ref, MAP):
            logger.debug("Processing map %s. Will treat as an object.", ref)
            self._schema.set_type(SchemaType.OBJECT)
            if len(ref.arguments) == 2:
                value_schema = SchemaNode()
                self._read_element(ref.arguments[1], value_schema)
                self._schema.set_additional_properties(value_schema)
            return OBJECT_TYPE

        if self._index.is_known(ref):
            self._push(ref, self._schema)
        else:
            logger.debug("Parameterized type %s is not indexed. Will not traverse it.", ref)
        return ref

    def _read_element(self, ref: TypeRef, schema: SchemaNode) -> None:
        """Populate a container's items or value fragment from its element type."""
        if is_terminal_type(ref):
            type_format = get_type_format(ref)
            schema.set_type(type_format.schema_type)
            schema.set_format(type_format.format)
            return

        processor = TypeProcessor(
            self._index,
            self._object_stack,
            self._resolver,
            self._parent_path_entry,
            ref,
            schema,
            self._annotation_target,
        )
        effective = processor.process_type()
        type_format = get_type_format(effective)
        if schema.type is None:
            schema.set_type(type_format.schema_type)
        if schema.format is None and type_format.has_format:
            schema.set_format(type_format.format)

    def _resolve_type_variable(self, schema: SchemaNode, ref: TypeRef) -> TypeRef:
        resolved = self._resolver.resolve(ref)
        logger.debug("Resolved type %s -> %s", ref, resolved)

        if not is_terminal_type(resolved) and self._is_structured(resolved):
            return self._process(resolved)

        # Terminal or unindexed types stop here and are flattened to a type/format
        if is_terminal_type(resolved) or not self._index.is_known(resolved):
            logger.debug("Is a terminal type %s", resolved)
            replacement = get_type_format(resolved)
            schema.set_type(replacement.schema_type)
            schema.set_format(replacement.format)
        else:
            logger.debug("Attempting type variable substitution: %s -> %s", ref, resolved)
            self._push(resolved, schema)
        return resolved

    # ---- Helpers ----

    def _push(self, ref: TypeRef, schema: SchemaNode) -> None:
        self._object_stack.push_field(
            self._annotation_target,
            self._parent_path_entry,
            ref,
            schema,
            self._resolver,
            self._field_annotation,
        )

    def _is_enum(self, ref: TypeRef) -> bool:
        return self._index.is_a(ref, ENUM) and self._index.is_known(ref)

    def _is_structured(self, ref: TypeRef) -> bool:
        """Check if a resolved type needs the container/enum rules rather than a plain push."""
        if ref.kind is not TypeKind.CLASS:
            return True
        return (
            self._is_enum(ref)
            or self._index.is_a(ref, COLLECTION)
            or self._index.is_a(ref, MAP)
        )
