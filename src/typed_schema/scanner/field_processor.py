"""Field processor: builds and attaches the schema fragment of one field."""

from __future__ import annotations

import logging

from typed_schema.config import ScannerConfig
from typed_schema.index import FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import (
    PROP_FORMAT,
    PROP_HIDDEN,
    PROP_IMPLEMENTATION,
    PROP_REQUIRED,
    PROP_TYPE,
    SCHEMA,
    MetadataEntry,
    boolean_value,
    boolean_value_with_default,
    get_annotation,
    string_value,
)
from typed_schema.scanner.deque import DataObjectDeque, PathEntry
from typed_schema.scanner.resolver import TypeResolver
from typed_schema.scanner.type_processor import TypeProcessor
from typed_schema.schema import SchemaNode
from typed_schema.schema_reader import read_schema
from typed_schema.type_format import get_type_format
from typed_schema.types import TypeRef, type_ref_from_name

logger = logging.getLogger(__name__)


class FieldProcessor:
    """Decides the schema of a single field.

    Explicit ``@schema`` metadata takes precedence over inference; when
    neither metadata nor inference applies the field gets an empty
    fragment. A ``field_name`` of None means the fragment belongs to no
    parent (the root of a container scan): nothing is attached and
    ``required`` has no effect.
    """

    def __init__(
        self,
        index: TypeIndex,
        object_stack: DataObjectDeque,
        config: ScannerConfig,
        parent_path_entry: PathEntry,
        resolver: TypeResolver,
        annotation_target: FieldInfo | TypeInfo | None,
        field_name: str | None,
        field_type: TypeRef,
        schema: SchemaNode | None = None,
    ) -> None:
        self._index = index
        self._object_stack = object_stack
        self._config = config
        self._parent_path_entry = parent_path_entry
        self._resolver = resolver
        self._annotation_target = annotation_target
        self._field_name = field_name
        self._field_type = field_type
        self._field_schema = schema if schema is not None else SchemaNode()

    @classmethod
    def process(
        cls,
        index: TypeIndex,
        object_stack: DataObjectDeque,
        config: ScannerConfig,
        resolver: TypeResolver,
        parent_path_entry: PathEntry,
        field: FieldInfo,
    ) -> SchemaNode | None:
        """Build the fragment for ``field`` and attach it to the parent's schema."""
        processor = cls(
            index,
            object_stack,
            config,
            parent_path_entry,
            resolver,
            field,
            field.name,
            field.type,
        )
        return processor.process_field()

    def process_field(self) -> SchemaNode | None:
        """Build the fragment and attach it under the field name.

        Returns:
            The attached fragment, or None if the field is hidden.
        """
        schema = self.read_field_schema()
        if schema is None:
            logger.debug("Field %s is hidden", self._field_name)
            return None
        if self._field_name is not None:
            self._parent_path_entry.schema.add_property(self._field_name, schema)
        return schema

    def read_field_schema(self) -> SchemaNode | None:
        """Build the fragment without attaching it. None means hidden."""
        annotation = get_annotation(self._annotation_target, SCHEMA)
        if annotation is not None:
            return self._read_schema_annotated_field(annotation)
        if self._config.infer_unannotated_types:
            return self._read_unannotated_field()
        logger.debug("Not inferring schema for unannotated field %s", self._field_name)
        return self._field_schema

    def _read_schema_annotated_field(self, annotation: MetadataEntry | None) -> SchemaNode | None:
        if annotation is None:
            raise ValueError("Annotation must not be None")
        logger.debug("Processing @schema annotation %s on %s", annotation.values, self._field_name)

        if boolean_value(annotation, PROP_HIDDEN) is True:
            return None

        if self._field_name is not None and boolean_value_with_default(annotation, PROP_REQUIRED):
            self._parent_path_entry.schema.add_required(self._field_name)

        field_type = self._field_type
        implementation = string_value(annotation, PROP_IMPLEMENTATION)
        if implementation:
            field_type = type_ref_from_name(implementation)
            logger.debug("Using implementation %s for field %s", field_type, self._field_name)

        post_processed = self._process_type(field_type, annotation)
        type_format = get_type_format(post_processed)
        defaults = {PROP_TYPE: type_format.schema_type, PROP_FORMAT: type_format.format}
        self._field_schema = read_schema(self._field_schema, annotation, defaults)
        return self._field_schema

    def _read_unannotated_field(self) -> SchemaNode:
        logger.debug("Processing unannotated field %s", self._field_name)
        post_processed = self._process_type(self._field_type)
        type_format = get_type_format(post_processed)
        self._field_schema.set_type(type_format.schema_type)
        if type_format.has_format:
            self._field_schema.set_format(type_format.format)
        return self._field_schema

    def _process_type(self, field_type: TypeRef, annotation: MetadataEntry | None = None) -> TypeRef:
        processor = TypeProcessor(
            self._index,
            self._object_stack,
            self._resolver,
            self._parent_path_entry,
            field_type,
            self._field_schema,
            self._annotation_target,
            annotation,
        )
        return processor.process_type()
