"""Schema inference engine.

Walks the type graph reachable from a root type depth first and produces
one schema tree. Each popped frame has its class-level ``@schema``
metadata applied, then every non-ignored field (own and inherited) is
handed to the field processor, which may push further frames.

Example:

    index = TypeParser().parse('''
        type Person {
            @schema(required=true)
            name: string,
            friends: List<Person>,
        }
    ''')
    schema = scan(index, ClassRef("Person"))
"""

from __future__ import annotations

import logging

from typed_schema.config import ScannerConfig
from typed_schema.index import COLLECTION_STANDIN, MAP_STANDIN, FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import SCHEMA, get_annotation
from typed_schema.scanner.deque import DataObjectDeque, PathEntry
from typed_schema.scanner.field_processor import FieldProcessor
from typed_schema.scanner.ignore import IgnoreResolver
from typed_schema.scanner.resolver import TypeResolver, get_all_fields
from typed_schema.schema import SchemaNode
from typed_schema.schema_reader import read_schema
from typed_schema.type_format import SchemaType, get_type_format, is_terminal_type
from typed_schema.types import (
    COLLECTION,
    ENUM,
    MAP,
    ArrayRef,
    TypeRef,
    WildcardRef,
    is_type_variable,
    resolve_wildcard,
)

logger = logging.getLogger(__name__)


class DataObjectScanner:
    """Builds the schema of a root type from a type index.

    Every call to ``process`` is an independent run: the traversal stack
    and the ignored-type memo are created afresh.
    """

    def __init__(
        self,
        index: TypeIndex,
        root_type: TypeRef,
        config: ScannerConfig | None = None,
        root_target: FieldInfo | TypeInfo | None = None,
    ) -> None:
        self._index = index
        self._root_type = root_type
        self._config = config if config is not None else ScannerConfig.from_env()
        self._root_target = root_target
        self._object_stack = DataObjectDeque(index, self._config.max_depth)
        self._ignore_resolver = IgnoreResolver(index)
        self._root_schema = SchemaNode()

    @property
    def config(self) -> ScannerConfig:
        return self._config

    @property
    def ignore_resolver(self) -> IgnoreResolver:
        """Ignore policy of the most recent run."""
        return self._ignore_resolver

    def process(self) -> SchemaNode:
        """Run the traversal and return the root schema."""
        self._object_stack = DataObjectDeque(self._index, self._config.max_depth)
        self._ignore_resolver = IgnoreResolver(self._index)
        self._root_schema = SchemaNode()

        root_type = self._root_type
        if isinstance(root_type, WildcardRef):
            root_type = resolve_wildcard(root_type)
        if is_type_variable(root_type):
            root_type = TypeResolver().resolve(root_type)
        logger.debug("Starting processing with root: %s", root_type)

        # A simple top-level type needs no traversal
        if is_terminal_type(root_type):
            type_format = get_type_format(root_type)
            self._root_schema.set_type(type_format.schema_type)
            self._root_schema.set_format(type_format.format)
            return self._root_schema

        if self._is_special_type(root_type):
            self._resolve_special(root_type)
            self._dfs()
            return self._root_schema

        root_info = self._index.type_info(root_type)
        if root_info is None:
            logger.debug("Root type %s is not indexed. Returning an empty schema.", root_type)
            return self._root_schema

        self._root_schema.set_type(SchemaType.OBJECT)
        root = self._object_stack.root_node(self._root_target, root_type, root_info, self._root_schema)
        self._object_stack.push(root)
        self._dfs()
        return self._root_schema

    # ---- Traversal ----

    def _dfs(self) -> None:
        while not self._object_stack.is_empty():
            current = self._object_stack.pop()
            self._process_entry(current)

    def _process_entry(self, entry: PathEntry) -> None:
        type_info = entry.type_info
        if type_info is None:
            return

        if entry.enclosing is not None and self._ignore_resolver.is_ignore(type_info, entry.enclosing):
            logger.debug("Skipping fields of ignored type %s", type_info.name)
            return

        self._read_klass(entry)
        if entry.schema.ref is not None:
            logger.debug("Type %s is declared as a reference. Will not read its fields.", type_info.name)
            return

        logger.debug("Getting all fields for: %s in class: %s", entry.type_ref, type_info.name)
        for field, resolver in get_all_fields(self._index, type_info, entry.resolver):
            if self._ignore_resolver.is_ignore(field, entry):
                continue
            FieldProcessor.process(
                self._index,
                self._object_stack,
                self._config,
                resolver,
                entry,
                field,
            )

    def _read_klass(self, entry: PathEntry) -> None:
        """Apply class-level ``@schema`` metadata to the entry's fragment.

        Explicit values from the field that led here are applied again
        afterwards, so they take precedence over the class's values.
        """
        annotation = get_annotation(entry.type_info, SCHEMA)
        if annotation is None:
            return
        logger.debug("Applying class-level @schema on %s", entry.type_info.name)
        updated = read_schema(entry.schema, annotation)
        # A reference replaces the node; keep the identity the parent holds
        if updated is not entry.schema:
            entry.schema.copy_from(updated)
            return
        if entry.field_annotation is not None:
            read_schema(entry.schema, entry.field_annotation)

    # ---- Top-level containers ----

    def _is_special_type(self, ref: TypeRef) -> bool:
        if isinstance(ref, ArrayRef):
            return True
        if not self._index.is_known(ref):
            return False
        return (
            self._index.is_a(ref, COLLECTION)
            or self._index.is_a(ref, MAP)
            or self._index.is_a(ref, ENUM)
        )

    def _resolve_special(self, root_type: TypeRef) -> None:
        """Run a top-level container through the per-field logic.

        Containers have no declared fields to walk, so the root is treated
        as one anonymous field whose generic scope comes from a stand-in
        type.
        """
        if self._index.is_a(root_type, COLLECTION):
            root_info = COLLECTION_STANDIN
        elif self._index.is_a(root_type, MAP):
            root_info = MAP_STANDIN
        else:
            root_info = self._index.type_info(root_type)

        root = self._object_stack.root_node(self._root_target, root_type, root_info, self._root_schema)
        processor = FieldProcessor(
            self._index,
            self._object_stack,
            self._config,
            root,
            root.resolver,
            self._root_target,
            None,
            root_type,
            self._root_schema,
        )
        schema = processor.read_field_schema()
        if schema is None:
            logger.debug("Root %s is hidden", root_type)
            self._root_schema = SchemaNode()
        else:
            self._root_schema = schema


def scan(index: TypeIndex, root_type: TypeRef, config: ScannerConfig | None = None) -> SchemaNode:
    """Build the schema of ``root_type``."""
    return DataObjectScanner(index, root_type, config).process()
