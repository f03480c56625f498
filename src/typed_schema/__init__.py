"""Typed Schema - Infers JSON-Schema-like documents from an indexed type graph."""

from typed_schema.config import ConfigurationError, ScannerConfig
from typed_schema.index import FieldInfo, TypeIndex, TypeInfo
from typed_schema.metadata import MetadataEntry
from typed_schema.parsing import TypeParser
from typed_schema.scanner import DataObjectScanner, scan
from typed_schema.schema import SchemaNode
from typed_schema.type_format import SchemaType
from typed_schema.types import (
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    PrimitiveRef,
    TypeKind,
    TypeRef,
    TypeVariableRef,
    UnresolvedTypeVariableRef,
    VoidRef,
    WildcardRef,
)

__all__ = [
    # Main API
    "DataObjectScanner",
    "scan",
    "TypeParser",
    "ScannerConfig",
    "ConfigurationError",
    # Index
    "TypeIndex",
    "TypeInfo",
    "FieldInfo",
    "MetadataEntry",
    # Output
    "SchemaNode",
    "SchemaType",
    # Type references
    "TypeRef",
    "TypeKind",
    "PrimitiveRef",
    "VoidRef",
    "ClassRef",
    "ArrayRef",
    "ParameterizedRef",
    "TypeVariableRef",
    "UnresolvedTypeVariableRef",
    "WildcardRef",
]

__version__ = "0.1.0"
