"""Type graph scanner producing schema trees."""

from typed_schema.scanner.deque import DataObjectDeque, PathEntry
from typed_schema.scanner.engine import DataObjectScanner, scan
from typed_schema.scanner.field_processor import FieldProcessor
from typed_schema.scanner.ignore import IgnoreResolver
from typed_schema.scanner.resolver import TypeResolver, get_all_fields
from typed_schema.scanner.type_processor import TypeProcessor

__all__ = [
    "DataObjectDeque",
    "DataObjectScanner",
    "FieldProcessor",
    "IgnoreResolver",
    "PathEntry",
    "TypeProcessor",
    "TypeResolver",
    "get_all_fields",
    "scan",
]
