"""Parsing module for the type definition DSL."""

from typed_schema.parsing.type_parser import TypeParser

__all__ = [
    "TypeParser",
]
