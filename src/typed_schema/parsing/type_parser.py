"""Parser for the type definition DSL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from typed_schema.index import FieldInfo, TypeIndex, TypeInfo, enum_type_info
from typed_schema.metadata import VALUE, MetadataEntry
from typed_schema.parsing.type_lexer import TypeLexer
from typed_schema.types import (
    ArrayRef,
    ParameterizedRef,
    TypeRef,
    TypeVariableRef,
    WildcardRef,
    type_ref_from_name,
)


@dataclass
class TypeRefSpec:
    """Reference to a type before type-parameter resolution."""

    name: str
    arguments: list[TypeRefSpec | WildcardSpec] | None = None


@dataclass
class ArraySpec:
    """Array of a referenced type."""

    component: TypeRefSpec | ArraySpec


@dataclass
class WildcardSpec:
    """Wildcard type argument."""

    extends_bound: TypeRefSpec | ArraySpec | None = None
    super_bound: TypeRefSpec | ArraySpec | None = None


@dataclass
class TypeParamSpec:
    """Declared generic parameter."""

    name: str
    bound: TypeRefSpec | ArraySpec | None = None


@dataclass
class FieldSpec:
    """Specification for a field before resolution."""

    name: str
    type_ref: TypeRefSpec | ArraySpec
    is_static: bool = False
    annotations: list[MetadataEntry] = field(default_factory=list)


@dataclass
class TypeSpec:
    """Specification for a class type before resolution."""

    name: str
    fields: list[FieldSpec]
    type_params: list[TypeParamSpec] = field(default_factory=list)
    supertype: TypeRefSpec | None = None
    interfaces: list[TypeRefSpec] = field(default_factory=list)
    annotations: list[MetadataEntry] = field(default_factory=list)


@dataclass
class EnumSpec:
    """Specification for an enum type."""

    name: str
    constants: list[str]
    annotations: list[MetadataEntry] = field(default_factory=list)


class TypeParser:
    """Parser for the type definition DSL."""

    tokens = TypeLexer.tokens

    def __init__(self) -> None:
        self.lexer = TypeLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.type_ref_parser: yacc.LRParser = None  # type: ignore
        self.index: TypeIndex = TypeIndex()

    # ---- Statements ----

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : statement_list"""
        p[0] = p[1]

    def p_schema_empty(self, p: yacc.YaccProduction) -> None:
        """schema :"""
        p[0] = []

    def p_statement_list_single(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement"""
        p[0] = [p[1]]

    def p_statement_list_multiple(self, p: yacc.YaccProduction) -> None:
        """statement_list : statement_list statement"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : type_def
                     | enum_def"""
        p[0] = p[1]

    def p_type_def(self, p: yacc.YaccProduction) -> None:
        """type_def : annotations TYPE IDENTIFIER type_params supertype interfaces field_block"""
        p[0] = TypeSpec(
            name=p[3],
            fields=p[7],
            type_params=p[4],
            supertype=p[5],
            interfaces=p[6],
            annotations=p[1],
        )

    def p_type_params(self, p: yacc.YaccProduction) -> None:
        """type_params : LT type_param_list GT"""
        p[0] = p[2]

    def p_type_params_empty(self, p: yacc.YaccProduction) -> None:
        """type_params :"""
        p[0] = []

    def p_type_param_list_single(self, p: yacc.YaccProduction) -> None:
        """type_param_list : type_param"""
        p[0] = [p[1]]

    def p_type_param_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_param_list : type_param_list COMMA type_param"""
        p[0] = p[1] + [p[3]]

    def p_type_param(self, p: yacc.YaccProduction) -> None:
        """type_param : IDENTIFIER"""
        p[0] = TypeParamSpec(name=p[1])

    def p_type_param_bounded(self, p: yacc.YaccProduction) -> None:
        """type_param : IDENTIFIER EXTENDS type_ref"""
        p[0] = TypeParamSpec(name=p[1], bound=p[3])

    def p_supertype(self, p: yacc.YaccProduction) -> None:
        """supertype : EXTENDS type_ref"""
        p[0] = p[2]

    def p_supertype_empty(self, p: yacc.YaccProduction) -> None:
        """supertype :"""
        p[0] = None

    def p_interfaces(self, p: yacc.YaccProduction) -> None:
        """interfaces : IMPLEMENTS interface_list"""
        p[0] = p[2]

    def p_interfaces_empty(self, p: yacc.YaccProduction) -> None:
        """interfaces :"""
        p[0] = []

    def p_interface_list_single(self, p: yacc.YaccProduction) -> None:
        """interface_list : type_ref"""
        p[0] = [p[1]]

    def p_interface_list_multiple(self, p: yacc.YaccProduction) -> None:
        """interface_list : interface_list COMMA type_ref"""
        p[0] = p[1] + [p[3]]

    def p_field_block_empty(self, p: yacc.YaccProduction) -> None:
        """field_block : LBRACE RBRACE"""
        p[0] = []

    def p_field_block(self, p: yacc.YaccProduction) -> None:
        """field_block : LBRACE field_list RBRACE
                       | LBRACE field_list COMMA RBRACE"""
        p[0] = p[2]

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field"""
        p[0] = p[1] + [p[3]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : annotations field_name COLON type_ref"""
        p[0] = FieldSpec(name=p[2], type_ref=p[4], annotations=p[1])

    def p_field_static(self, p: yacc.YaccProduction) -> None:
        """field : annotations STATIC field_name COLON type_ref"""
        p[0] = FieldSpec(name=p[3], type_ref=p[5], is_static=True, annotations=p[1])

    def p_field_name(self, p: yacc.YaccProduction) -> None:
        """field_name : IDENTIFIER
                      | TYPE
                      | ENUM
                      | STATIC
                      | EXTENDS
                      | IMPLEMENTS
                      | SUPER
                      | TRUE
                      | FALSE"""
        # Keywords are plain names in field position
        p[0] = p[1]

    def p_enum_def_empty(self, p: yacc.YaccProduction) -> None:
        """enum_def : annotations ENUM IDENTIFIER LBRACE RBRACE"""
        p[0] = EnumSpec(name=p[3], constants=[], annotations=p[1])

    def p_enum_def(self, p: yacc.YaccProduction) -> None:
        """enum_def : annotations ENUM IDENTIFIER LBRACE identifier_list RBRACE
                    | annotations ENUM IDENTIFIER LBRACE identifier_list COMMA RBRACE"""
        p[0] = EnumSpec(name=p[3], constants=p[5], annotations=p[1])

    def p_identifier_list_single(self, p: yacc.YaccProduction) -> None:
        """identifier_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_identifier_list_multiple(self, p: yacc.YaccProduction) -> None:
        """identifier_list : identifier_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    # ---- Annotations ----

    def p_annotations(self, p: yacc.YaccProduction) -> None:
        """annotations : annotations annotation"""
        p[0] = p[1] + [p[2]]

    def p_annotations_empty(self, p: yacc.YaccProduction) -> None:
        """annotations :"""
        p[0] = []

    def p_annotation_bare(self, p: yacc.YaccProduction) -> None:
        """annotation : AT IDENTIFIER
                      | AT IDENTIFIER LPAREN RPAREN"""
        p[0] = MetadataEntry(name=p[2])

    def p_annotation_args(self, p: yacc.YaccProduction) -> None:
        """annotation : AT IDENTIFIER LPAREN annotation_args RPAREN"""
        p[0] = MetadataEntry(name=p[2], values=dict(p[4]))

    def p_annotation_args_single(self, p: yacc.YaccProduction) -> None:
        """annotation_args : annotation_arg"""
        p[0] = [p[1]]

    def p_annotation_args_multiple(self, p: yacc.YaccProduction) -> None:
        """annotation_args : annotation_args COMMA annotation_arg"""
        p[0] = p[1] + [p[3]]

    def p_annotation_arg_named(self, p: yacc.YaccProduction) -> None:
        """annotation_arg : IDENTIFIER EQUALS literal
                          | TYPE EQUALS literal"""
        p[0] = (p[1], p[3])

    def p_annotation_arg_value(self, p: yacc.YaccProduction) -> None:
        """annotation_arg : literal"""
        p[0] = (VALUE, p[1])

    def p_literal_scalar(self, p: yacc.YaccProduction) -> None:
        """literal : STRING
                   | INTEGER
                   | FLOAT"""
        p[0] = p[1]

    def p_literal_true(self, p: yacc.YaccProduction) -> None:
        """literal : TRUE"""
        p[0] = True

    def p_literal_false(self, p: yacc.YaccProduction) -> None:
        """literal : FALSE"""
        p[0] = False

    def p_literal_list_empty(self, p: yacc.YaccProduction) -> None:
        """literal : LBRACKET RBRACKET"""
        p[0] = []

    def p_literal_list(self, p: yacc.YaccProduction) -> None:
        """literal : LBRACKET literal_list RBRACKET
                   | LBRACKET literal_list COMMA RBRACKET"""
        p[0] = p[2]

    def p_literal_list_single(self, p: yacc.YaccProduction) -> None:
        """literal_list : literal"""
        p[0] = [p[1]]

    def p_literal_list_multiple(self, p: yacc.YaccProduction) -> None:
        """literal_list : literal_list COMMA literal"""
        p[0] = p[1] + [p[3]]

    # ---- Type references ----

    def p_type_ref_simple(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER"""
        p[0] = TypeRefSpec(name=p[1])

    def p_type_ref_parameterized(self, p: yacc.YaccProduction) -> None:
        """type_ref : IDENTIFIER LT type_arg_list GT"""
        p[0] = TypeRefSpec(name=p[1], arguments=p[3])

    def p_type_ref_array(self, p: yacc.YaccProduction) -> None:
        """type_ref : type_ref LBRACKET RBRACKET"""
        p[0] = ArraySpec(component=p[1])

    def p_type_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """type_arg_list : type_arg"""
        p[0] = [p[1]]

    def p_type_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_arg_list : type_arg_list COMMA type_arg"""
        p[0] = p[1] + [p[3]]

    def p_type_arg(self, p: yacc.YaccProduction) -> None:
        """type_arg : type_ref"""
        p[0] = p[1]

    def p_type_arg_wildcard(self, p: yacc.YaccProduction) -> None:
        """type_arg : QUESTION"""
        p[0] = WildcardSpec()

    def p_type_arg_wildcard_extends(self, p: yacc.YaccProduction) -> None:
        """type_arg : QUESTION EXTENDS type_ref"""
        p[0] = WildcardSpec(extends_bound=p[3])

    def p_type_arg_wildcard_super(self, p: yacc.YaccProduction) -> None:
        """type_arg : QUESTION SUPER type_ref"""
        p[0] = WildcardSpec(super_bound=p[3])

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    # ---- Public API ----

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str, index: TypeIndex | None = None) -> TypeIndex:
        """Parse type definitions and return a populated TypeIndex.

        Args:
            data: DSL text.
            index: Existing index to add the types to. A fresh index is
                created when omitted.

        Returns:
            The populated index.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.index = index if index is not None else TypeIndex()
        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        if specs is None:
            specs = []

        for spec in specs:
            if isinstance(spec, EnumSpec):
                self.index.register(enum_type_info(spec.name, spec.constants, spec.annotations))
            else:
                self.index.register(self._resolve_type_spec(spec))

        return self.index

    def parse_type_ref(self, data: str) -> TypeRef:
        """Parse a standalone type reference such as ``Map<string, Foo[]>``."""
        if self.type_ref_parser is None:
            self.type_ref_parser = yacc.yacc(
                module=self,
                start="type_ref",
                debug=False,
                write_tables=False,
                errorlog=yacc.NullLogger(),
            )
        self.lexer.lexer.lineno = 1
        spec = self.type_ref_parser.parse(data, lexer=self.lexer.lexer)
        if spec is None:
            raise SyntaxError("Syntax error at end of input")
        return self._resolve_type_ref(spec, {})

    # ---- Resolution ----

    def _resolve_type_spec(self, spec: TypeSpec) -> TypeInfo:
        """Resolve a class spec into a TypeInfo.

        Type parameters are declared first so that bounds, the supertype and
        field types can refer to them (including self-referential bounds).
        """
        params: dict[str, TypeVariableRef] = {
            tp.name: TypeVariableRef(tp.name, owner=spec.name) for tp in spec.type_params
        }
        bounded: list[TypeVariableRef] = []
        for tp in spec.type_params:
            if tp.bound is None:
                bounded.append(params[tp.name])
            else:
                bound = self._resolve_type_ref(tp.bound, params)
                bounded.append(TypeVariableRef(tp.name, owner=spec.name, bounds=(bound,)))
        params = {var.identifier: var for var in bounded}

        supertype = None
        if spec.supertype is not None:
            supertype = self._resolve_type_ref(spec.supertype, params)
        interfaces = [self._resolve_type_ref(i, params) for i in spec.interfaces]

        fields = [
            FieldInfo(
                name=fs.name,
                type=self._resolve_type_ref(fs.type_ref, params),
                declaring_type=spec.name,
                is_static=fs.is_static,
                annotations=fs.annotations,
            )
            for fs in spec.fields
        ]
        return TypeInfo(
            name=spec.name,
            fields=fields,
            type_parameters=bounded,
            supertype=supertype,
            interfaces=interfaces,
            annotations=spec.annotations,
        )

    def _resolve_type_ref(
        self,
        spec: TypeRefSpec | ArraySpec | WildcardSpec,
        params: dict[str, TypeVariableRef],
    ) -> TypeRef:
        """Resolve a type reference spec against the declared type parameters."""
        if isinstance(spec, ArraySpec):
            return ArrayRef(self._resolve_type_ref(spec.component, params))
        if isinstance(spec, WildcardSpec):
            return WildcardRef(
                extends_bound=(
                    self._resolve_type_ref(spec.extends_bound, params)
                    if spec.extends_bound is not None
                    else None
                ),
                super_bound=(
                    self._resolve_type_ref(spec.super_bound, params)
                    if spec.super_bound is not None
                    else None
                ),
            )
        if spec.arguments is not None:
            return ParameterizedRef(
                spec.name,
                tuple(self._resolve_type_ref(a, params) for a in spec.arguments),
            )
        if spec.name in params:
            return params[spec.name]
        return type_ref_from_name(spec.name)
