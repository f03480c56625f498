"""Tests for the type definition DSL."""

import pytest

from typed_schema.index import ENUM_VALUES_FIELD
from typed_schema.metadata import MetadataEntry
from typed_schema.parsing import TypeParser
from typed_schema.parsing.type_lexer import TypeLexer
from typed_schema.types import (
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    PrimitiveRef,
    TypeVariableRef,
    WildcardRef,
)


class TestTypeLexer:
    """Tests for the type lexer."""

    def test_tokenize_generic_type(self):
        lexer = TypeLexer()
        lexer.build()

        tokens = lexer.tokenize("type Box<T> { value: T }")
        token_types = [t.type for t in tokens]

        assert token_types == [
            "TYPE",
            "IDENTIFIER",
            "LT",
            "IDENTIFIER",
            "GT",
            "LBRACE",
            "IDENTIFIER",
            "COLON",
            "IDENTIFIER",
            "RBRACE",
        ]

    def test_tokenize_annotation_literals(self):
        lexer = TypeLexer()
        lexer.build()

        tokens = lexer.tokenize('@schema(title="A \\"b\\"", minimum=-1, maximum=2.5, nullable=true)')
        values = [t.value for t in tokens if t.type in ("STRING", "INTEGER", "FLOAT")]

        assert values == ['A "b"', -1, 2.5]
        assert "TRUE" in [t.type for t in tokens]

    def test_comments_and_newlines_ignored(self):
        lexer = TypeLexer()
        lexer.build()

        tokens = lexer.tokenize("# a comment\ntype A {}\n")
        assert [t.type for t in tokens] == ["TYPE", "IDENTIFIER", "LBRACE", "RBRACE"]
        assert tokens[0].lineno == 2

    def test_illegal_character(self):
        lexer = TypeLexer()
        lexer.build()

        with pytest.raises(SyntaxError):
            lexer.tokenize("type A { x: ; }")


class TestTypeParser:
    """Tests for parsing type definitions into an index."""

    def test_parse_simple_type(self):
        index = TypeParser().parse("""
            type Person {
                name: string,
                age: int32,
            }
        """)

        person = index.get_or_raise("Person")
        assert [f.name for f in person.fields] == ["name", "age"]
        assert person.get_field("name").type == ClassRef("string")
        assert person.get_field("age").type == PrimitiveRef("int32")
        assert person.get_field("age").declaring_type == "Person"
        assert person.supertype is None

    def test_parse_empty_input(self):
        index = TypeParser().parse("")
        assert "Object" in index

    def test_parse_generic_type(self):
        index = TypeParser().parse("""
            type Animal {}
            type Box<T, U extends Animal> extends Base<T> {
                value: T,
                pets: List<? extends Animal>,
                lookup: Map<string, U[]>,
            }
            type Base<X> { inner: X }
        """)

        box = index.get_or_raise("Box")
        t = TypeVariableRef("T", owner="Box")
        u = TypeVariableRef("U", owner="Box", bounds=(ClassRef("Animal"),))
        assert box.type_parameters == [t, u]
        assert box.parameter_names == ["T", "U"]
        assert box.supertype == ParameterizedRef("Base", (t,))
        assert box.get_field("value").type == t
        assert box.get_field("pets").type == ParameterizedRef(
            "List", (WildcardRef(extends_bound=ClassRef("Animal")),)
        )
        assert box.get_field("lookup").type == ParameterizedRef(
            "Map", (ClassRef("string"), ArrayRef(u))
        )

    def test_parse_static_field(self):
        index = TypeParser().parse("type Counter { static total: int64, count: int32 }")
        counter = index.get_or_raise("Counter")
        assert counter.get_field("total").is_static
        assert not counter.get_field("count").is_static

    def test_parse_annotations(self):
        index = TypeParser().parse("""
            @ignore_properties(["secret", "token"])
            @schema(title="Account")
            type Account {
                @schema(required=true, type="string", minimum=1, maximum=9.5)
                id: int64,
                @ignore
                secret: string,
                @ignore()
                token: string,
                @ignore(false)
                name: string,
            }
        """)

        account = index.get_or_raise("Account")
        assert account.annotations == [
            MetadataEntry("ignore_properties", {"value": ["secret", "token"]}),
            MetadataEntry("schema", {"title": "Account"}),
        ]
        assert account.get_field("id").annotations == [
            MetadataEntry("schema", {"required": True, "type": "string", "minimum": 1, "maximum": 9.5})
        ]
        assert account.get_field("secret").annotations == [MetadataEntry("ignore")]
        assert account.get_field("token").annotations == [MetadataEntry("ignore")]
        assert account.get_field("name").annotations == [MetadataEntry("ignore", {"value": False})]

    def test_parse_enum(self):
        index = TypeParser().parse("enum Color { red, green, blue, }")

        color = index.get_or_raise("Color")
        assert color.supertype == ClassRef("Enum")
        assert [f.name for f in color.fields] == ["red", "green", "blue", ENUM_VALUES_FIELD]
        assert all(f.is_static for f in color.fields)
        assert color.get_field("red").type == ClassRef("Color")
        assert index.is_a(ClassRef("Color"), "Enum")

    def test_parse_empty_enum(self):
        index = TypeParser().parse("enum Nothing { }")

        nothing = index.get_or_raise("Nothing")
        assert [f.name for f in nothing.fields] == [ENUM_VALUES_FIELD]
        assert index.is_a(ClassRef("Nothing"), "Enum")

    def test_parse_interfaces(self):
        index = TypeParser().parse("""
            type Named {}
            type Bag<E> extends Named implements Collection<E>, Comparable<Bag<E>> { size: int32 }
            type Comparable<C> {}
        """)

        bag = index.get_or_raise("Bag")
        e = TypeVariableRef("E", owner="Bag")
        assert bag.supertype == ClassRef("Named")
        assert bag.interfaces == [
            ParameterizedRef("Collection", (e,)),
            ParameterizedRef("Comparable", (ParameterizedRef("Bag", (e,)),)),
        ]
        assert index.is_a(ClassRef("Bag"), "Collection")
        assert index.is_a(ClassRef("Bag"), "Named")

    def test_keywords_as_field_names(self):
        """Reserved words are accepted as field names."""
        index = TypeParser().parse("""
            type Event {
                type: string,
                extends: boolean,
                super: string,
                true: string,
                false: string,
                static: string,
                static enum: int64,
                kind: string,
            }
        """)

        event = index.get_or_raise("Event")
        assert [f.name for f in event.fields] == [
            "type", "extends", "super", "true", "false", "static", "enum", "kind"
        ]
        assert event.get_field("type").type == ClassRef("string")
        assert not event.get_field("static").is_static
        assert event.get_field("enum").is_static
        assert event.get_field("enum").type == PrimitiveRef("int64")

    def test_parse_into_existing_index(self):
        parser = TypeParser()
        index = parser.parse("type A { b: B }")
        parser.parse("type B { a: A }", index)
        assert "A" in index
        assert "B" in index

    def test_duplicate_type_error(self):
        with pytest.raises(ValueError, match="already defined"):
            TypeParser().parse("type A {} type A {}")

    def test_duplicate_builtin_error(self):
        with pytest.raises(ValueError):
            TypeParser().parse("type List {}")

    def test_syntax_error(self):
        with pytest.raises(SyntaxError):
            TypeParser().parse("type A { name string }")

    def test_syntax_error_at_end(self):
        with pytest.raises(SyntaxError, match="end of input"):
            TypeParser().parse("type A {")


class TestParseTypeRef:
    """Tests for parsing standalone type references."""

    def test_simple(self):
        parser = TypeParser()
        assert parser.parse_type_ref("Person") == ClassRef("Person")
        assert parser.parse_type_ref("float64") == PrimitiveRef("float64")

    def test_nested(self):
        ref = TypeParser().parse_type_ref("Map<string, List<Foo[]>>")
        assert ref == ParameterizedRef(
            "Map",
            (ClassRef("string"), ParameterizedRef("List", (ArrayRef(ClassRef("Foo")),))),
        )

    def test_wildcard(self):
        ref = TypeParser().parse_type_ref("List<?>")
        assert ref == ParameterizedRef("List", (WildcardRef(),))

    def test_both_parsers_on_one_instance(self):
        parser = TypeParser()
        parser.parse("type A {}")
        assert parser.parse_type_ref("A[]") == ArrayRef(ClassRef("A"))
        index = parser.parse("type B {}")
        assert "B" in index

    def test_invalid(self):
        with pytest.raises(SyntaxError):
            TypeParser().parse_type_ref("List<")
