"""Tests for generic bindings and field collection."""

import pytest

from typed_schema.parsing import TypeParser
from typed_schema.scanner.resolver import TypeResolver, get_all_fields
from typed_schema.types import (
    OBJECT_TYPE,
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    TypeVariableRef,
    UnresolvedTypeVariableRef,
    WildcardRef,
)

STRING = ClassRef("string")


@pytest.fixture
def index():
    return TypeParser().parse("""
        type Animal {}
        type Box<T> { value: T }
        type Pair<A, B> { first: A, second: B }
        type Base<X> {
            id: int64,
            inner: X,
            name: string,
        }
        type Middle<Y> extends Base<List<Y>> {
            extra: Y,
        }
        type Leaf extends Middle<string> {
            name: uuid,
            static counter: int32,
        }
        type Sorted<T extends Comparable<T>> { value: T }
        type Comparable<C> {}
    """)


class TestTypeResolver:
    """Tests for type variable resolution."""

    def test_for_type_binds_arguments(self, index):
        ref = ParameterizedRef("Pair", (STRING, ClassRef("Animal")))
        resolver = TypeResolver.for_type(ref, index.type_info(ref))
        assert resolver.bindings == {"A": STRING, "B": ClassRef("Animal")}
        assert resolver.resolve(TypeVariableRef("B", owner="Pair")) == ClassRef("Animal")

    def test_raw_use_binds_nothing(self, index):
        resolver = TypeResolver.for_type(ClassRef("Box"), index.get("Box"))
        assert resolver.bindings == {}
        assert resolver.resolve(TypeVariableRef("T", owner="Box")) == OBJECT_TYPE

    def test_deep_substitution(self):
        t = TypeVariableRef("T")
        resolver = TypeResolver({"T": STRING})
        ref = ParameterizedRef("Map", (STRING, ArrayRef(ParameterizedRef("List", (t,)))))
        assert resolver.resolve(ref) == ParameterizedRef(
            "Map", (STRING, ArrayRef(ParameterizedRef("List", (STRING,))))
        )
        assert resolver.resolve(WildcardRef(extends_bound=t)) == WildcardRef(extends_bound=STRING)

    def test_lookup_walks_outward(self):
        outer = TypeResolver({"T": STRING})
        inner = TypeResolver({"U": ClassRef("Animal")}, parent=outer)
        assert inner.parent is outer
        assert inner.resolve(TypeVariableRef("T")) == STRING
        assert inner.resolve(UnresolvedTypeVariableRef("U")) == ClassRef("Animal")

    def test_arguments_resolved_in_parent_scope(self, index):
        outer = TypeResolver({"T": STRING})
        ref = ParameterizedRef("Box", (ParameterizedRef("List", (TypeVariableRef("T"),)),))
        resolver = TypeResolver.for_type(ref, index.get("Box"), parent=outer)
        assert resolver.bindings == {"T": ParameterizedRef("List", (STRING,))}

    def test_raw_use_stops_outward_lookup(self, index):
        outer = TypeResolver.for_type(ParameterizedRef("Box", (STRING,)), index.get("Box"))
        raw = TypeResolver.for_type(ClassRef("Sorted"), index.get("Sorted"), parent=outer)
        (t,) = index.get("Sorted").type_parameters
        assert raw.owner == "Sorted"
        assert raw.resolve(t) == ParameterizedRef("Comparable", (OBJECT_TYPE,))
        assert raw.resolve(TypeVariableRef("T", owner="Box")) == STRING

    def test_lookup_skips_scopes_of_other_owners(self, index):
        outer = TypeResolver.for_type(ParameterizedRef("Box", (STRING,)), index.get("Box"))
        inner = TypeResolver.for_type(ParameterizedRef("Box", (ClassRef("Animal"),)), index.get("Box"), parent=outer)
        pair = TypeResolver.for_type(ParameterizedRef("Pair", (STRING, STRING)), index.get("Pair"), parent=inner)
        assert pair.resolve(TypeVariableRef("T", owner="Box")) == ClassRef("Animal")
        assert pair.resolve(TypeVariableRef("A", owner="Animal")) == OBJECT_TYPE

    def test_wildcard_argument_uses_bound(self, index):
        ref = ParameterizedRef("Box", (WildcardRef(extends_bound=ClassRef("Animal")),))
        resolver = TypeResolver.for_type(ref, index.get("Box"))
        assert resolver.bindings == {"T": ClassRef("Animal")}

    def test_unbound_variable_uses_bound(self, index):
        (t,) = index.get("Sorted").type_parameters
        assert TypeResolver().resolve(t) == ParameterizedRef("Comparable", (OBJECT_TYPE,))

    def test_unbound_variable_defaults_to_object(self):
        assert TypeResolver().resolve(TypeVariableRef("Z")) == OBJECT_TYPE
        assert TypeResolver().resolve(UnresolvedTypeVariableRef("Z")) == OBJECT_TYPE


class TestGetAllFields:
    """Tests for own and inherited field collection."""

    def test_own_fields(self, index):
        ref = ParameterizedRef("Box", (STRING,))
        resolver = TypeResolver.for_type(ref, index.type_info(ref))
        fields = get_all_fields(index, index.get("Box"), resolver)
        assert [(f.name, r.resolve(f.type)) for f, r in fields] == [("value", STRING)]

    def test_inherited_generic_fields(self, index):
        leaf = index.get("Leaf")
        fields = get_all_fields(index, leaf, TypeResolver.for_type(ClassRef("Leaf"), leaf))
        resolved = {f.name: r.resolve(f.type) for f, r in fields}

        assert [f.name for f, _ in fields] == ["id", "inner", "name", "extra"]
        assert resolved["inner"] == ParameterizedRef("List", (STRING,))
        assert resolved["extra"] == STRING

    def test_subtype_field_shadows_ancestor(self, index):
        leaf = index.get("Leaf")
        fields = dict((f.name, f) for f, _ in get_all_fields(index, leaf, TypeResolver()))
        assert fields["name"].declaring_type == "Leaf"
        assert fields["name"].type == ClassRef("uuid")

    def test_static_fields_excluded(self, index):
        leaf = index.get("Leaf")
        names = [f.name for f, _ in get_all_fields(index, leaf, TypeResolver())]
        assert "counter" not in names

    def test_unindexed_supertype(self):
        index = TypeParser().parse("type Child extends Missing { a: string }")
        child = index.get("Child")
        assert [f.name for f, _ in get_all_fields(index, child, TypeResolver())] == ["a"]
