"""Tests for the type index."""

import pytest

from typed_schema.index import (
    COLLECTION_STANDIN,
    ENUM_VALUES_FIELD,
    MAP_STANDIN,
    FieldInfo,
    TypeIndex,
    TypeInfo,
    enum_type_info,
)
from typed_schema.metadata import MetadataEntry
from typed_schema.parsing import TypeParser
from typed_schema.types import (
    ArrayRef,
    ClassRef,
    ParameterizedRef,
    PrimitiveRef,
    TypeVariableRef,
)


@pytest.fixture
def index():
    return TypeParser().parse("""
        type Animal {}
        type Dog extends Animal {}
        type Puppy extends Dog {}
        type Names extends List<string> {}
        type Lookup<V> extends Map<string, V> {}
        enum Color { red, green }
    """)


class TestTypeIndex:
    """Tests for registration and lookup."""

    def test_builtins_registered(self):
        index = TypeIndex()
        for name in ("Object", "Collection", "List", "Set", "Map", "Enum"):
            assert name in index
        list_info = index.get_or_raise("List")
        assert list_info.parameter_names == ["E"]
        assert list_info.supertype == ParameterizedRef(
            "Collection", (TypeVariableRef("E", owner="List"),)
        )
        assert index.get_or_raise("Map").parameter_names == ["K", "V"]

    def test_register_and_get(self):
        index = TypeIndex()
        info = TypeInfo(name="Point", fields=[FieldInfo("x", PrimitiveRef("int32"), "Point")])
        index.register(info)
        assert index.get("Point") is info
        assert "Point" in index.list_types()

    def test_register_duplicate(self):
        index = TypeIndex()
        index.register(TypeInfo(name="Point"))
        with pytest.raises(ValueError, match="Point"):
            index.register(TypeInfo(name="Point"))

    def test_get_missing(self):
        index = TypeIndex()
        assert index.get("Missing") is None
        with pytest.raises(KeyError):
            index.get_or_raise("Missing")

    def test_is_known(self, index):
        assert index.is_known(ClassRef("Animal"))
        assert index.contains(ParameterizedRef("List", (ClassRef("Animal"),)))
        assert not index.is_known(ClassRef("Missing"))
        assert not index.is_known(ArrayRef(ClassRef("Animal")))
        assert not index.is_known(PrimitiveRef("int32"))

    def test_type_info(self, index):
        assert index.type_info(ParameterizedRef("Map", ())).name == "Map"
        assert index.type_info(ArrayRef(ClassRef("Animal"))) is None

    def test_metadata_on(self):
        annotated = TypeInfo(name="A", annotations=[MetadataEntry("ignore_type")])
        bare = FieldInfo("f", ClassRef("string"), "A")
        index = TypeIndex()
        assert index.metadata_on(annotated) == [MetadataEntry("ignore_type")]
        assert index.metadata_on(bare) is None


class TestSubtyping:
    """Tests for is_a."""

    def test_reflexive(self, index):
        assert index.is_a(ClassRef("Animal"), "Animal")

    def test_transitive_supertypes(self, index):
        assert index.is_a(ClassRef("Puppy"), "Animal")
        assert not index.is_a(ClassRef("Animal"), "Dog")

    def test_containers(self, index):
        assert index.is_a(ParameterizedRef("List", (ClassRef("Animal"),)), "Collection")
        assert index.is_a(ClassRef("Set"), "Collection")
        assert index.is_a(ClassRef("Names"), "Collection")
        assert index.is_a(ParameterizedRef("Lookup", (ClassRef("Animal"),)), "Map")
        assert not index.is_a(ClassRef("Map"), "Collection")

    def test_enum(self, index):
        assert index.is_a(ClassRef("Color"), "Enum")

    def test_arrays_are_not_nominal_subtypes(self, index):
        assert not index.is_a(ArrayRef(ClassRef("Animal")), "Animal")

    def test_unknown_type(self, index):
        assert not index.is_a(ClassRef("Missing"), "Object")

    def test_interfaces(self):
        index = TypeIndex()
        index.register(TypeInfo(name="Named"))
        index.register(TypeInfo(name="Pet", interfaces=[ClassRef("Named")]))
        assert index.is_a(ClassRef("Pet"), "Named")

    def test_supertype_cycle_terminates(self):
        index = TypeIndex()
        index.register(TypeInfo(name="A", supertype=ClassRef("B")))
        index.register(TypeInfo(name="B", supertype=ClassRef("A")))
        assert not index.is_a(ClassRef("A"), "C")


class TestEnumTypeInfo:
    """Tests for the indexed form of enumerations."""

    def test_constants_and_values_field(self):
        info = enum_type_info("Size", ["small", "large"])
        assert info.supertype == ClassRef("Enum")
        assert [f.name for f in info.fields] == ["small", "large", ENUM_VALUES_FIELD]
        assert info.get_field(ENUM_VALUES_FIELD).type == ArrayRef(ClassRef("Size"))


class TestStandins:
    """Tests for the container stand-in types."""

    def test_collection_standin(self):
        (element,) = COLLECTION_STANDIN.fields
        assert element.name == "element"
        assert element.type == COLLECTION_STANDIN.type_parameters[0]

    def test_map_standin_element_is_value(self):
        (element,) = MAP_STANDIN.fields
        assert MAP_STANDIN.parameter_names == ["K", "V"]
        assert element.type == MAP_STANDIN.type_parameters[1]
