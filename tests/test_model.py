"""Unit tests for the schema model."""

import dataclasses

import pytest

from gql_typed.core.model import (
    Field,
    ListType,
    NamedType,
    NonNullType,
    ScalarType,
    SchemaModel,
    SourceLocation,
    TypeDefinition,
    named_type,
)


class TestTypeRefs:
    """Tests for type references."""

    def test_str_renders_schema_syntax(self):
        ref = NonNullType(ListType(ListType(NonNullType(NamedType("Float")))))
        assert str(ref) == "[[Float!]]!"

    def test_named_type_strips_wrappers(self):
        ref = ListType(NonNullType(NamedType("Character")))
        assert named_type(ref) == NamedType("Character")
        assert named_type(NamedType("Int")) == NamedType("Int")

    def test_scalar_lookup(self):
        assert NamedType("ID").scalar is ScalarType.ID
        assert NamedType("Boolean").scalar is ScalarType.BOOLEAN
        assert NamedType("Character").scalar is None
        assert ScalarType.lookup("string") is None

    def test_location_str(self):
        assert str(SourceLocation("schema.graphql", 3, 7)) == "schema.graphql:3:7"


class TestSchemaModel:
    """Tests for SchemaModel lookups."""

    def test_lookup_type(self, starwars_model):
        assert starwars_model.lookup_type("Film").name == "Film"
        assert starwars_model.lookup_type("Droid") is None
        assert starwars_model.lookup_type("String") is None

    def test_fields_of_by_name_and_definition(self, starwars_model):
        film = starwars_model.types["Film"]
        by_name = starwars_model.fields_of("Film")

        assert by_name == starwars_model.fields_of(film)
        assert [f.name for f in by_name] == ["title", "episode", "characters", "ratings"]

    def test_fields_of_unknown_type(self, starwars_model):
        with pytest.raises(KeyError):
            starwars_model.fields_of("Droid")

    def test_root_query_type(self, starwars_model):
        root = starwars_model.root_query_type()
        assert root.name == "Query"
        assert root.description == "Entry point of every query."

    def test_field_lookup(self, starwars_model):
        character = starwars_model.types["Character"]
        assert character.field("friends").type == ListType(NamedType("Character"))
        assert character.field("missing") is None

    def test_types_keep_declaration_order(self, starwars_model):
        assert list(starwars_model.types) == ["Query", "Character", "Film"]

    def test_model_is_read_only(self, starwars_model):
        with pytest.raises(TypeError):
            starwars_model.types["Droid"] = TypeDefinition("Droid", (Field("id", NamedType("ID")),))
        with pytest.raises(dataclasses.FrozenInstanceError):
            starwars_model.query_type = "Film"
        with pytest.raises(dataclasses.FrozenInstanceError):
            starwars_model.types["Film"].name = "Movie"

    def test_model_copies_input_mapping(self):
        types = {"A": TypeDefinition("A", (Field("a", NamedType("Int")),))}
        model = SchemaModel(types=types, query_type="A")
        types.clear()

        assert list(model.types) == ["A"]
