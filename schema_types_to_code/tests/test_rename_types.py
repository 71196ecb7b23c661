import pytest

from schema_types_to_code.pipeline.definitions import (
    DefinitionSet,
    EnumDefinition,
    EnumRef,
    Field,
    NamedRef,
    ScalarRef,
    TypeDefinition,
    TypeKind,
    check_integrity,
    make_union,
)
from schema_types_to_code.pipeline.errors import NamingCollisionError
from schema_types_to_code.pipeline.mutators import rename_types


@pytest.fixture
def zoo_definitions():
    return DefinitionSet.from_definitions(
        [
            TypeDefinition("Query", TypeKind.MODEL, (Field("id", ScalarRef("Int")), Field("kind", EnumRef("Error")))),
            TypeDefinition(
                "QueryWhereInput",
                TypeKind.INPUT,
                (Field("parent", make_union([NamedRef("Query"), ScalarRef("Int")]), nullable=True),),
                source_entity="Query",
            ),
        ],
        [EnumDefinition("Error", ("NOT_FOUND", "DENIED"))],
    )


class TestRenameTypes:
    """Test the zoo type renamer"""

    def test_types_enums_and_references_are_renamed(self, zoo_definitions):
        result = rename_types(zoo_definitions, {"Query": "QueryType", "Error": "ErrorType"})

        assert result.names() == ["QueryType", "QueryWhereInput"]
        assert list(result.enums) == ["ErrorType"]
        assert result.get("QueryType").get_field("kind").type_ref == EnumRef("ErrorType")
        parent = result.get("QueryWhereInput").get_field("parent")
        assert parent.type_ref == make_union([NamedRef("QueryType"), ScalarRef("Int")])
        # The entity name is not a type name, file placement stays the same
        assert result.get("QueryWhereInput").source_entity == "Query"
        check_integrity(result)

    def test_rename_is_idempotent(self, zoo_definitions):
        table = {"Query": "QueryType", "Error": "ErrorType"}
        once = rename_types(zoo_definitions, table)
        twice = rename_types(once, table)
        assert twice is once

    def test_absent_sources_are_ignored(self, zoo_definitions):
        assert rename_types(zoo_definitions, {"Promise": "PromiseType"}) is zoo_definitions

    def test_rename_onto_existing_type_collides(self):
        definitions = DefinitionSet.from_definitions(
            [
                TypeDefinition("Zoo", TypeKind.MODEL, (Field("id", ScalarRef("Int")),)),
                TypeDefinition("Zoo2", TypeKind.OUTPUT, (Field("count", ScalarRef("Int")),)),
            ]
        )
        with pytest.raises(NamingCollisionError) as exc_info:
            rename_types(definitions, {"Zoo": "Zoo2"})
        assert exc_info.value.name == "Zoo"
        assert exc_info.value.other_name == "Zoo2"

    def test_rename_onto_existing_enum_collides(self, zoo_definitions):
        with pytest.raises(NamingCollisionError):
            rename_types(zoo_definitions, {"Query": "Error"})

    def test_two_sources_sharing_a_target_collide(self):
        definitions = DefinitionSet.from_definitions([TypeDefinition("A", TypeKind.INPUT), TypeDefinition("B", TypeKind.INPUT)])
        with pytest.raises(NamingCollisionError):
            rename_types(definitions, {"A": "C", "B": "C"})

    def test_swap_is_applied_atomically(self):
        definitions = DefinitionSet.from_definitions(
            [
                TypeDefinition("A", TypeKind.INPUT, (Field("b", NamedRef("B")),)),
                TypeDefinition("B", TypeKind.INPUT, (Field("x", ScalarRef("Int")),)),
            ]
        )
        result = rename_types(definitions, {"A": "B", "B": "A"})

        assert result.names() == ["B", "A"]
        assert result.get("B").get_field("b").type_ref == NamedRef("A")
        assert result.get("A").get_field("x").type_ref == ScalarRef("Int")

    def test_renamed_model_keeps_its_entity(self, zoo_definitions):
        result = rename_types(zoo_definitions, {"Query": "QueryType"})
        assert result.get("QueryType").source_entity == "Query"
