from pathlib import Path

import pytest

from schema_types_to_code.pipeline.config import RemoveDuplicate
from schema_types_to_code.pipeline.definitions import (
    DefinitionSet,
    EnumRef,
    Field,
    NamedRef,
    ScalarRef,
    TypeDefinition,
    TypeKind,
    check_integrity,
    load_definitions_file,
    make_union,
)
from schema_types_to_code.pipeline.definitions.nodes import iter_refs
from schema_types_to_code.pipeline.mutators import canonical_order, deduplicate_types, partition_types

BLOG = Path(__file__).parent / "test_data" / "blog.definitions.json"


def input_type(name, *fields):
    return TypeDefinition(name, TypeKind.INPUT, tuple(fields))


class TestCanonicalOrder:
    def test_shortest_name_first(self):
        assert sorted(["NestedIntFilter", "IntFilter", "IntNullableFilter"], key=canonical_order) == [
            "IntFilter",
            "NestedIntFilter",
            "IntNullableFilter",
        ]

    def test_lexical_tie_break(self):
        assert sorted(["UserSumAggregateInput", "UserAvgAggregateInput"], key=canonical_order)[0] == "UserAvgAggregateInput"


class TestPartitionTypes:
    """Test structural equivalence classes"""

    def test_mutually_recursive_pair_is_one_class(self):
        definitions = DefinitionSet.from_definitions(
            [
                input_type("A", Field("next", NamedRef("B"), nullable=True), Field("v", ScalarRef("Int"))),
                input_type("B", Field("next", NamedRef("A"), nullable=True), Field("v", ScalarRef("Int"))),
            ]
        )
        assert partition_types(definitions, frozenset({TypeKind.INPUT})) == [["A", "B"]]

    def test_difference_behind_a_reference_splits_classes(self):
        definitions = DefinitionSet.from_definitions(
            [
                input_type("A", Field("next", NamedRef("B")), Field("v", ScalarRef("Int"))),
                input_type("B", Field("next", NamedRef("A")), Field("v", ScalarRef("Int"))),
                input_type("X", Field("next", NamedRef("Y")), Field("v", ScalarRef("Int"))),
                input_type("Y", Field("next", NamedRef("X")), Field("v", ScalarRef("String"))),
            ]
        )
        classes = partition_types(definitions, frozenset({TypeKind.INPUT}))
        assert sorted(classes) == [["A", "B"], ["X"], ["Y"]]

    def test_field_order_matters(self):
        definitions = DefinitionSet.from_definitions(
            [
                input_type("A", Field("x", ScalarRef("Int")), Field("y", ScalarRef("Int"))),
                input_type("B", Field("y", ScalarRef("Int")), Field("x", ScalarRef("Int"))),
            ]
        )
        assert len(partition_types(definitions, frozenset({TypeKind.INPUT}))) == 2

    @pytest.mark.parametrize(
        "other",
        [
            Field("x", ScalarRef("Int"), nullable=True),
            Field("x", ScalarRef("Int"), is_list=True),
            Field("x", ScalarRef("Float")),
            Field("x", EnumRef("Role")),
            Field("z", ScalarRef("Int")),
        ],
    )
    def test_field_attributes_distinguish(self, other):
        definitions = DefinitionSet.from_definitions([input_type("A", Field("x", ScalarRef("Int"))), input_type("B", other)])
        assert len(partition_types(definitions, frozenset({TypeKind.INPUT}))) == 2

    def test_kind_distinguishes(self):
        definitions = DefinitionSet.from_definitions(
            [
                TypeDefinition("A", TypeKind.INPUT, (Field("x", ScalarRef("Int")),)),
                TypeDefinition("B", TypeKind.ARGS, (Field("x", ScalarRef("Int")),)),
            ]
        )
        assert len(partition_types(definitions, frozenset(TypeKind))) == 2


class TestDeduplicateTypes:
    """Test folding of structurally identical types"""

    def test_none_scope_is_a_no_op(self):
        definitions = load_definitions_file(BLOG)
        assert deduplicate_types(definitions, RemoveDuplicate.NONE) is definitions

    def test_blog_fixture_input_scope(self):
        definitions = load_definitions_file(BLOG)
        result = deduplicate_types(definitions, RemoveDuplicate.INPUT)
        check_integrity(result)

        names = result.names()
        for dropped in [
            "NestedIntFilter",
            "IntNullableFilter",
            "NestedIntNullableFilter",
            "NestedStringFilter",
            "NestedStringNullableFilter",
            "NestedFloatFilter",
            "NestedEnumRoleFilter",
            "NullableStringFieldUpdateOperationsInput",
            "NullableIntFieldUpdateOperationsInput",
            "UserUpdateManyMutationInput",
            "UserSumAggregateInput",
        ]:
            assert dropped not in names
        for kept in ["IntFilter", "StringFilter", "StringNullableFilter", "UserUpdateInput", "UserAvgAggregateInput"]:
            assert kept in names
        assert len(result) == len(definitions) - 11

        user_where = result.get("UserWhereInput")
        assert user_where.get_field("countComments").type_ref == make_union([NamedRef("IntFilter"), ScalarRef("Int")])
        assert result.get("IntFilter").get_field("not").type_ref == make_union([ScalarRef("Int"), NamedRef("IntFilter")])
        aggregate_args = result.get("AggregateUserArgs")
        assert aggregate_args.get_field("_sum").type_ref == NamedRef("UserAvgAggregateInput")

    def test_model_scope_leaves_inputs(self):
        definitions = load_definitions_file(BLOG)
        # Avg (Float) and Sum (Int) aggregates differ, so no output folds
        assert deduplicate_types(definitions, RemoveDuplicate.MODEL) is definitions

    def test_scope_gates_kinds(self):
        definitions = DefinitionSet.from_definitions(
            [
                TypeDefinition("AffectedRows", TypeKind.OUTPUT, (Field("count", ScalarRef("Int")),)),
                TypeDefinition("BatchPayload", TypeKind.OUTPUT, (Field("count", ScalarRef("Int")),)),
                input_type("CountInput", Field("count", ScalarRef("Int"))),
                input_type("TotalInput", Field("count", ScalarRef("Int"))),
            ]
        )
        assert deduplicate_types(definitions, RemoveDuplicate.INPUT).names() == ["AffectedRows", "BatchPayload", "CountInput"]
        assert deduplicate_types(definitions, RemoveDuplicate.MODEL).names() == ["AffectedRows", "CountInput", "TotalInput"]
        assert deduplicate_types(definitions, RemoveDuplicate.ALL).names() == ["AffectedRows", "CountInput"]

    def test_result_does_not_depend_on_input_order(self):
        types = [
            input_type("UserSumAggregateInput", Field("id", ScalarRef("Boolean"), nullable=True)),
            input_type("UserAvgAggregateInput", Field("id", ScalarRef("Boolean"), nullable=True)),
        ]
        forward = deduplicate_types(DefinitionSet.from_definitions(types), RemoveDuplicate.INPUT)
        backward = deduplicate_types(DefinitionSet.from_definitions(types[::-1]), RemoveDuplicate.INPUT)
        assert forward.names() == backward.names() == ["UserAvgAggregateInput"]

    def test_collapsed_union_exposes_new_duplicates(self):
        definitions = DefinitionSet.from_definitions(
            [
                input_type("A", Field("v", ScalarRef("Int"))),
                input_type("B", Field("v", ScalarRef("Int"))),
                input_type("Holder", Field("f", make_union([NamedRef("A"), NamedRef("B")]))),
                input_type("Single", Field("f", NamedRef("A"))),
            ]
        )
        result = deduplicate_types(definitions, RemoveDuplicate.INPUT)

        assert result.names() == ["A", "Holder"]
        assert result.get("Holder").get_field("f").type_ref == NamedRef("A")

    def test_second_run_is_a_no_op(self):
        definitions = load_definitions_file(BLOG)
        once = deduplicate_types(definitions, RemoveDuplicate.ALL)
        assert deduplicate_types(once, RemoveDuplicate.ALL) is once

    def test_no_two_survivors_are_equivalent(self):
        result = deduplicate_types(load_definitions_file(BLOG), RemoveDuplicate.ALL)
        classes = partition_types(result, frozenset(TypeKind))
        assert all(len(members) == 1 for members in classes)

    def test_references_to_dropped_types_point_at_an_equivalent_survivor(self):
        definitions = load_definitions_file(BLOG)
        kinds = frozenset({TypeKind.INPUT, TypeKind.ARGS})
        class_of = {name: tuple(members) for members in partition_types(definitions, kinds) for name in members}
        result = deduplicate_types(definitions, RemoveDuplicate.INPUT)

        dropped = set(definitions.names()) - set(result.names())
        assert dropped
        for name in dropped:
            # The survivor of each dropped type is the first of its class
            assert class_of[name][0] in result

        for type_def in definitions:
            if type_def.name in dropped:
                continue
            for f in type_def.fields:
                before = [ref.name for ref in iter_refs(f.type_ref) if isinstance(ref, NamedRef)]
                new_ref = result.get(type_def.name).get_field(f.name).type_ref
                after = {ref.name for ref in iter_refs(new_ref) if isinstance(ref, NamedRef)}
                for target in before:
                    assert class_of[target][0] in after
                    assert set(class_of[target]) & after == {class_of[target][0]}
