"""Tests for oneOf/anyOf member resolution and null defaults."""

from collections.abc import Callable
from typing import Any

import pytest

from python_oas_generator.constants import NULL_SENTINEL
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.resolver.composition import CompositionResolver
from python_oas_generator.resolver.materialization import MaterializationPolicy
from python_oas_generator.resolver.type_expression import TypeExpressionResolver

GraphBuilder = Callable[[dict[str, Any]], SchemaGraph]
RefBuilder = Callable[[str], dict[str, str]]


def _composition(graph: SchemaGraph) -> CompositionResolver:
    policy = MaterializationPolicy(graph)
    return CompositionResolver(graph, policy, TypeExpressionResolver(graph, policy))


class TestCompositionMembers:
    """Surviving members and reference counts."""

    @pytest.fixture
    def pet_graph(self, build_graph: GraphBuilder, ref: RefBuilder) -> SchemaGraph:
        return build_graph(
            {
                "Cat": {"type": "object", "required": ["meow"], "properties": {"meow": {"type": "boolean"}}},
                "Dog": {"type": "object", "required": ["bark"], "properties": {"bark": {"type": "boolean"}}},
                "Pet": {
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}},
                    "oneOf": [ref("Cat"), ref("Dog")],
                },
            }
        )

    def test_model_members_are_imported(self, pet_graph: SchemaGraph) -> None:
        result = _composition(pet_graph).resolve("Pet", pet_graph["Pet"])

        assert result.one_of == ("Cat", "Dog")
        assert result.any_of == ()
        assert result.imports == ("Cat", "Dog")
        assert result.reference_counts == {"Cat": 1, "Dog": 1}
        assert [variant.model_name for variant in result.variants] == ["Cat", "Dog"]

    def test_validated_scalar_member_registers_primitive_uncounted(
        self, build_graph: GraphBuilder, ref: RefBuilder
    ) -> None:
        graph = build_graph({"Amount": {"type": "number", "minimum": 0}, "Price": {"oneOf": [ref("Amount")]}})

        result = _composition(graph).resolve("Price", graph["Price"])

        assert result.reference_counts == {"float": 0, "Amount": 1}
        assert result.one_of == ("Amount",)
        assert result.imports == ("Amount",)

    def test_self_reference_is_pruned(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = build_graph({"Expr": {"oneOf": [ref("Expr"), {"type": "string"}]}})

        result = _composition(graph).resolve("Expr", graph["Expr"])

        assert result.one_of == ("str",)
        assert result.reference_counts["Expr"] == 0
        assert result.imports == ()
        assert result.variants[0].is_self_reference

    def test_duplicate_members_are_merged(self, build_graph: GraphBuilder) -> None:
        graph = build_graph({"Code": {"anyOf": [{"type": "string"}, {"type": "string", "maxLength": 3}]}})

        result = _composition(graph).resolve("Code", graph["Code"])

        assert result.any_of == ("str",)
        assert result.reference_counts == {"str": 2}

    def test_counts_span_one_of_and_any_of(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = build_graph(
            {
                "Cat": {"type": "object", "properties": {"meow": {"type": "boolean"}}},
                "Either": {"oneOf": [ref("Cat")], "anyOf": [ref("Cat"), {"type": "integer"}]},
            }
        )

        result = _composition(graph).resolve("Either", graph["Either"])

        assert result.one_of == ("Cat",)
        assert result.any_of == ("Cat", "int")
        assert result.reference_counts == {"Cat": 2, "int": 1}
        assert result.imports == ("Cat",)

    def test_schema_without_variants(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = build_graph(
            {
                "Base": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "Derived": {"allOf": [ref("Base")]},
            }
        )

        result = _composition(graph).resolve("Derived", graph["Derived"])

        assert result.one_of == ()
        assert result.imports == ()


class TestNullDefaults:
    """Required properties mandated only by some variants."""

    def _graph(self, build_graph: GraphBuilder, ref: RefBuilder, pet: dict[str, Any]) -> SchemaGraph:
        return build_graph(
            {
                "Base": {"type": "object", "required": ["id"], "properties": {"id": {"type": "integer"}}},
                "Cat": {"type": "object", "required": ["meow", "id"], "properties": {"meow": {"type": "boolean"}}},
                "Dog": {"type": "object", "required": ["bark"], "properties": {"bark": {"type": "boolean"}}},
                "Pet": pet,
            }
        )

    def test_variant_required_properties_get_sentinel(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = self._graph(
            build_graph,
            ref,
            {"required": ["name"], "properties": {"name": {"type": "string"}}, "oneOf": [ref("Cat"), ref("Dog")]},
        )
        composition = _composition(graph)

        properties, required = composition.collect_properties(graph["Pet"])

        assert list(properties) == ["name", "meow", "bark"]
        assert required == ["name", "meow", "id", "bark"]
        assert composition.null_default_properties(graph["Pet"], required) == {
            "meow": NULL_SENTINEL,
            "id": NULL_SENTINEL,
            "bark": NULL_SENTINEL,
        }

    def test_own_required_properties_never_get_sentinel(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = self._graph(
            build_graph,
            ref,
            {
                "required": ["meow"],
                "allOf": [ref("Base")],
                "oneOf": [ref("Cat"), ref("Dog")],
                "discriminator": {"propertyName": "bark"},
            },
        )
        composition = _composition(graph)
        _, required = composition.collect_properties(graph["Pet"])

        assert composition.null_default_properties(graph["Pet"], required) == {}

    def test_any_of_variants_count_as_other_required(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = self._graph(build_graph, ref, {"anyOf": [ref("Dog")]})
        composition = _composition(graph)
        _, required = composition.collect_properties(graph["Pet"])

        assert composition.null_default_properties(graph["Pet"], required) == {"bark": NULL_SENTINEL}

    def test_self_referencing_variant_terminates(self, build_graph: GraphBuilder, ref: RefBuilder) -> None:
        graph = build_graph(
            {"Tree": {"required": ["leaf"], "properties": {"leaf": {"type": "string"}}, "oneOf": [ref("Tree")]}}
        )
        composition = _composition(graph)
        properties, required = composition.collect_properties(graph["Tree"])

        assert list(properties) == ["leaf"]
        assert composition.null_default_properties(graph["Tree"], required) == {}
