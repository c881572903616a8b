"""Tests for enum member derivation."""

from typing import Any

import pytest

from python_oas_generator.parser.schema_node import parse_schema
from python_oas_generator.resolver.enums import EnumMaterializer, EnumVar


class TestEnumMaterializer:
    """Identifiers, literals and enum-wrapper requiredness."""

    @pytest.fixture
    def materializer(self) -> EnumMaterializer:
        return EnumMaterializer()

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("", "EMPTY"),
            ("in progress", "IN_PROGRESS"),
            ("available", "AVAILABLE"),
            ("a-b.c", "A_B_C"),
            (42, "42"),
            ("2020-01-01", "2020_01_01"),
        ],
    )
    def test_enum_var_name(self, value: Any, expected: str) -> None:  # noqa: ANN401
        assert EnumMaterializer.to_enum_var_name(value) == expected

    @pytest.mark.parametrize(
        ("value", "data_type", "expected"),
        [
            (42, "int", "42"),
            (1.5, "float", "1.5"),
            ("available", "str", '"available"'),
            ('say "hi"', "str", '"say \\"hi\\""'),
            (True, "bool", '"True"'),
        ],
    )
    def test_enum_value(self, value: Any, data_type: str, expected: str) -> None:  # noqa: ANN401
        assert EnumMaterializer.to_enum_value(value, data_type) == expected

    def test_materialize_keeps_declaration_order(self, materializer: EnumMaterializer) -> None:
        enum_vars = materializer.materialize(["sold", "available"], "str")

        assert enum_vars == [EnumVar("SOLD", '"sold"'), EnumVar("AVAILABLE", '"available"')]

    def test_extensions_override_names_and_add_descriptions(self, materializer: EnumMaterializer) -> None:
        enum_vars = materializer.materialize(
            [1, 2],
            "int",
            {"x-enum-varnames": ["LOW", "HIGH"], "x-enum-descriptions": ["Low priority", "High priority"]},
        )

        assert enum_vars == [EnumVar("LOW", "1", "Low priority"), EnumVar("HIGH", "2", "High priority")]

    def test_partial_extensions(self, materializer: EnumMaterializer) -> None:
        enum_vars = materializer.materialize(["a", "b"], "str", {"x-enum-varnames": ["ALPHA"]})

        assert enum_vars == [EnumVar("ALPHA", '"a"'), EnumVar("B", '"b"')]

    def test_date_values(self, materializer: EnumMaterializer) -> None:
        enum_vars = materializer.materialize(["2020-01-01"], "date", schema_format="date")

        assert enum_vars == [EnumVar("2020_01_01", "dateutil_parser('2020-01-01').date()")]

    def test_single_value_is_the_default(self, materializer: EnumMaterializer) -> None:
        wrapper = materializer.wrapper(parse_schema({"type": "string", "enum": ["available"]}), "str")

        assert wrapper.enum_vars == (EnumVar("AVAILABLE", '"available"'),)
        assert wrapper.default_value == '"available"'
        assert not wrapper.has_required

    def test_several_values_are_required(self, materializer: EnumMaterializer) -> None:
        wrapper = materializer.wrapper(parse_schema({"type": "string", "enum": ["available", "sold"]}), "str")

        assert wrapper.default_value is None
        assert wrapper.has_required

    def test_explicit_default_makes_value_optional(self, materializer: EnumMaterializer) -> None:
        schema = parse_schema({"type": "integer", "enum": [1, 2, 3], "default": 2})

        wrapper = materializer.wrapper(schema, "int")

        assert wrapper.default_value == "2"
        assert not wrapper.has_required
