"""Tests for default and example literal rendering."""

from datetime import date
from typing import Any

import pytest

from python_oas_generator.errors import AmbiguousDateValueWarning
from python_oas_generator.parser.schema_node import parse_schema
from python_oas_generator.resolver.literals import parameter_example, quote, render_temporal, to_default_value


class TestDefaultValues:
    """Schema defaults rendered as Python literals."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"type": "string", "default": "cat"}, '"cat"'),
            ({"type": "string", "default": "line\nbreak"}, '"line\\nbreak"'),
            ({"type": "integer", "default": 3}, "3"),
            ({"type": "number", "default": 2.5}, "2.5"),
            ({"type": "boolean", "default": False}, "False"),
            ({"type": "boolean", "default": "true"}, "True"),
            ({"type": "string", "format": "date", "default": "2020-01-01"}, "dateutil_parser('2020-01-01').date()"),
            (
                {"type": "string", "format": "date-time", "default": "2020-01-01T10:00:00Z"},
                "dateutil_parser('2020-01-01T10:00:00+00:00')",
            ),
            ({"type": "string", "enum": ["only"]}, '"only"'),
            ({"type": "string", "enum": ["a", "b"]}, None),
            ({"type": "string"}, None),
        ],
    )
    def test_to_default_value(self, raw: dict[str, Any], expected: str | None) -> None:
        assert to_default_value(parse_schema(raw)) == expected

    def test_unparseable_date_is_quoted_with_warning(self) -> None:
        schema = parse_schema({"type": "string", "format": "date", "default": "someday"})

        with pytest.warns(AmbiguousDateValueWarning, match="someday"):
            assert to_default_value(schema) == '"someday"'

    def test_render_temporal_accepts_date_objects(self) -> None:
        assert render_temporal(date(2021, 5, 4), "date") == "dateutil_parser('2021-05-04').date()"

    def test_quote_escapes_backslashes_and_quotes(self) -> None:
        assert quote('C:\\ "x"') == '"C:\\\\ \\"x\\""'


class TestParameterExamples:
    """Examples synthesized for endpoint parameters."""

    @pytest.mark.parametrize(
        ("base_type", "expected"),
        [
            ("str", '"name_example"'),
            ("int", "56"),
            ("float", "3.4"),
            ("bool", "True"),
            ("file_type", 'open("/path/to/file", "rb")'),
            ("date", '"2013-10-20"'),
            ("datetime", '"2013-10-20T19:20:30+01:00"'),
            ("Pet", "Pet()"),
            ("none_type", "None"),
        ],
    )
    def test_fallback_examples(self, base_type: str, expected: str) -> None:
        assert parameter_example("name", base_type) == expected

    def test_declared_example_is_used(self) -> None:
        assert parameter_example("limit", "int", example=10) == "10"
        assert parameter_example("name", "str", example="doggie") == '"doggie"'
        assert parameter_example("flag", "bool", example=False) == "False"
        assert parameter_example("since", "date", example="2021-02-03") == '"2021-02-03"'

    def test_default_wins_over_example(self) -> None:
        assert parameter_example("limit", "int", example=10, default_value="20") == "20"

    def test_containers(self) -> None:
        assert parameter_example("tags", "str", is_list_container=True) == '["tags_example"]'
        assert parameter_example("counts", "int", is_map_container=True) == '{"key": 56}'
