"""Tests for Python naming conventions."""

import pytest

from python_oas_generator.utils.string_case import (
    escape_python_keyword,
    normalize_python_identifier,
    pascalcase,
    snakecase,
    to_model_filename,
    to_model_name,
    to_var_name,
)


class TestStringCase:
    """Case conversions for class, module and attribute names."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("HelloWorld", "hello_world"),
            ("getHTTPResponse", "get_http_response"),
            ("pet-store.v2", "pet_store_v2"),
            ("", ""),
        ],
    )
    def test_snakecase(self, value: str, expected: str) -> None:
        assert snakecase(value) == expected

    def test_pascalcase(self) -> None:
        assert pascalcase("pet_status") == "PetStatus"
        assert pascalcase(None) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Pet", "Pet"),
            ("HTTPResponse", "HTTPResponse"),
            ("pet_status", "PetStatus"),
            ("createPet", "CreatePet"),
            ("200_response", "_200Response"),
        ],
    )
    def test_to_model_name(self, value: str, expected: str) -> None:
        assert to_model_name(value) == expected

    def test_to_model_filename(self) -> None:
        assert to_model_filename("HTTPResponse") == "http_response"
        assert to_model_filename("PetCategory") == "pet_category"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("petId", "pet_id"),
            ("class", "class_"),
            ("self", "self_"),
            ("x-rate-limit", "x_rate_limit"),
            ("2fa", "_2fa"),
        ],
    )
    def test_to_var_name(self, value: str, expected: str) -> None:
        assert to_var_name(value) == expected

    def test_identifier_helpers(self) -> None:
        assert normalize_python_identifier("valid@name") == "valid_name"
        assert escape_python_keyword("import") == "import_"
        assert escape_python_keyword("name") == "name"
