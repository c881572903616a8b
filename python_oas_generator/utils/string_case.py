"""
String case conversion utilities for Python client generation.

This module provides the case conversions used to turn OpenAPI component
and property names into Python class, module and variable names.

Based on https://github.com/okunishinishi/python-stringcase
with additional Python-specific naming conventions.
"""

import keyword
import re
from collections.abc import Callable
from typing import Final

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[\-\.\s]")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z])([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUMERIC_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")
_PASCAL_CASE_PATTERN: Final = re.compile(r"^[A-Z][a-zA-Z0-9]*$")

# Names that would shadow attributes of generated model classes
_RESERVED_PROPERTY_NAMES: Final = frozenset({"self", "property", "schema"})


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Safely convert a string, returning empty string if input is None or empty."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Convert string into snake_case.

    Handles various formats including camelCase with acronyms.

    Args:
        string: String to convert.

    Returns:
        Snake case string.

    Examples:
        >>> snakecase("HelloWorld")
        'hello_world'
        >>> snakecase("hello-world")
        'hello_world'
        >>> snakecase("getHTTPResponse")
        'get_http_response'
    """

    def _snakecase(s: str) -> str:
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        return s.lower()

    return _convert_if_not_empty(string, _snakecase)


def pascalcase(string: str | None) -> str:
    """Convert string into PascalCase.

    Args:
        string: String to convert.

    Returns:
        PascalCase string.

    Examples:
        >>> pascalcase("hello_world")
        'HelloWorld'
        >>> pascalcase("hello-world")
        'HelloWorld'
        >>> pascalcase("getHTTPResponse")
        'GetHttpResponse'
    """

    def _pascalcase(s: str) -> str:
        return "".join(word.capitalize() for word in snakecase(s).split("_"))

    return _convert_if_not_empty(string, _pascalcase)


def normalize_python_identifier(name: str | None) -> str:
    """Normalize name to be a valid Python identifier.

    Args:
        name: The string to normalize.

    Returns:
        A valid Python identifier.

    Examples:
        >>> normalize_python_identifier("123invalid")
        '_123invalid'
        >>> normalize_python_identifier("valid@name")
        'valid_name'
    """

    def _normalize(s: str) -> str:
        normalized = _NON_ALPHANUMERIC_PATTERN.sub("_", s)
        if normalized and normalized[0].isdigit():
            normalized = f"_{normalized}"
        return normalized

    return _convert_if_not_empty(name, _normalize)


def escape_python_keyword(name: str) -> str:
    """Suffix Python keywords and reserved names with an underscore.

    Examples:
        >>> escape_python_keyword("class")
        'class_'
        >>> escape_python_keyword("name")
        'name'
    """
    if keyword.iskeyword(name) or name in _RESERVED_PROPERTY_NAMES:
        return f"{name}_"
    return name


def to_model_name(schema_name: str) -> str:
    """Get the generated class name for a component schema name.

    Names that are already PascalCase are kept verbatim so acronyms survive.
    """
    if _PASCAL_CASE_PATTERN.match(schema_name):
        return schema_name
    return normalize_python_identifier(pascalcase(schema_name))


def to_model_filename(model_name: str) -> str:
    """Get the module name a generated model class lives in."""
    return normalize_python_identifier(snakecase(model_name))


def to_var_name(name: str) -> str:
    """Get the Python attribute or argument name for a property or parameter."""
    return escape_python_keyword(normalize_python_identifier(snakecase(name)))
