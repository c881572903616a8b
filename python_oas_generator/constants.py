"""Shared constants for Python type expressions and generated literals."""

from typing import Final

REF_PREFIX: Final = "#/components/schemas/"

# Python type names used inside type expressions
NONE_TYPE: Final = "none_type"
FILE_TYPE: Final = "file_type"

ANY_TYPE_MEMBERS: Final = ("bool", "date", "datetime", "dict", "float", "int", "list", "str", NONE_TYPE)
FREE_FORM_MEMBERS: Final = ("bool", "date", "datetime", "dict", "float", "int", "str")

_PRIMITIVE_TYPE_MAPPING: Final = {
    "string": {
        None: "str",
        "date": "date",
        "date-time": "datetime",
        "byte": "str",
        "binary": FILE_TYPE,
    },
    "integer": {None: "int"},
    "number": {None: "float"},
    "boolean": {None: "bool"},
}

LANGUAGE_PRIMITIVES: Final = frozenset(
    {"bool", "date", "datetime", "dict", "float", "int", "list", "str", NONE_TYPE, FILE_TYPE}
)

NUMERIC_TYPES: Final = frozenset({"int", "float"})

# Default for required properties that only some oneOf/anyOf variants mandate
NULL_SENTINEL: Final = "nulltype.Null"

EMPTY_ENUM_VAR_NAME: Final = "EMPTY"

# Validation keywords that turn a primitive alias into a generated model
VALIDATION_KEYWORDS: Final = (
    "pattern",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minLength",
    "maxLength",
    "minItems",
    "maxItems",
    "uniqueItems",
    "minProperties",
    "maxProperties",
)

DEFAULT_PACKAGE_NAME: Final = "openapi_client"
MODEL_SUBPACKAGE: Final = "model"

# Example values used when a parameter declares none
EXAMPLE_INT: Final = "56"
EXAMPLE_FLOAT: Final = "3.4"
EXAMPLE_BOOL: Final = "True"
EXAMPLE_FILE_PATH: Final = "/path/to/file"
EXAMPLE_DATE: Final = "2013-10-20"
EXAMPLE_DATETIME: Final = "2013-10-20T19:20:30+01:00"


def primitive_type_name(schema_type: str, schema_format: str | None) -> str | None:
    """Get the Python type name for an OpenAPI primitive type and format.

    Args:
        schema_type: The OpenAPI schema type.
        schema_format: The OpenAPI schema format (optional).

    Returns:
        The corresponding Python type name, or None for non-primitive types.
    """
    type_formats = _PRIMITIVE_TYPE_MAPPING.get(schema_type)
    if type_formats is None:
        return None
    return type_formats.get(schema_format, type_formats[None])
