"""
Python literal rendering for defaults and examples.

Values from the OpenAPI document are rendered as Python source fragments
(``"text"``, ``42``, ``True``, ``dateutil_parser('2020-01-01').date()``)
that the emitter can paste into generated code and documentation.
"""

import logging
import warnings
from datetime import date, datetime
from typing import Any, Final

from python_oas_generator.constants import (
    EXAMPLE_BOOL,
    EXAMPLE_DATE,
    EXAMPLE_DATETIME,
    EXAMPLE_FILE_PATH,
    EXAMPLE_FLOAT,
    EXAMPLE_INT,
    FILE_TYPE,
    LANGUAGE_PRIMITIVES,
    NUMERIC_TYPES,
)
from python_oas_generator.errors import AmbiguousDateValueWarning
from python_oas_generator.parser.schema_node import SchemaNode

logger = logging.getLogger(__name__)

_ESCAPES: Final = (("\\", "\\\\"), ('"', '\\"'), ("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t"))


def escape_text(text: str) -> str:
    """Escape a string for use inside a double-quoted Python literal."""
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def quote(text: str) -> str:
    return f'"{escape_text(text)}"'


def _parse_datetime(value: Any) -> datetime:  # noqa: ANN401
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_date(value: Any) -> date:  # noqa: ANN401
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return _parse_datetime(value).date()


def _warn_ambiguous(value: Any, schema_format: str) -> None:  # noqa: ANN401
    message = f"Invalid `{schema_format}` value {value!r}, using it verbatim"
    logger.warning(message)
    warnings.warn(message, AmbiguousDateValueWarning, stacklevel=3)


def normalize_temporal(value: Any, schema_format: str) -> str | None:  # noqa: ANN401
    """Return the ISO form of a date or date-time value, or None when it does not parse.

    A value that does not parse is reported through AmbiguousDateValueWarning.
    """
    try:
        if schema_format == "date":
            return _parse_date(value).isoformat()
        return _parse_datetime(value).isoformat()
    except (TypeError, ValueError):
        _warn_ambiguous(value, schema_format)
        return None


def render_temporal(value: Any, schema_format: str) -> str:  # noqa: ANN401
    """Render a date or date-time value as a ``dateutil_parser`` expression.

    Args:
        value: The value from the document (string, date or datetime).
        schema_format: Either ``date`` or ``date-time``.

    Returns:
        A Python expression evaluating to the temporal value, or the quoted
        raw value when it cannot be parsed.
    """
    iso = normalize_temporal(value, schema_format)
    if iso is None:
        return quote(str(value))
    if schema_format == "date":
        return f"dateutil_parser('{iso}').date()"
    return f"dateutil_parser('{iso}')"


def render_value(value: Any, schema: SchemaNode) -> str:  # noqa: ANN401
    """Render a value according to the declared type of its schema."""
    if schema.is_temporal and schema.format is not None:
        return render_temporal(value, schema.format)
    if schema.schema_type == "boolean":
        return "True" if value is True or str(value).lower() == "true" else "False"
    if schema.schema_type in ("integer", "number"):
        return str(value)
    if schema.schema_type == "string" or isinstance(value, str):
        return quote(str(value))
    return repr(value)


def to_default_value(schema: SchemaNode) -> str | None:
    """Return the default value of a schema as a Python literal.

    An explicit default wins; otherwise an enum with a single permitted
    value defaults to that value.
    """
    default = schema.default
    if default is None and len(schema.enum) == 1:
        default = schema.enum[0]
    if default is None:
        return None
    return render_value(default, schema)


def parameter_example(
    name: str,
    base_type: str,
    *,
    example: Any = None,  # noqa: ANN401
    default_value: str | None = None,
    is_list_container: bool = False,
    is_map_container: bool = False,
) -> str:
    """Synthesize the example value shown for an endpoint parameter.

    Args:
        name: The parameter's Python name.
        base_type: The innermost type of the parameter.
        example: The example declared in the document, if any.
        default_value: The rendered default, which wins over any example.
        is_list_container: Whether the parameter is a list of ``base_type``.
        is_map_container: Whether the parameter is a dict of ``base_type``.

    Returns:
        A Python expression for the example.
    """
    if default_value is not None:
        return default_value

    rendered: str | None
    if base_type == "str":
        rendered = quote(str(example) if example is not None else f"{name}_example")
    elif base_type in NUMERIC_TYPES:
        fallback = EXAMPLE_INT if base_type == "int" else EXAMPLE_FLOAT
        rendered = str(example) if example is not None else fallback
    elif base_type == "bool":
        rendered = EXAMPLE_BOOL if example is None else ("True" if example in (True, "true") else "False")
    elif base_type == FILE_TYPE:
        rendered = f'open("{escape_text(str(example or EXAMPLE_FILE_PATH))}", "rb")'
    elif base_type in ("date", "datetime"):
        schema_format = "date" if base_type == "date" else "date-time"
        iso = normalize_temporal(example, schema_format) if example is not None else None
        fallback = EXAMPLE_DATE if base_type == "date" else EXAMPLE_DATETIME
        rendered = quote(iso or (str(example) if example is not None else fallback))
    elif base_type not in LANGUAGE_PRIMITIVES:
        rendered = f"{base_type}()"
    else:
        logger.warning("Type %s not handled properly in parameter examples", base_type)
        rendered = None

    if rendered is None:
        return "None"
    if is_list_container:
        return f"[{rendered}]"
    if is_map_container:
        return f'{{"key": {rendered}}}'
    return rendered
