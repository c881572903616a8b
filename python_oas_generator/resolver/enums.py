"""
Enum member derivation.

Each permitted enum value becomes an ``EnumVar`` with a stable identifier
and a Python literal. ``x-enum-varnames`` and ``x-enum-descriptions``
extensions override the derived names and attach descriptions.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Final

from python_oas_generator.constants import EMPTY_ENUM_VAR_NAME, NUMERIC_TYPES
from python_oas_generator.parser.schema_node import SchemaNode
from python_oas_generator.resolver.literals import escape_text, render_temporal

_NON_ALPHANUMERIC_RUN: Final = re.compile(r"[^0-9A-Za-z]+")

VARNAMES_EXTENSION: Final = "x-enum-varnames"
DESCRIPTIONS_EXTENSION: Final = "x-enum-descriptions"


@dataclass(frozen=True)
class EnumVar:
    """One enum member: identifier, rendered literal and optional description."""

    name: str
    value: str
    description: str | None = None


@dataclass(frozen=True)
class EnumWrapper:
    """Enum members and requiredness of an enum-wrapper model."""

    enum_vars: tuple[EnumVar, ...]
    default_value: str | None
    has_required: bool


class EnumMaterializer:
    """Derives enum identifiers, literals and single-value defaults."""

    @staticmethod
    def to_enum_var_name(value: Any) -> str:  # noqa: ANN401
        """Derive the identifier for an enum value.

        Examples:
            >>> EnumMaterializer.to_enum_var_name("in progress")
            'IN_PROGRESS'
            >>> EnumMaterializer.to_enum_var_name("")
            'EMPTY'
        """
        text = str(value)
        if not text:
            return EMPTY_ENUM_VAR_NAME
        return _NON_ALPHANUMERIC_RUN.sub("_", text).upper()

    @staticmethod
    def to_enum_value(value: Any, data_type: str) -> str:  # noqa: ANN401
        """Render an enum value as a Python literal for the given data type."""
        if data_type in NUMERIC_TYPES:
            return str(value)
        return f'"{escape_text(str(value))}"'

    def materialize(
        self,
        values: Sequence[Any],
        data_type: str,
        extensions: Mapping[str, Any] | None = None,
        schema_format: str | None = None,
    ) -> list[EnumVar]:
        """Build the enum members for a list of permitted values.

        Args:
            values: The permitted values, in declaration order.
            data_type: The Python type name of the values.
            extensions: The ``x-*`` extensions of the schema declaring the enum.
            schema_format: The schema format; ``date`` and ``date-time`` values
                are rendered as ``dateutil_parser`` expressions.

        Returns:
            The enum members, in declaration order.
        """
        literals = [self._render(value, data_type, schema_format) for value in values]
        enum_vars = [
            EnumVar(name=self.to_enum_var_name(value), value=literal)
            for value, literal in zip(values, literals, strict=True)
        ]
        if extensions:
            enum_vars = self._apply_extensions(enum_vars, literals, extensions)
        return enum_vars

    def _render(self, value: Any, data_type: str, schema_format: str | None) -> str:  # noqa: ANN401
        if schema_format in ("date", "date-time"):
            return render_temporal(value, schema_format)
        return self.to_enum_value(value, data_type)

    def _apply_extensions(
        self,
        enum_vars: list[EnumVar],
        literals: Sequence[str],
        extensions: Mapping[str, Any],
    ) -> list[EnumVar]:
        var_names = extensions.get(VARNAMES_EXTENSION) or []
        descriptions = extensions.get(DESCRIPTIONS_EXTENSION) or []
        overrides: dict[str, dict[str, str]] = {}
        for index, literal in enumerate(literals):
            entry = overrides.setdefault(literal, {})
            if index < len(var_names):
                entry.setdefault("name", str(var_names[index]))
            if index < len(descriptions):
                entry.setdefault("description", str(descriptions[index]))
        return [replace(enum_var, **overrides.get(enum_var.value, {})) for enum_var in enum_vars]

    def wrapper(self, schema: SchemaNode, data_type: str) -> EnumWrapper:
        """Describe the enum-wrapper model generated for an enum schema.

        With one permitted value that value is the default and callers need
        not pass it; with several, a value is mandatory unless the schema
        declares an explicit default.
        """
        enum_vars = self.materialize(schema.enum, data_type, schema.extensions, schema.format)
        default_value: str | None = None
        if schema.default is not None:
            default_value = self._render(schema.default, data_type, schema.format)
        elif len(schema.enum) == 1:
            default_value = enum_vars[0].value
        has_required = len(schema.enum) > 1 and default_value is None
        return EnumWrapper(tuple(enum_vars), default_value, has_required)

