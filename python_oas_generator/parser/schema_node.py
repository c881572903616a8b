"""
Schema node model.

This module turns raw OpenAPI schema dictionaries into immutable
``SchemaNode`` values. Each node carries exactly one ``SchemaKind`` so
consumers dispatch on the kind instead of sniffing dictionary keys.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from python_oas_generator.constants import REF_PREFIX, VALIDATION_KEYWORDS, primitive_type_name
from python_oas_generator.errors import UnsupportedSchemaShapeError

_KNOWN_TYPES: Final = frozenset({"string", "integer", "number", "boolean", "object", "array"})
_COMPOSITION_KEYWORDS: Final = ("oneOf", "anyOf", "allOf")


class SchemaKind(Enum):
    """Closed set of schema shapes understood by the resolver."""

    REFERENCE = "reference"
    ANY = "any"
    PRIMITIVE = "primitive"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    FREE_FORM = "free_form"
    OBJECT = "object"
    COMPOSED = "composed"


@dataclass(frozen=True)
class SchemaNode:
    """Represents one OpenAPI schema, named or anonymous."""

    kind: SchemaKind
    name: str | None = None
    schema_type: str | None = None
    format: str | None = None
    ref: str | None = None
    items: "SchemaNode | None" = None
    additional_properties: "SchemaNode | None" = None
    allows_additional_properties: bool = True
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    one_of: tuple["SchemaNode", ...] = ()
    any_of: tuple["SchemaNode", ...] = ()
    all_of: tuple["SchemaNode", ...] = ()
    enum: tuple[Any, ...] = ()
    constraints: dict[str, Any] = field(default_factory=dict)
    nullable: bool = False
    default: Any = None
    example: Any = None
    discriminator: str | None = None
    description: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def has_validation(self) -> bool:
        return bool(self.constraints)

    @property
    def is_pure_alias(self) -> bool:
        """A reference that adds nothing on top of its target."""
        return self.kind is SchemaKind.REFERENCE and not self.nullable and not self.constraints

    @property
    def variants(self) -> tuple["SchemaNode", ...]:
        """Members of the ``oneOf`` and ``anyOf`` lists, in declaration order."""
        return self.one_of + self.any_of

    @property
    def primitive_name(self) -> str | None:
        """Python type name for primitive and enum nodes."""
        if self.schema_type is None:
            return None
        return primitive_type_name(self.schema_type, self.format)

    @property
    def is_temporal(self) -> bool:
        return self.schema_type == "string" and self.format in ("date", "date-time")


def extract_ref_name(ref_string: str) -> str:
    """Extract the reference name from an OpenAPI $ref string.

    Args:
        ref_string: The $ref value (e.g., "#/components/schemas/Model").

    Returns:
        The extracted reference name (e.g., "Model"). References outside
        ``#/components/schemas/`` are returned unchanged and never resolve.
    """
    return ref_string.removeprefix(REF_PREFIX)


def _is_null_schema(raw: Any) -> bool:  # noqa: ANN401
    if not isinstance(raw, Mapping):
        return False
    return raw.get("type") == "null" or raw.get("enum") == [None]


def _parse_type(raw: Mapping[str, Any], name: str | None) -> tuple[str | None, bool]:
    """Normalize the ``type`` keyword into a single type name and a null flag."""
    declared = raw.get("type")
    if declared is None:
        return None, False

    nullable = False
    if isinstance(declared, list):
        nullable = "null" in declared
        remaining = [t for t in declared if t != "null"]
        if len(remaining) > 1:
            msg = f"conflicting type declarations {declared}"
            raise UnsupportedSchemaShapeError(msg, name)
        declared = remaining[0] if remaining else None
        if declared is None:
            msg = "schema only admits null"
            raise UnsupportedSchemaShapeError(msg, name)

    if declared == "file":
        return "string", nullable
    if declared not in _KNOWN_TYPES:
        msg = f"unknown type '{declared}'"
        raise UnsupportedSchemaShapeError(msg, name)
    return declared, nullable


def _infer_enum_type(values: list[Any]) -> str:
    for value in values:
        if value is None:
            continue
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, int):
            return "integer"
        if isinstance(value, float):
            return "number"
        break
    return "string"


def _parse_members(raw_members: Any, name: str | None) -> tuple[list[SchemaNode], bool]:  # noqa: ANN401
    """Parse composition members, dropping null-only members into a flag."""
    if not isinstance(raw_members, list):
        msg = "composition keywords must hold a list of schemas"
        raise UnsupportedSchemaShapeError(msg, name)
    members = [parse_schema(member) for member in raw_members if not _is_null_schema(member)]
    return members, len(members) != len(raw_members)


def parse_schema(raw: Mapping[str, Any], name: str | None = None) -> SchemaNode:
    """Parse a raw OpenAPI schema dictionary into a SchemaNode.

    Args:
        raw: The schema dictionary from the OpenAPI document.
        name: Component name when the schema is a named definition.

    Returns:
        The parsed, immutable schema node.

    Raises:
        UnsupportedSchemaShapeError: If the schema combines keywords in a
            way that has no single meaning.
    """
    if not isinstance(raw, Mapping):
        msg = "schema must be a JSON object"
        raise UnsupportedSchemaShapeError(msg, name)

    schema_type, type_nullable = _parse_type(raw, name)
    discriminator = raw.get("discriminator")
    common: dict[str, Any] = {
        "name": name,
        "schema_type": schema_type,
        "format": raw.get("format"),
        "nullable": bool(raw.get("nullable") or raw.get("x-nullable") or type_nullable),
        "default": raw.get("default"),
        "example": raw.get("example"),
        "description": raw.get("description"),
        "constraints": {key: raw[key] for key in VALIDATION_KEYWORDS if key in raw},
        "extensions": {key: value for key, value in raw.items() if key.startswith("x-")},
        "required": tuple(raw.get("required", ())),
        "discriminator": discriminator.get("propertyName") if isinstance(discriminator, Mapping) else None,
    }

    if "$ref" in raw:
        return SchemaNode(kind=SchemaKind.REFERENCE, ref=extract_ref_name(raw["$ref"]), **common)

    properties = {prop: parse_schema(prop_raw) for prop, prop_raw in raw.get("properties", {}).items()}

    if any(key in raw for key in _COMPOSITION_KEYWORDS):
        members: dict[str, tuple[SchemaNode, ...]] = {}
        for key in _COMPOSITION_KEYWORDS:
            parsed, had_null = _parse_members(raw.get(key, []), name)
            members[key] = tuple(parsed)
            if had_null and key != "allOf":
                common["nullable"] = True
        return SchemaNode(
            kind=SchemaKind.COMPOSED,
            properties=properties,
            one_of=members["oneOf"],
            any_of=members["anyOf"],
            all_of=members["allOf"],
            **common,
        )

    if "enum" in raw:
        values = list(raw["enum"])
        if None in values:
            common["nullable"] = True
        if common["schema_type"] is None:
            common["schema_type"] = _infer_enum_type(values)
        return SchemaNode(kind=SchemaKind.ENUM, enum=tuple(v for v in values if v is not None), **common)

    if schema_type == "array" or (schema_type is None and "items" in raw):
        items = raw.get("items")
        return SchemaNode(
            kind=SchemaKind.ARRAY,
            items=parse_schema(items) if isinstance(items, Mapping) else None,
            **{**common, "schema_type": "array"},
        )

    if schema_type == "object" or (schema_type is None and ("properties" in raw or "additionalProperties" in raw)):
        raw_additional = raw.get("additionalProperties")
        additional = parse_schema(raw_additional) if isinstance(raw_additional, Mapping) else None
        common["schema_type"] = "object"
        if properties or raw_additional is False:
            return SchemaNode(
                kind=SchemaKind.OBJECT,
                properties=properties,
                additional_properties=additional,
                allows_additional_properties=raw_additional is not False,
                **common,
            )
        if additional is not None:
            return SchemaNode(kind=SchemaKind.MAP, additional_properties=additional, **common)
        return SchemaNode(kind=SchemaKind.FREE_FORM, **common)

    if schema_type is not None:
        return SchemaNode(kind=SchemaKind.PRIMITIVE, **common)

    return SchemaNode(kind=SchemaKind.ANY, **common)
