"""
OpenAPI Specification Loader.

This module reads OpenAPI 3.x documents and hands the resolver what it
needs: a ``SchemaGraph`` of named schemas and one ``OperationSpec`` per
endpoint. Inline object schemas the resolver cannot express as a type
expression are hoisted to named component schemas first.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from python_oas_generator.constants import REF_PREFIX
from python_oas_generator.errors import UnsupportedSchemaShapeError
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import SchemaNode, parse_schema
from python_oas_generator.utils.string_case import to_model_name, to_var_name

logger = logging.getLogger(__name__)

# HTTP methods supported by OpenAPI
_HTTP_METHODS: Final = frozenset({"get", "post", "put", "delete", "patch", "head", "options"})

_PREFERRED_CONTENT_TYPE: Final = "application/json"

# Child slots walked during hoisting and the suffix naming a hoisted child
_COMPOSITION_SUFFIXES: Final = {"allOf": "AllOf", "oneOf": "OneOf", "anyOf": "AnyOf"}


def _is_inline_model(raw: Any) -> bool:  # noqa: ANN401
    """Check whether an anonymous schema needs its own model class."""
    if not isinstance(raw, dict) or "$ref" in raw:
        return False
    if raw.get("properties") or raw.get("additionalProperties") is False:
        return True
    all_of = raw.get("allOf")
    if not isinstance(all_of, list) or not all_of:
        return False
    # allOf next to oneOf/anyOf has no type expression of its own
    return len(all_of) > 1 or bool(raw.get("oneOf") or raw.get("anyOf"))


@dataclass
class ParameterSpec:
    """Represents an OpenAPI parameter."""

    name: str
    location: str
    required: bool
    schema: SchemaNode
    description: str | None = None
    example: Any = None


@dataclass
class RequestBodySpec:
    """Represents an OpenAPI request body."""

    schema: SchemaNode
    content_type: str
    required: bool = False
    description: str | None = None
    example: Any = None


@dataclass
class ResponseSpec:
    """Represents an OpenAPI response."""

    status_code: str
    description: str
    schema: SchemaNode | None = None
    content_types: list[str] = field(default_factory=list)


@dataclass
class OperationSpec:
    """Represents an OpenAPI operation."""

    operation_id: str
    method: str
    path: str
    summary: str | None
    description: str | None
    parameters: list[ParameterSpec]
    request_body: RequestBodySpec | None
    responses: list[ResponseSpec]
    tags: list[str]
    function_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.function_name = to_var_name(self.operation_id)


@dataclass
class ParsedSpec:
    """Represents a parsed OpenAPI specification."""

    info: dict[str, Any]
    servers: list[dict[str, Any]]
    graph: SchemaGraph
    operations: list[OperationSpec]
    content_types: list[str]
    hoisted_schemas: list[str] = field(default_factory=list)


class OASParser:
    """Parser for OpenAPI 3.x specifications."""

    def __init__(self) -> None:
        self.spec_data: dict[str, Any] | None = None
        self.schemas: dict[str, Any] = {}
        self.hoisted: list[str] = []

    def parse_file(self, file_path: str | Path) -> ParsedSpec:
        """Parse OpenAPI specification from file."""
        path = Path(file_path)
        with path.open(encoding="utf-8") as f:
            self.spec_data = json.load(f)
        return self._parse_spec()

    def parse_dict(self, spec_dict: dict[str, Any]) -> ParsedSpec:
        """Parse OpenAPI specification from dictionary."""
        self.spec_data = spec_dict
        return self._parse_spec()

    def _parse_spec(self) -> ParsedSpec:
        """Parse the loaded specification."""
        if not self.spec_data:
            msg = "No specification data loaded"
            raise ValueError(msg)

        self.schemas = dict(self.spec_data.get("components", {}).get("schemas", {}))
        self.hoisted = []
        for name in list(self.schemas):
            self.schemas[name] = self._hoist_children(self.schemas[name], to_model_name(name))

        operations = self._parse_operations()
        graph = SchemaGraph.from_dict(self.schemas)
        if self.hoisted:
            logger.debug("Hoisted %d inline schemas: %s", len(self.hoisted), ", ".join(self.hoisted))

        return ParsedSpec(
            info=self.spec_data.get("info", {}),
            servers=self.spec_data.get("servers", []),
            graph=graph,
            operations=operations,
            content_types=self._extract_content_types(),
            hoisted_schemas=list(self.hoisted),
        )

    def _unique_name(self, hint: str) -> str:
        taken = {to_model_name(existing) for existing in self.schemas}
        name = hint
        counter = 2
        while name in self.schemas or name in taken:
            name = f"{hint}{counter}"
            counter += 1
        return name

    def _hoist_schema(self, raw: Any, hint: str) -> Any:  # noqa: ANN401
        """Replace an inline model schema with a reference to a new named schema.

        Args:
            raw: The schema found at some position of the document.
            hint: The name the schema gets if it is hoisted.

        Returns:
            A ``$ref`` to the hoisted schema, or the schema itself with its
            children processed.
        """
        if not _is_inline_model(raw):
            return self._hoist_children(raw, hint)

        name = self._unique_name(hint)
        # Reserve the name before walking children so nested hints cannot take it
        self.schemas[name] = raw
        self.schemas[name] = self._hoist_children(raw, name)
        self.hoisted.append(name)

        reference: dict[str, Any] = {"$ref": f"{REF_PREFIX}{name}"}
        if raw.get("nullable"):
            reference["nullable"] = True
        return reference

    def _hoist_children(self, raw: Any, owner: str) -> Any:  # noqa: ANN401
        """Hoist inline models found below a schema, returning the updated copy."""
        if not isinstance(raw, dict) or "$ref" in raw:
            return raw

        result = dict(raw)
        if isinstance(raw.get("properties"), dict):
            result["properties"] = {
                prop_name: self._hoist_schema(prop_schema, f"{owner}{to_model_name(prop_name)}")
                for prop_name, prop_schema in raw["properties"].items()
            }
        if isinstance(raw.get("items"), dict):
            result["items"] = self._hoist_schema(raw["items"], f"{owner}Item")
        if isinstance(raw.get("additionalProperties"), dict):
            result["additionalProperties"] = self._hoist_schema(raw["additionalProperties"], f"{owner}Value")
        for keyword, suffix in _COMPOSITION_SUFFIXES.items():
            if isinstance(raw.get(keyword), list):
                result[keyword] = [self._hoist_schema(member, f"{owner}{suffix}") for member in raw[keyword]]
        return result

    def _resolve_reference(self, ref: str) -> dict[str, Any]:
        """Resolve a JSON reference."""
        if not self.spec_data:
            return {}

        ref_path = ref.split("/")
        resolved: dict[str, Any] | None = self.spec_data
        for part in ref_path[1:]:  # Skip '#'
            if resolved is None:
                return {}
            resolved = resolved.get(part)
        return resolved or {}

    def _dereference(self, data: dict[str, Any]) -> dict[str, Any]:
        """Resolve parameter, request body and response objects given as ``$ref``."""
        if "$ref" in data and not data["$ref"].startswith(REF_PREFIX):
            return self._resolve_reference(data["$ref"])
        return data

    def _parse_operations(self) -> list[OperationSpec]:
        """Parse all operations from paths."""
        operations: list[OperationSpec] = []
        if not self.spec_data:
            return operations
        paths = self.spec_data.get("paths", {})

        for path, path_item in paths.items():
            shared_parameters = path_item.get("parameters", [])
            for method, operation_data in path_item.items():
                if method.lower() not in _HTTP_METHODS:
                    continue
                try:
                    operation = self._parse_operation(path, method.upper(), operation_data, shared_parameters)
                except UnsupportedSchemaShapeError as e:
                    logger.warning("Skipping operation %s %s: %s", method.upper(), path, e)
                    continue
                if operation:
                    operations.append(operation)

        return operations

    def _parse_operation(
        self,
        path: str,
        method: str,
        operation_data: dict[str, Any],
        shared_parameters: list[dict[str, Any]],
    ) -> OperationSpec | None:
        """Parse a single operation."""
        operation_id = operation_data.get("operationId")
        if not operation_id:
            logger.debug("Ignoring %s %s without operationId", method, path)
            return None

        parameters: dict[tuple[str, str], ParameterSpec] = {}
        for param_data in [*shared_parameters, *operation_data.get("parameters", [])]:
            param = self._parse_parameter(param_data, operation_id)
            if param:
                # Operation-level parameters override path-level ones
                parameters[(param.name, param.location)] = param

        responses = [
            self._parse_response(status_code, response_data, operation_id)
            for status_code, response_data in operation_data.get("responses", {}).items()
        ]

        return OperationSpec(
            operation_id=operation_id,
            method=method,
            path=path,
            summary=operation_data.get("summary"),
            description=operation_data.get("description"),
            parameters=list(parameters.values()),
            request_body=self._parse_request_body(operation_data.get("requestBody"), operation_id),
            responses=responses,
            tags=operation_data.get("tags", []),
        )

    def _parse_parameter(self, param_data: dict[str, Any], operation_id: str) -> ParameterSpec | None:
        """Parse a parameter."""
        param_data = self._dereference(param_data)

        name = param_data.get("name")
        if not name:
            return None

        location = param_data.get("in", "query")
        hint = f"{to_model_name(operation_id)}{to_model_name(name)}"
        raw_schema = self._hoist_schema(param_data.get("schema", {}), hint)
        return ParameterSpec(
            name=name,
            location=location,
            required=param_data.get("required", location == "path"),
            schema=parse_schema(raw_schema),
            description=param_data.get("description"),
            example=param_data.get("example"),
        )

    @staticmethod
    def _select_content(content: dict[str, Any]) -> tuple[str, dict[str, Any]] | None:
        if not content:
            return None
        content_type = _PREFERRED_CONTENT_TYPE if _PREFERRED_CONTENT_TYPE in content else next(iter(content))
        return content_type, content[content_type]

    def _parse_request_body(self, body_data: dict[str, Any] | None, operation_id: str) -> RequestBodySpec | None:
        """Parse a request body."""
        if not body_data:
            return None
        body_data = self._dereference(body_data)

        selected = self._select_content(body_data.get("content", {}))
        if selected is None:
            return None
        content_type, media = selected

        raw_schema = self._hoist_schema(media.get("schema", {}), f"{to_model_name(operation_id)}Request")
        return RequestBodySpec(
            schema=parse_schema(raw_schema),
            content_type=content_type,
            required=body_data.get("required", False),
            description=body_data.get("description"),
            example=media.get("example"),
        )

    def _parse_response(self, status_code: str, response_data: dict[str, Any], operation_id: str) -> ResponseSpec:
        """Parse a response."""
        response_data = self._dereference(response_data)
        content = response_data.get("content", {})
        description = response_data.get("description", "")

        selected = self._select_content(content)
        if selected is None or "schema" not in selected[1]:
            return ResponseSpec(status_code=status_code, description=description, content_types=list(content))

        hint = f"{to_model_name(operation_id)}Response"
        if not status_code.startswith("2"):
            hint = f"{hint}{status_code.capitalize()}"
        raw_schema = self._hoist_schema(selected[1]["schema"], hint)
        return ResponseSpec(
            status_code=status_code,
            description=description,
            schema=parse_schema(raw_schema),
            content_types=list(content),
        )

    def _extract_content_types(self) -> list[str]:
        """Extract all content types used in the API."""
        content_types = set()

        if not self.spec_data:
            return []

        for path_item in self.spec_data.get("paths", {}).values():
            for operation in path_item.values():
                if isinstance(operation, dict):
                    request_body = self._dereference(operation.get("requestBody", {}))
                    content_types.update(request_body.get("content", {}).keys())

                    for response in operation.get("responses", {}).values():
                        response_content = self._dereference(response).get("content", {})
                        content_types.update(response_content.keys())

        return sorted(content_types)
