"""
OpenAPI Parser Module for Python Client Generation

This module loads OpenAPI specifications into the schema graph and
endpoint definitions the resolver works on.
"""

from .oas_parser import (
    OASParser,
    OperationSpec,
    ParameterSpec,
    ParsedSpec,
    RequestBodySpec,
    ResponseSpec,
)
from .schema_graph import SchemaGraph
from .schema_node import SchemaKind, SchemaNode, extract_ref_name, parse_schema

__all__ = [
    "OASParser",
    "OperationSpec",
    "ParameterSpec",
    "ParsedSpec",
    "RequestBodySpec",
    "ResponseSpec",
    "SchemaGraph",
    "SchemaKind",
    "SchemaNode",
    "extract_ref_name",
    "parse_schema",
]
