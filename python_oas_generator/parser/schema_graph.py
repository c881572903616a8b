"""
Read-only view over the named schema definitions of an OpenAPI document.

The graph resolves ``$ref`` names, follows alias chains and answers
nullability questions. Every traversal tracks the references it has
visited, so self-referential and mutually-referential schemas terminate.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from python_oas_generator.errors import UnresolvedReferenceError, UnsupportedSchemaShapeError
from python_oas_generator.parser.schema_node import SchemaKind, SchemaNode, extract_ref_name, parse_schema
from python_oas_generator.utils.string_case import to_model_name

logger = logging.getLogger(__name__)


class SchemaGraph(Mapping[str, SchemaNode]):
    """Named schema table with reference resolution."""

    def __init__(
        self,
        schemas: Mapping[str, SchemaNode],
        failures: Mapping[str, UnsupportedSchemaShapeError] | None = None,
    ) -> None:
        self._schemas = MappingProxyType(dict(schemas))
        self.failures = MappingProxyType(dict(failures or {}))

    @classmethod
    def from_dict(cls, raw_schemas: Mapping[str, Any]) -> "SchemaGraph":
        """Build a graph from the ``components.schemas`` section of a document.

        Each schema is parsed on its own; a schema with an unsupported shape
        is recorded as a failure and the remaining schemas still load.
        """
        schemas: dict[str, SchemaNode] = {}
        failures: dict[str, UnsupportedSchemaShapeError] = {}
        class_owners: dict[str, str] = {}
        for name, raw in raw_schemas.items():
            class_name = to_model_name(name)
            if class_name in class_owners:
                msg = f"class name '{class_name}' is already used by schema '{class_owners[class_name]}'"
                failures[name] = UnsupportedSchemaShapeError(msg, name)
                logger.warning("Skipping schema %s: %s", name, failures[name])
                continue
            class_owners[class_name] = name
            try:
                schemas[name] = parse_schema(raw, name)
            except UnsupportedSchemaShapeError as e:
                logger.warning("Skipping schema %s: %s", name, e)
                failures[name] = e
        return cls(schemas, failures)

    def __getitem__(self, name: str) -> SchemaNode:
        return self._schemas[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def resolve(self, ref: str) -> SchemaNode:
        """Resolve a reference to its named schema.

        Args:
            ref: Either a full ``#/components/schemas/Name`` reference or a
                bare component name.

        Returns:
            The referenced schema node.

        Raises:
            UnresolvedReferenceError: If no schema with that name exists.
            UnsupportedSchemaShapeError: If the referenced schema failed to parse.
        """
        name = extract_ref_name(ref)
        if name in self.failures:
            raise self.failures[name]
        try:
            return self._schemas[name]
        except KeyError:
            raise UnresolvedReferenceError(ref) from None

    def unalias(self, node: SchemaNode) -> SchemaNode:
        """Follow pure-alias references until a schema with its own semantics.

        A reference that adds nullability or constraints is not followed. When
        the chain loops back on itself the reference closing the cycle is
        returned instead of recursing.
        """
        visiting: set[str] = set()
        current = node
        while current.is_pure_alias and current.ref is not None:
            if current.ref in visiting:
                return current
            visiting.add(current.ref)
            current = self.resolve(current.ref)
        return current

    def underlying(self, node: SchemaNode) -> SchemaNode:
        """Follow every reference, including ones that add constraints, to the node giving the shape."""
        visiting: set[str] = set()
        current = node
        while current.kind is SchemaKind.REFERENCE and current.ref is not None:
            if current.ref in visiting:
                return current
            visiting.add(current.ref)
            current = self.resolve(current.ref)
        return current

    def is_nullable(self, node: SchemaNode, visiting: frozenset[str] = frozenset()) -> bool:
        """Check nullability, looking through references."""
        if node.nullable:
            return True
        if node.kind is not SchemaKind.REFERENCE or node.ref is None or node.ref in visiting:
            return False
        return self.is_nullable(self.resolve(node.ref), visiting | {node.ref})
