"""
Materialization decisions.

Decides, per named schema, whether it is compiled into a generated model
class or inlined as a structural type expression. Decisions depend only on
a schema's own shape and constraints, never on sibling decisions, so they
can be taken before any model is built and are safe to memoize on cyclic
graphs.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from python_oas_generator.errors import CodegenError, MissingDecisionError
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import SchemaKind, SchemaNode
from python_oas_generator.utils.string_case import to_model_name

logger = logging.getLogger(__name__)

_OBJECT_KINDS = frozenset({SchemaKind.OBJECT, SchemaKind.MAP, SchemaKind.FREE_FORM, SchemaKind.COMPOSED})


class MaterializationDecision(Enum):
    """How a named schema is represented in the generated client."""

    OBJECT = "object"
    ARRAY_WRAPPER = "array_wrapper"
    ENUM_WRAPPER = "enum_wrapper"
    VALIDATED_SCALAR_WRAPPER = "validated_scalar_wrapper"
    INLINE = "inline"

    @property
    def is_model(self) -> bool:
        return self is not MaterializationDecision.INLINE

    @property
    def is_scalar_wrapper(self) -> bool:
        return self in (MaterializationDecision.ENUM_WRAPPER, MaterializationDecision.VALIDATED_SCALAR_WRAPPER)


class MaterializationPolicy:
    """Classifies schemas, memoizing the answer per component name."""

    def __init__(self, graph: SchemaGraph) -> None:
        self.graph = graph
        self._memo: dict[str, MaterializationDecision] = {}
        self._failures: dict[str, CodegenError] = {}

    def will_materialize(self, schema: SchemaNode) -> bool:
        """Check whether a schema becomes a generated model."""
        return self.decide(schema).is_model

    def decide(self, schema: SchemaNode) -> MaterializationDecision:
        """Return the materialization decision for a schema.

        A named schema that failed once raises the same error on every later call.

        Raises:
            UnresolvedReferenceError: If an alias chain ends in a dangling reference.
        """
        if schema.name is not None:
            if schema.name in self._memo:
                return self._memo[schema.name]
            if schema.name in self._failures:
                raise self._failures[schema.name]

        try:
            node = self.graph.unalias(schema)
            decision = self._classify_shape(self.graph.underlying(node))
        except CodegenError as e:
            if schema.name is not None:
                self._failures[schema.name] = e
            raise
        if decision is MaterializationDecision.INLINE and node.has_validation:
            # A reference that adds constraints to a plain scalar
            decision = MaterializationDecision.VALIDATED_SCALAR_WRAPPER
        if schema.name is not None:
            # Recomputing a decision yields the same value, so keep the first one written.
            decision = self._memo.setdefault(schema.name, decision)
        return decision

    @staticmethod
    def _classify_shape(node: SchemaNode) -> MaterializationDecision:
        if node.kind in _OBJECT_KINDS:
            return MaterializationDecision.OBJECT
        if node.kind is SchemaKind.ARRAY:
            return MaterializationDecision.ARRAY_WRAPPER
        if node.kind is SchemaKind.ENUM:
            return MaterializationDecision.ENUM_WRAPPER
        if node.kind in (SchemaKind.PRIMITIVE, SchemaKind.ANY) and node.has_validation:
            return MaterializationDecision.VALIDATED_SCALAR_WRAPPER
        return MaterializationDecision.INLINE


@dataclass(frozen=True)
class MaterializationMap:
    """Frozen per-schema decisions, plus the schemas that could not be classified."""

    decisions: MappingProxyType[str, MaterializationDecision]
    failures: MappingProxyType[str, CodegenError]

    def decision_for(self, schema_name: str) -> MaterializationDecision:
        """Look up a recorded decision.

        Raises:
            CodegenError: The recorded error when classification of the schema failed.
            MissingDecisionError: If the schema was never classified.
        """
        if schema_name in self.failures:
            raise self.failures[schema_name]
        try:
            return self.decisions[schema_name]
        except KeyError:
            raise MissingDecisionError(schema_name) from None

    def model_names(self) -> dict[str, str]:
        """Map schema names of materialized schemas to their model class names."""
        return {name: to_model_name(name) for name, decision in self.decisions.items() if decision.is_model}


def classify(graph: SchemaGraph, policy: MaterializationPolicy | None = None) -> MaterializationMap:
    """Classify every named schema of a graph.

    Failures are recorded per schema; they are not retried and are never
    treated as inline.
    """
    policy = policy or MaterializationPolicy(graph)
    decisions: dict[str, MaterializationDecision] = {}
    failures: dict[str, CodegenError] = dict(graph.failures)

    for name, schema in graph.items():
        try:
            decisions[name] = policy.decide(schema)
        except CodegenError as e:
            logger.error("Cannot classify schema %s: %s", name, e)
            failures[name] = e

    logger.debug(
        "Classified %d schemas, %d materialized, %d failed",
        len(decisions),
        sum(1 for d in decisions.values() if d.is_model),
        len(failures),
    )
    return MaterializationMap(MappingProxyType(decisions), MappingProxyType(failures))
