"""
Phase ordering for the resolution engine.

``Engine.run`` classifies every named schema, builds the model and
operation records from the frozen decisions, then rewrites references. Each
phase starts only after the previous one has finished for all schemas.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from python_oas_generator.errors import CodegenError
from python_oas_generator.parser.oas_parser import OperationSpec, ParsedSpec
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.resolver.materialization import MaterializationMap, MaterializationPolicy, classify
from python_oas_generator.resolver.model_builder import ModelBuilder
from python_oas_generator.resolver.records import CodegenModel, CodegenOperation
from python_oas_generator.resolver.rewriter import ReferenceRewriter
from python_oas_generator.resolver.type_expression import TypeExpressionResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Everything the engine hands to the emitter."""

    graph: SchemaGraph
    materialization: MaterializationMap
    models: dict[str, CodegenModel]
    operations: list[CodegenOperation]
    failures: dict[str, CodegenError] = field(default_factory=dict)
    operation_failures: dict[str, CodegenError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures and not self.operation_failures


class Engine:
    """Runs classification, generation and rewriting over one schema graph."""

    def __init__(self, graph: SchemaGraph) -> None:
        self.graph = graph
        self.policy = MaterializationPolicy(graph)
        self.resolver = TypeExpressionResolver(graph, self.policy)

    @classmethod
    def from_spec(cls, spec: ParsedSpec) -> "Engine":
        return cls(spec.graph)

    def run(self, operations: Sequence[OperationSpec] = ()) -> GenerationResult:
        """Run every phase and collect the results.

        Args:
            operations: The loaded endpoint definitions, if any.

        Returns:
            The frozen decisions, the rewritten records and the per-schema
            and per-operation failures.
        """
        materialization = classify(self.graph, self.policy)

        builder = ModelBuilder(self.graph, materialization, self.resolver)
        models, build_failures = builder.build_models()
        built_operations, operation_failures = builder.build_operations(operations)

        rewriter = ReferenceRewriter(materialization)
        models, rewritten_operations = rewriter.rewrite(models, built_operations)

        failures = {**materialization.failures, **build_failures}
        logger.info(
            "Generated %d models and %d operations (%d schema failures, %d operation failures)",
            len(models),
            len(rewritten_operations),
            len(failures),
            len(operation_failures),
        )
        return GenerationResult(
            graph=self.graph,
            materialization=materialization,
            models=models,
            operations=rewritten_operations,
            failures=failures,
            operation_failures=operation_failures,
        )
