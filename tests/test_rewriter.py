"""Tests for the reference-rewriting pass."""

from collections.abc import Callable
from types import MappingProxyType
from typing import Any

import pytest

from python_oas_generator.errors import MissingDecisionError, ReferenceRewriteError
from python_oas_generator.parser.oas_parser import OperationSpec, RequestBodySpec, ResponseSpec
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import parse_schema
from python_oas_generator.resolver.materialization import MaterializationMap, MaterializationPolicy, classify
from python_oas_generator.resolver.model_builder import ModelBuilder
from python_oas_generator.resolver.records import CodegenModel, CodegenOperation, CodegenProperty
from python_oas_generator.resolver.rewriter import ReferenceRewriter
from python_oas_generator.resolver.type_expression import TypeExpressionResolver

GraphBuilder = Callable[[dict[str, Any]], SchemaGraph]
RefBuilder = Callable[[str], dict[str, str]]


class TestReferenceRewriter:
    """Records pointing at primitive or enum components are upgraded to wrapper models."""

    @pytest.fixture
    def graph(self, build_graph: GraphBuilder, ref: RefBuilder) -> SchemaGraph:
        return build_graph(
            {
                "Status": {"type": "string", "enum": ["available", "sold"]},
                "Weight": {"type": "number", "minimum": 0},
                "Name": {"type": "string"},
                "Parcel": {
                    "type": "object",
                    "properties": {"weight": ref("Weight"), "status": ref("Status"), "name": ref("Name")},
                },
            }
        )

    @pytest.fixture
    def builder(self, graph: SchemaGraph) -> ModelBuilder:
        policy = MaterializationPolicy(graph)
        return ModelBuilder(graph, classify(graph, policy), TypeExpressionResolver(graph, policy))

    @pytest.fixture
    def operation(self, builder: ModelBuilder, ref: RefBuilder) -> CodegenOperation:
        spec = OperationSpec(
            operation_id="setStatus",
            method="PUT",
            path="/parcels/status",
            summary=None,
            description=None,
            parameters=[],
            request_body=RequestBodySpec(
                schema=parse_schema(ref("Status")), content_type="application/json", required=True
            ),
            responses=[ResponseSpec("200", "Weight", schema=parse_schema(ref("Weight")))],
            tags=[],
        )
        return builder.build_operation(spec)

    def test_property_references_become_wrapper_models(self, builder: ModelBuilder) -> None:
        models, _ = builder.build_models()

        rewritten, _ = ReferenceRewriter(builder.materialization).rewrite(models)
        variables = {var.base_name: var for var in rewritten["Parcel"].vars}

        assert variables["weight"].data_type == "Weight"
        assert variables["weight"].complex_type == "Weight"
        assert not variables["weight"].is_primitive_type
        assert not variables["weight"].has_validation
        assert variables["status"].data_type == "Status"
        assert not variables["status"].is_enum
        assert variables["name"].data_type == "str"
        assert rewritten["Parcel"].imports == ["Weight", "Status"]

    def test_rewrite_does_not_mutate_inputs(self, builder: ModelBuilder) -> None:
        models, _ = builder.build_models()

        ReferenceRewriter(builder.materialization).rewrite(models)

        parcel = models["Parcel"]
        assert not parcel.rewritten
        assert parcel.imports == []
        assert [var.data_type for var in parcel.vars] == ["float", "str", "str"]

    def test_body_and_response_references(self, builder: ModelBuilder, operation: CodegenOperation) -> None:
        models, _ = builder.build_models()
        assert operation.body_param is not None
        assert operation.body_param.example == '"body_example"'
        assert operation.return_type == "float"

        _, (rewritten,) = ReferenceRewriter(builder.materialization).rewrite(models, [operation])

        assert rewritten.body_param is not None
        assert rewritten.body_param.data_type == "Status"
        assert rewritten.body_param.example == 'Status("available")'
        assert rewritten.return_type == "Weight"
        assert rewritten.return_base_type == "Weight"
        assert rewritten.imports == ["Status", "Weight"]

    def test_validated_body_example_wraps_primitive(self, builder: ModelBuilder, ref: RefBuilder) -> None:
        spec = OperationSpec(
            operation_id="weigh",
            method="POST",
            path="/weigh",
            summary=None,
            description=None,
            parameters=[],
            request_body=RequestBodySpec(schema=parse_schema(ref("Weight")), content_type="application/json"),
            responses=[],
            tags=[],
        )
        models, _ = builder.build_models()
        rewriter = ReferenceRewriter(builder.materialization, models)

        _, (rewritten,) = rewriter.rewrite({}, [builder.build_operation(spec)])

        assert rewritten.body_param is not None
        assert rewritten.body_param.example == "Weight(3.4)"

    def test_second_rewrite_is_rejected(self, builder: ModelBuilder) -> None:
        models, _ = builder.build_models()
        rewriter = ReferenceRewriter(builder.materialization)
        rewritten, _ = rewriter.rewrite(models)

        with pytest.raises(ReferenceRewriteError):
            rewriter.rewrite(rewritten)

    def test_reference_without_decision(self, graph: SchemaGraph) -> None:
        rewriter = ReferenceRewriter(MaterializationMap(MappingProxyType({}), MappingProxyType({})))
        prop = CodegenProperty(
            name="ghost",
            base_name="ghost",
            data_type="str",
            required=False,
            schema=graph["Name"],
            ref="Ghost",
        )

        with pytest.raises(MissingDecisionError):
            rewriter.rewrite_property(prop, [])

    def test_model_does_not_import_itself(self, builder: ModelBuilder) -> None:
        models, _ = builder.build_models()
        status = models["Status"]

        rewritten = ReferenceRewriter(builder.materialization).rewrite_model(
            CodegenModel(
                schema_name="Status",
                class_name="Status",
                decision=status.decision,
                data_type=status.data_type,
                schema=status.schema,
                vars=[
                    CodegenProperty(
                        name="previous",
                        base_name="previous",
                        data_type="str",
                        required=False,
                        schema=status.schema,
                        ref="Status",
                    )
                ],
            )
        )

        assert rewritten.vars[0].data_type == "Status"
        assert rewritten.imports == []
