"""
Generation pass.

Builds the model and endpoint records from the frozen materialization
decisions. Property, parameter and response references to primitive or
enum schemas are unaliased to their target's inline type here, keeping the
component name as provenance; the reference rewriter upgrades them to the
wrapper model once every decision is known.
"""

import logging
from collections.abc import Sequence
from typing import Any

from python_oas_generator.constants import ANY_TYPE_MEMBERS, LANGUAGE_PRIMITIVES, NONE_TYPE, NULL_SENTINEL
from python_oas_generator.errors import CodegenError
from python_oas_generator.parser.oas_parser import OperationSpec, ParameterSpec, RequestBodySpec, ResponseSpec
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import SchemaKind, SchemaNode
from python_oas_generator.resolver.composition import CompositionResolver
from python_oas_generator.resolver.enums import EnumMaterializer, EnumVar
from python_oas_generator.resolver.literals import parameter_example, to_default_value
from python_oas_generator.resolver.materialization import MaterializationDecision, MaterializationMap
from python_oas_generator.resolver.records import (
    CodegenModel,
    CodegenOperation,
    CodegenParameter,
    CodegenProperty,
    CodegenResponse,
)
from python_oas_generator.resolver.type_expression import TypeExpressionResolver
from python_oas_generator.utils.string_case import to_model_name, to_var_name

logger = logging.getLogger(__name__)

_UNALIASED_KINDS = frozenset({SchemaKind.PRIMITIVE, SchemaKind.ENUM, SchemaKind.ANY})

BODY_PARAM_NAME = "body"


class ModelBuilder:
    """Builds ``CodegenModel`` and ``CodegenOperation`` records."""

    def __init__(
        self,
        graph: SchemaGraph,
        materialization: MaterializationMap,
        resolver: TypeExpressionResolver,
    ) -> None:
        self.graph = graph
        self.materialization = materialization
        self.resolver = resolver
        self.policy = resolver.policy
        self.composition = CompositionResolver(graph, resolver.policy, resolver)
        self.enums = EnumMaterializer()

    def build_models(self) -> tuple[dict[str, CodegenModel], dict[str, CodegenError]]:
        """Build a model for every materialized schema.

        A schema whose model cannot be built is logged and recorded; the
        other models are still built.

        Returns:
            The models keyed by schema name, and the build failures.
        """
        models: dict[str, CodegenModel] = {}
        failures: dict[str, CodegenError] = {}
        for name in self.materialization.model_names():
            try:
                models[name] = self.build_model(name)
            except CodegenError as e:
                logger.error("Cannot build model for schema %s: %s", name, e)
                failures[name] = e
        return models, failures

    def build_model(self, schema_name: str) -> CodegenModel:
        """Build the model record of one materialized schema.

        Raises:
            ValueError: If the schema is inlined rather than materialized.
            CodegenError: If a schema the model depends on cannot be resolved.
        """
        decision = self.materialization.decision_for(schema_name)
        if not decision.is_model:
            msg = f"Schema {schema_name} is inlined and has no model"
            raise ValueError(msg)

        schema = self.graph[schema_name]
        node = self.graph.unalias(schema)
        shape = self.graph.underlying(node)
        model = CodegenModel(
            schema_name=schema_name,
            class_name=to_model_name(schema_name),
            decision=decision,
            data_type=to_model_name(schema_name),
            schema=schema,
            description=schema.description or shape.description,
            validations=dict(node.constraints),
        )

        match decision:
            case MaterializationDecision.OBJECT:
                self._populate_object(model, shape)
            case MaterializationDecision.ARRAY_WRAPPER:
                self._populate_array(model, shape)
            case MaterializationDecision.ENUM_WRAPPER:
                self._populate_enum(model, shape)
            case MaterializationDecision.VALIDATED_SCALAR_WRAPPER:
                model.data_type = self.resolver.resolve(shape)
                model.default_value = to_default_value(node) or to_default_value(shape)
                model.has_required = model.default_value is None
        return model

    def _populate_object(self, model: CodegenModel, shape: SchemaNode) -> None:
        if shape.kind is SchemaKind.COMPOSED:
            properties, required = self.composition.collect_properties(shape)
        else:
            properties, required = dict(shape.properties), list(shape.required)

        model.vars = [
            self.build_property(base_name, prop_schema, required=base_name in required, owner=model)
            for base_name, prop_schema in properties.items()
        ]
        model.discriminator = shape.discriminator
        model.additional_properties_type = self._additional_properties_type(shape, model)

        if shape.kind is SchemaKind.COMPOSED:
            self._populate_composition(model, shape, required)
        model.has_required = bool(model.required_vars)

    def _populate_composition(self, model: CodegenModel, shape: SchemaNode, required: list[str]) -> None:
        result = self.composition.resolve(model.class_name, shape)
        model.one_of = list(result.one_of)
        model.any_of = list(result.any_of)
        for name in result.imports:
            model.add_import(name)

        referenced: list[str] = []
        model.all_of = [self.resolver.resolve(parent, referenced_models=referenced) for parent in shape.all_of]
        for name in referenced:
            model.add_import(name)

        null_defaults = self.composition.null_default_properties(shape, required)
        for var in model.vars:
            if var.base_name in null_defaults:
                var.default_value = null_defaults[var.base_name]
        if null_defaults:
            logger.debug("%s: %s default to %s", model.class_name, ", ".join(null_defaults), NULL_SENTINEL)

    def _additional_properties_type(self, shape: SchemaNode, model: CodegenModel) -> str | None:
        if shape.additional_properties is not None:
            referenced: list[str] = []
            value_type = self.resolver.resolve(shape.additional_properties, referenced_models=referenced)
            for name in referenced:
                model.add_import(name)
            return value_type
        if not shape.allows_additional_properties:
            return None
        return ", ".join(ANY_TYPE_MEMBERS)

    def _populate_array(self, model: CodegenModel, shape: SchemaNode) -> None:
        referenced: list[str] = []
        model.data_type = self.resolver.resolve(shape, referenced_models=referenced)
        for name in referenced:
            model.add_import(name)
        enum_node = self._enum_node(shape)
        if enum_node is not None:
            model.enum_vars = self._enum_vars(enum_node)
        model.has_required = True

    def _populate_enum(self, model: CodegenModel, shape: SchemaNode) -> None:
        data_type = shape.primitive_name or "str"
        wrapper = self.enums.wrapper(shape, data_type)
        model.data_type = data_type
        model.enum_vars = wrapper.enum_vars
        model.default_value = wrapper.default_value
        model.has_required = wrapper.has_required

    def _unalias_top_level(self, schema: SchemaNode) -> tuple[SchemaNode, str | None]:
        """Replace a reference to a primitive or enum schema with its target.

        Returns:
            The node the record's type is derived from and the component name
            it came from, if any.
        """
        if schema.kind is not SchemaKind.REFERENCE or schema.ref is None:
            return schema, None
        target = self.graph.unalias(schema)
        if target.kind in _UNALIASED_KINDS and target.name is not None:
            return target, target.name
        return schema, schema.ref

    def _enum_node(self, schema: SchemaNode) -> SchemaNode | None:
        """Find the enum a value is drawn from, looking through arrays."""
        visiting: set[str] = set()
        node = schema
        while True:
            if node.kind is SchemaKind.REFERENCE and node.ref is not None:
                if node.ref in visiting:
                    return None
                visiting.add(node.ref)
                target = self.graph.resolve(node.ref)
                if self.policy.will_materialize(target):
                    return None
                node = target
            elif node.kind is SchemaKind.ARRAY and node.items is not None:
                node = node.items
            else:
                return node if node.kind is SchemaKind.ENUM else None

    def _enum_vars(self, node: SchemaNode) -> tuple[EnumVar, ...]:
        data_type = node.primitive_name or "str"
        return tuple(self.enums.materialize(node.enum, data_type, node.extensions, node.format))

    def _element_members(self, schema: SchemaNode) -> list[str]:
        """Type names of the innermost element of a container, without ``none_type``."""
        visiting: set[str] = set()
        node = schema
        while True:
            if node.kind is SchemaKind.REFERENCE and node.ref is not None:
                if node.ref in visiting:
                    break
                visiting.add(node.ref)
                target = self.graph.resolve(node.ref)
                if self.policy.will_materialize(target):
                    break
                node = target
            elif node.kind is SchemaKind.ARRAY and node.items is not None:
                node = node.items
            elif node.kind is SchemaKind.MAP and node.additional_properties is not None:
                node = node.additional_properties
            else:
                break
        members = self.resolver.resolve_expression(node).members
        return [member for member in members if member != NONE_TYPE]

    @staticmethod
    def _complex_type(members: list[str]) -> str | None:
        if len(members) == 1 and members[0] not in LANGUAGE_PRIMITIVES:
            return members[0]
        return None

    def build_property(
        self,
        base_name: str,
        schema: SchemaNode,
        *,
        required: bool,
        owner: CodegenModel | None = None,
    ) -> CodegenProperty:
        """Build a property record, registering referenced models on the owner."""
        node, ref = self._unalias_top_level(schema)
        referenced: list[str] = []
        data_type = self.resolver.resolve(node, referenced_models=referenced)
        if owner is not None:
            for name in referenced:
                owner.add_import(name)

        shape = self.graph.underlying(node)
        enum_node = self._enum_node(node)
        complex_type = self._complex_type(self._element_members(node))
        default_value = to_default_value(schema) if schema.default is not None else to_default_value(node)
        return CodegenProperty(
            name=to_var_name(base_name),
            base_name=base_name,
            data_type=data_type,
            required=required,
            schema=schema,
            ref=ref,
            description=schema.description or node.description,
            default_value=default_value,
            example=schema.example if schema.example is not None else node.example,
            complex_type=complex_type,
            is_primitive_type=complex_type is None,
            is_enum=node.kind is SchemaKind.ENUM,
            is_nullable=self.graph.is_nullable(schema),
            has_validation=node.has_validation,
            is_list_container=shape.kind is SchemaKind.ARRAY,
            is_map_container=shape.kind is SchemaKind.MAP,
            enum_vars=self._enum_vars(enum_node) if enum_node is not None else (),
            validations=dict(node.constraints),
        )

    def build_operations(
        self,
        operations: Sequence[OperationSpec],
    ) -> tuple[list[CodegenOperation], dict[str, CodegenError]]:
        """Build the endpoint records of the loaded operations.

        Returns:
            The operation records, and the failures keyed by operation id.
        """
        built: list[CodegenOperation] = []
        failures: dict[str, CodegenError] = {}
        for spec in operations:
            try:
                built.append(self.build_operation(spec))
            except CodegenError as e:
                logger.error("Cannot build operation %s: %s", spec.operation_id, e)
                failures[spec.operation_id] = e
        return built, failures

    def build_operation(self, spec: OperationSpec) -> CodegenOperation:
        imports: list[str] = []
        parameters = [self._build_parameter(param, imports) for param in spec.parameters]
        body_param = self._build_body_param(spec.request_body, imports) if spec.request_body else None
        responses = [self._build_response(response, imports) for response in spec.responses]

        operation = CodegenOperation(
            operation_id=spec.operation_id,
            method=spec.method,
            path=spec.path,
            function_name=spec.function_name,
            parameters=parameters,
            body_param=body_param,
            responses=responses,
            summary=spec.summary,
            imports=list(dict.fromkeys(imports)),
        )
        default_response = operation.default_response()
        if default_response is not None:
            operation.return_type = default_response.data_type
            operation.return_base_type = default_response.base_type
        return operation

    def _parameter(
        self,
        name: str,
        base_name: str,
        location: str,
        schema: SchemaNode,
        *,
        required: bool,
        description: str | None,
        example: Any,  # noqa: ANN401
        imports: list[str],
    ) -> CodegenParameter:
        node, ref = self._unalias_top_level(schema)
        data_type = self.resolver.resolve(node, referenced_models=imports)
        shape = self.graph.underlying(node)
        members = self._element_members(node)
        base_type = self._complex_type(members)
        is_list_container = shape.kind is SchemaKind.ARRAY
        is_map_container = shape.kind is SchemaKind.MAP
        default_value = to_default_value(schema) if schema.default is not None else to_default_value(node)
        declared_example = example if example is not None else node.example
        return CodegenParameter(
            name=name,
            base_name=base_name,
            location=location,
            data_type=data_type,
            required=required,
            schema=schema,
            ref=ref,
            base_type=base_type,
            description=description or node.description,
            default_value=default_value,
            example=parameter_example(
                name,
                members[0] if members else NONE_TYPE,
                example=declared_example,
                default_value=default_value,
                is_list_container=is_list_container,
                is_map_container=is_map_container,
            ),
            is_primitive_type=base_type is None,
            is_enum=node.kind is SchemaKind.ENUM,
            has_validation=node.has_validation,
            is_list_container=is_list_container,
            is_map_container=is_map_container,
        )

    def _build_parameter(self, param: ParameterSpec, imports: list[str]) -> CodegenParameter:
        return self._parameter(
            to_var_name(param.name),
            param.name,
            param.location,
            param.schema,
            required=param.required,
            description=param.description,
            example=param.example,
            imports=imports,
        )

    def _build_body_param(self, body: RequestBodySpec, imports: list[str]) -> CodegenParameter:
        return self._parameter(
            BODY_PARAM_NAME,
            BODY_PARAM_NAME,
            BODY_PARAM_NAME,
            body.schema,
            required=body.required,
            description=body.description,
            example=body.example,
            imports=imports,
        )

    def _build_response(self, response: ResponseSpec, imports: list[str]) -> CodegenResponse:
        if response.schema is None:
            return CodegenResponse(status_code=response.status_code, description=response.description)

        node, ref = self._unalias_top_level(response.schema)
        data_type = self.resolver.resolve(node, referenced_models=imports)
        base_type = self._complex_type(self._element_members(node))
        return CodegenResponse(
            status_code=response.status_code,
            description=response.description,
            data_type=data_type,
            base_type=base_type,
            schema=response.schema,
            ref=ref,
            is_primitive_type=base_type is None,
        )
