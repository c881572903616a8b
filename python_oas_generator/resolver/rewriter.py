"""
Reference rewriting.

Once every materialization decision is frozen, records whose type was
derived from a primitive or enum component are pointed at the wrapper model
generated for that component. Rewriting is pure: it returns new records and
leaves its inputs untouched.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import TypeVar

from python_oas_generator.errors import ReferenceRewriteError
from python_oas_generator.resolver.materialization import MaterializationDecision, MaterializationMap
from python_oas_generator.resolver.records import (
    CodegenModel,
    CodegenOperation,
    CodegenParameter,
    CodegenProperty,
    CodegenResponse,
)
from python_oas_generator.utils.string_case import to_model_name

logger = logging.getLogger(__name__)

Record = TypeVar("Record", CodegenModel, CodegenOperation, CodegenParameter, CodegenProperty, CodegenResponse)


def _ensure_not_rewritten(record: Record, label: str) -> None:
    if record.rewritten:
        msg = f"{label} was already rewritten"
        raise ReferenceRewriteError(msg)


def _add_import(imports: list[str], model_name: str, owner: str | None = None) -> None:
    if model_name != owner and model_name not in imports:
        imports.append(model_name)


class ReferenceRewriter:
    """Points records at the wrapper models of primitive and enum components."""

    def __init__(self, materialization: MaterializationMap, models: Mapping[str, CodegenModel] | None = None) -> None:
        self.materialization = materialization
        self.models = dict(models or {})

    def rewrite(
        self,
        models: Mapping[str, CodegenModel],
        operations: Sequence[CodegenOperation] = (),
    ) -> tuple[dict[str, CodegenModel], list[CodegenOperation]]:
        """Rewrite all models and operations.

        Args:
            models: The models built by the generation pass, keyed by schema name.
            operations: The operation records built by the generation pass.

        Returns:
            Rewritten copies of the models and operations.

        Raises:
            MissingDecisionError: If a record refers to a schema that was never classified.
            ReferenceRewriteError: If a record was already rewritten.
        """
        self.models = {**self.models, **models}
        rewritten_models = {name: self.rewrite_model(model) for name, model in models.items()}
        rewritten_operations = [self.rewrite_operation(operation) for operation in operations]
        logger.debug("Rewrote %d models and %d operations", len(rewritten_models), len(rewritten_operations))
        return rewritten_models, rewritten_operations

    def _wrapper_model(self, ref: str | None) -> str | None:
        """Name of the wrapper model replacing an inlined reference, if any."""
        if ref is None:
            return None
        if self.materialization.decision_for(ref).is_scalar_wrapper:
            return to_model_name(ref)
        return None

    def rewrite_model(self, model: CodegenModel) -> CodegenModel:
        _ensure_not_rewritten(model, f"Model {model.class_name}")
        imports = list(model.imports)
        variables = [self.rewrite_property(var, imports, model.class_name) for var in model.vars]
        return replace(model, vars=variables, imports=imports, rewritten=True)

    def rewrite_property(
        self,
        prop: CodegenProperty,
        imports: list[str],
        owner: str | None = None,
    ) -> CodegenProperty:
        """Rewrite one property, adding the wrapper model to ``imports`` when used."""
        _ensure_not_rewritten(prop, f"Property {prop.base_name}")
        model_name = self._wrapper_model(prop.ref)
        if model_name is None:
            return replace(prop, rewritten=True)

        _add_import(imports, model_name, owner)
        return replace(
            prop,
            data_type=model_name,
            complex_type=model_name,
            is_primitive_type=False,
            is_enum=False,
            has_validation=False,
            rewritten=True,
        )

    def rewrite_parameter(self, param: CodegenParameter, imports: list[str]) -> CodegenParameter:
        _ensure_not_rewritten(param, f"Parameter {param.base_name}")
        model_name = self._wrapper_model(param.ref)
        if model_name is None:
            return replace(param, rewritten=True)

        _add_import(imports, model_name)
        example = param.example
        if param.is_body and param.ref is not None:
            example = self._wrapped_example(model_name, param.ref, param.example)
        return replace(
            param,
            data_type=model_name,
            base_type=model_name,
            example=example,
            is_primitive_type=False,
            is_enum=False,
            has_validation=False,
            rewritten=True,
        )

    def _wrapped_example(self, model_name: str, ref: str, example: str | None) -> str:
        """Example for a request body whose payload is a wrapper model.

        Enum wrappers are constructed from their first literal, other wrappers
        from the primitive example.
        """
        model = self.models.get(ref)
        if self.materialization.decision_for(ref) is MaterializationDecision.ENUM_WRAPPER and model and model.enum_vars:
            return f"{model_name}({model.enum_vars[0].value})"
        return f"{model_name}({example or ''})"

    def rewrite_response(self, response: CodegenResponse, imports: list[str]) -> CodegenResponse:
        _ensure_not_rewritten(response, f"Response {response.status_code}")
        model_name = self._wrapper_model(response.ref)
        if model_name is None:
            return replace(response, rewritten=True)

        _add_import(imports, model_name)
        return replace(
            response,
            data_type=model_name,
            base_type=model_name,
            is_primitive_type=False,
            rewritten=True,
        )

    def rewrite_operation(self, operation: CodegenOperation) -> CodegenOperation:
        _ensure_not_rewritten(operation, f"Operation {operation.operation_id}")
        imports = list(operation.imports)
        parameters = [self.rewrite_parameter(param, imports) for param in operation.parameters]
        body_param = self.rewrite_parameter(operation.body_param, imports) if operation.body_param else None
        responses = [self.rewrite_response(response, imports) for response in operation.responses]

        rewritten = replace(
            operation,
            parameters=parameters,
            body_param=body_param,
            responses=responses,
            imports=imports,
            rewritten=True,
        )
        default_response = rewritten.default_response()
        if default_response is not None:
            rewritten.return_type = default_response.data_type
            rewritten.return_base_type = default_response.base_type
        return rewritten
