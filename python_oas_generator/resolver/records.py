"""
Records describing generated models and endpoints.

These are the structures handed to the emitter. The generation pass fills
them in; the reference rewriter returns corrected copies once every
materialization decision is final.
"""

from dataclasses import dataclass, field
from typing import Any

from python_oas_generator.constants import MODEL_SUBPACKAGE
from python_oas_generator.parser.schema_node import SchemaNode
from python_oas_generator.resolver.enums import EnumVar
from python_oas_generator.resolver.materialization import MaterializationDecision
from python_oas_generator.utils.string_case import to_model_filename


def model_import(package_name: str, model_name: str) -> str:
    """Build the import statement for a generated model.

    Examples:
        >>> model_import("petstore_api", "Pet")
        'from petstore_api.model.pet import Pet'
    """
    return f"from {package_name}.{MODEL_SUBPACKAGE}.{to_model_filename(model_name)} import {model_name}"


@dataclass
class CodegenProperty:
    """Represents a model property."""

    name: str
    base_name: str
    data_type: str
    required: bool
    schema: SchemaNode
    ref: str | None = None
    description: str | None = None
    default_value: str | None = None
    example: Any = None
    complex_type: str | None = None
    is_primitive_type: bool = True
    is_enum: bool = False
    is_nullable: bool = False
    has_validation: bool = False
    is_list_container: bool = False
    is_map_container: bool = False
    enum_vars: tuple[EnumVar, ...] = ()
    validations: dict[str, Any] = field(default_factory=dict)
    rewritten: bool = False


@dataclass
class CodegenParameter:
    """Represents an endpoint parameter or request body."""

    name: str
    base_name: str
    location: str
    data_type: str
    required: bool
    schema: SchemaNode
    ref: str | None = None
    base_type: str | None = None
    description: str | None = None
    default_value: str | None = None
    example: str | None = None
    is_primitive_type: bool = True
    is_enum: bool = False
    has_validation: bool = False
    is_list_container: bool = False
    is_map_container: bool = False
    rewritten: bool = False

    @property
    def is_body(self) -> bool:
        return self.location == "body"


@dataclass
class CodegenResponse:
    """Represents an endpoint response."""

    status_code: str
    description: str
    data_type: str | None = None
    base_type: str | None = None
    schema: SchemaNode | None = None
    ref: str | None = None
    is_primitive_type: bool = True
    rewritten: bool = False

    @property
    def is_success(self) -> bool:
        return self.status_code.startswith("2")


@dataclass
class CodegenModel:
    """Represents a generated model class."""

    schema_name: str
    class_name: str
    decision: MaterializationDecision
    data_type: str
    schema: SchemaNode
    description: str | None = None
    vars: list[CodegenProperty] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    one_of: list[str] = field(default_factory=list)
    any_of: list[str] = field(default_factory=list)
    all_of: list[str] = field(default_factory=list)
    enum_vars: tuple[EnumVar, ...] = ()
    default_value: str | None = None
    has_required: bool = False
    additional_properties_type: str | None = None
    discriminator: str | None = None
    validations: dict[str, Any] = field(default_factory=dict)
    rewritten: bool = False

    @property
    def required_vars(self) -> list[CodegenProperty]:
        return [var for var in self.vars if var.required]

    @property
    def optional_vars(self) -> list[CodegenProperty]:
        return [var for var in self.vars if not var.required]

    @property
    def defaults(self) -> dict[str, str]:
        """Default value table keyed by property name."""
        return {var.name: var.default_value for var in self.vars if var.default_value is not None}

    def add_import(self, model_name: str) -> None:
        if model_name != self.class_name and model_name not in self.imports:
            self.imports.append(model_name)

    def import_statements(self, package_name: str) -> list[str]:
        return [model_import(package_name, name) for name in self.imports]


@dataclass
class CodegenOperation:
    """Represents an endpoint with its parameters and responses."""

    operation_id: str
    method: str
    path: str
    function_name: str
    parameters: list[CodegenParameter] = field(default_factory=list)
    body_param: CodegenParameter | None = None
    responses: list[CodegenResponse] = field(default_factory=list)
    return_type: str | None = None
    return_base_type: str | None = None
    summary: str | None = None
    imports: list[str] = field(default_factory=list)
    rewritten: bool = False

    @property
    def all_params(self) -> list[CodegenParameter]:
        return [*self.parameters, *([self.body_param] if self.body_param else [])]

    def default_response(self) -> CodegenResponse | None:
        """The response used as the method's return value."""
        for response in self.responses:
            if response.is_success:
                return response
        return next((r for r in self.responses if r.status_code == "default"), None)
