"""
Python type-expression synthesis.

A type expression is the comma-separated list of Python classes a value may
be an instance of, e.g. ``bool, date, none_type`` or ``[Pet]`` or
``{str: (int,)}``. Container brackets are passed down the recursion as a
prefix/suffix pair so nested unions stay unambiguous.
"""

from dataclasses import dataclass

from python_oas_generator.constants import ANY_TYPE_MEMBERS, FREE_FORM_MEMBERS, NONE_TYPE
from python_oas_generator.errors import UnsupportedSchemaShapeError
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import SchemaKind, SchemaNode
from python_oas_generator.resolver.materialization import MaterializationPolicy
from python_oas_generator.utils.string_case import to_model_name

_ANY_SCHEMA = SchemaNode(kind=SchemaKind.ANY)


@dataclass(frozen=True)
class TypeExpression:
    """Ordered, duplicate-free union of Python type names."""

    members: tuple[str, ...]
    prefix: str = ""
    suffix: str = ""

    @classmethod
    def of(cls, members: list[str], prefix: str = "", suffix: str = "") -> "TypeExpression":
        return cls(tuple(dict.fromkeys(members)), prefix, suffix)

    def __str__(self) -> str:
        body = ", ".join(self.members)
        if self.suffix == ")" and len(self.members) == 1:
            body += ","
        return f"{self.prefix}{body}{self.suffix}"


class TypeExpressionResolver:
    """Maps schema nodes to canonical type-expression strings."""

    def __init__(self, graph: SchemaGraph, policy: MaterializationPolicy) -> None:
        self.graph = graph
        self.policy = policy

    def resolve(
        self,
        schema: SchemaNode,
        prefix: str = "",
        suffix: str = "",
        referenced_models: list[str] | None = None,
    ) -> str:
        """Return the type expression for a schema.

        Args:
            schema: The schema to describe.
            prefix: Container opening bracket, empty at the top level.
            suffix: Container closing bracket, empty at the top level.
            referenced_models: When given, model names the expression refers
                to are appended to it, for import computation.

        Returns:
            The rendered type expression.
        """
        return str(self.resolve_expression(schema, prefix, suffix, referenced_models))

    def resolve_expression(
        self,
        schema: SchemaNode,
        prefix: str = "",
        suffix: str = "",
        referenced_models: list[str] | None = None,
    ) -> TypeExpression:
        members = self._members(schema, referenced_models, frozenset())
        return TypeExpression.of(members, prefix, suffix)

    def _members(
        self,
        schema: SchemaNode,
        referenced_models: list[str] | None,
        visiting: frozenset[str],
    ) -> list[str]:
        if schema.kind is SchemaKind.REFERENCE and schema.ref is not None:
            target = self.graph.resolve(schema.ref)
            if schema.ref in visiting or self.policy.will_materialize(target):
                model_name = to_model_name(schema.ref)
                if referenced_models is not None:
                    referenced_models.append(model_name)
                return [model_name]
            members = self._members(target, referenced_models, visiting | {schema.ref})
            if schema.nullable and NONE_TYPE not in members:
                members.append(NONE_TYPE)
            return members

        if schema.kind is SchemaKind.ANY:
            return list(ANY_TYPE_MEMBERS)

        members = self._structural_members(schema, referenced_models, visiting)
        if NONE_TYPE not in members and self.graph.is_nullable(schema, visiting):
            members.append(NONE_TYPE)
        return members

    def _nested(
        self,
        schema: SchemaNode | None,
        prefix: str,
        suffix: str,
        referenced_models: list[str] | None,
        visiting: frozenset[str],
    ) -> str:
        members = self._members(schema or _ANY_SCHEMA, referenced_models, visiting)
        return str(TypeExpression.of(members, prefix, suffix))

    def _structural_members(
        self,
        schema: SchemaNode,
        referenced_models: list[str] | None,
        visiting: frozenset[str],
    ) -> list[str]:
        match schema.kind:
            case SchemaKind.FREE_FORM:
                return list(FREE_FORM_MEMBERS)
            case SchemaKind.MAP:
                value = self._nested(schema.additional_properties, "(", ")", referenced_models, visiting)
                return [f"{{str: {value}}}"]
            case SchemaKind.ARRAY:
                return [self._nested(schema.items, "[", "]", referenced_models, visiting)]
            case SchemaKind.PRIMITIVE | SchemaKind.ENUM:
                primitive = schema.primitive_name
                if primitive is None:
                    msg = f"type '{schema.schema_type}' has no primitive representation"
                    raise UnsupportedSchemaShapeError(msg, schema.name)
                return [primitive]
            case SchemaKind.OBJECT:
                if schema.name is None:
                    msg = "inline object schemas must be hoisted to named models"
                    raise UnsupportedSchemaShapeError(msg)
                return [to_model_name(schema.name)]
            case SchemaKind.COMPOSED:
                return self._composed_members(schema, referenced_models, visiting)
            case _:
                msg = f"unexpected schema kind {schema.kind}"
                raise UnsupportedSchemaShapeError(msg, schema.name)

    def _composed_members(
        self,
        schema: SchemaNode,
        referenced_models: list[str] | None,
        visiting: frozenset[str],
    ) -> list[str]:
        if schema.name is not None:
            return [to_model_name(schema.name)]
        if schema.variants and not schema.all_of and not schema.properties:
            members: list[str] = []
            accepts_none = False
            for variant in schema.variants:
                variant_members = self._members(variant, referenced_models, visiting)
                accepts_none = accepts_none or NONE_TYPE in variant_members
                members.extend(m for m in variant_members if m != NONE_TYPE)
            # none_type always renders last
            if accepts_none:
                members.append(NONE_TYPE)
            return members
        if len(schema.all_of) == 1 and not schema.variants and not schema.properties:
            return [m for m in self._members(schema.all_of[0], referenced_models, visiting) if m != NONE_TYPE]
        if not schema.variants and not schema.all_of and not schema.properties:
            msg = "composition has no non-null members"
            raise UnsupportedSchemaShapeError(msg)
        msg = "inline allOf compositions must be hoisted to named models"
        raise UnsupportedSchemaShapeError(msg)
