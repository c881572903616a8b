"""
Composed-schema resolution.

For ``oneOf``/``anyOf`` schemas this module works out which member types
survive materialization, which models the composed model must import and
which required properties only some variants mandate.
"""

from dataclasses import dataclass, field, replace

from python_oas_generator.constants import NULL_SENTINEL
from python_oas_generator.parser.schema_graph import SchemaGraph
from python_oas_generator.parser.schema_node import SchemaKind, SchemaNode
from python_oas_generator.resolver.materialization import MaterializationDecision, MaterializationPolicy
from python_oas_generator.resolver.type_expression import TypeExpressionResolver
from python_oas_generator.utils.string_case import to_model_name


@dataclass(frozen=True)
class CompositionVariant:
    """One ``oneOf``/``anyOf`` member after resolution."""

    schema: SchemaNode
    type_expression: str
    model_name: str | None = None
    is_self_reference: bool = False
    referenced_models: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompositionResult:
    """Surviving members, imports and per-name reference counts of a composed schema."""

    one_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()
    reference_counts: dict[str, int] = field(default_factory=dict)
    variants: tuple[CompositionVariant, ...] = ()


class CompositionResolver:
    """Resolves the member lists of composed schemas."""

    def __init__(self, graph: SchemaGraph, policy: MaterializationPolicy, resolver: TypeExpressionResolver) -> None:
        self.graph = graph
        self.policy = policy
        self.resolver = resolver

    def resolve(self, model_name: str, schema: SchemaNode) -> CompositionResult:
        """Resolve the ``oneOf`` and ``anyOf`` lists of a composed schema.

        Members are counted per mapped name: the model name for members that
        materialize, the primitive type expression otherwise. A member that
        refers to a validated-scalar model registers its primitive category
        without counting it, and self references are not counted. Names whose
        final count is zero are pruned.

        Args:
            model_name: The class name of the composed model.
            schema: The composed schema.

        Returns:
            The surviving member names and imports. Empty when the schema has
            no ``oneOf``/``anyOf`` members.
        """
        if not schema.variants:
            return CompositionResult()

        counts: dict[str, int] = {}
        variants: list[CompositionVariant] = []
        one_of = self._resolve_members(model_name, schema.one_of, counts, variants)
        any_of = self._resolve_members(model_name, schema.any_of, counts, variants)

        surviving = set(one_of) | set(any_of)
        imports = [
            model
            for variant in variants
            if not variant.is_self_reference and variant.type_expression in surviving
            for model in variant.referenced_models
            if model != model_name
        ]
        return CompositionResult(
            one_of=tuple(one_of),
            any_of=tuple(any_of),
            imports=tuple(dict.fromkeys(imports)),
            reference_counts=counts,
            variants=tuple(variants),
        )

    def _resolve_members(
        self,
        model_name: str,
        members: tuple[SchemaNode, ...],
        counts: dict[str, int],
        variants: list[CompositionVariant],
    ) -> list[str]:
        mapped_names: list[str] = []
        for member in members:
            referenced: list[str] = []
            type_expression = self.resolver.resolve(member, referenced_models=referenced)
            variant = CompositionVariant(
                schema=member,
                type_expression=type_expression,
                referenced_models=tuple(referenced),
            )

            if member.kind is SchemaKind.REFERENCE and member.ref is not None:
                target = self.graph.resolve(member.ref)
                decision = self.policy.decide(target)
                if decision is MaterializationDecision.VALIDATED_SCALAR_WRAPPER:
                    primitive = self.resolver.resolve(self.graph.underlying(target))
                    counts.setdefault(primitive, 0)
                if decision.is_model:
                    member_model = to_model_name(member.ref)
                    variant = replace(
                        variant,
                        model_name=member_model,
                        is_self_reference=member_model == model_name,
                    )

            variants.append(variant)
            mapped_names.append(type_expression)
            if variant.is_self_reference:
                counts.setdefault(type_expression, 0)
            else:
                counts[type_expression] = counts.get(type_expression, 0) + 1

        return [name for name in dict.fromkeys(mapped_names) if counts.get(name, 0) > 0]

    def null_default_properties(self, schema: SchemaNode, required_names: list[str]) -> dict[str, str]:
        """Find required properties that only ``oneOf``/``anyOf`` members mandate.

        Properties required by the composed schema itself, by its ``allOf``
        ancestry or as its discriminator never receive the sentinel.

        Returns:
            Property base names mapped to the sentinel default.
        """
        if not schema.variants:
            return {}

        other_required: set[str] = set()
        for member in schema.variants:
            other_required |= self._required_of(member, frozenset())

        self_required = set(schema.required)
        for parent in schema.all_of:
            self_required |= self._required_of(parent, frozenset())
        if schema.discriminator:
            self_required.add(schema.discriminator)

        return {
            name: NULL_SENTINEL for name in required_names if name in other_required and name not in self_required
        }

    def _required_of(self, node: SchemaNode, visiting: frozenset[str]) -> set[str]:
        if node.kind is SchemaKind.REFERENCE and node.ref is not None:
            if node.ref in visiting:
                return set()
            return self._required_of(self.graph.resolve(node.ref), visiting | {node.ref})
        required = set(node.required)
        for parent in node.all_of:
            required |= self._required_of(parent, visiting)
        return required

    def collect_properties(self, schema: SchemaNode) -> tuple[dict[str, SchemaNode], list[str]]:
        """Merge the properties a composed model exposes.

        Own properties come first, then those of ``allOf``, ``oneOf`` and
        ``anyOf`` members; the first declaration of a name wins.

        Returns:
            The merged properties and the union of required names, in order.
        """
        properties: dict[str, SchemaNode] = {}
        required: list[str] = []
        self._add_properties(schema, properties, required, frozenset())
        for member in schema.variants:
            self._add_properties(member, properties, required, frozenset())
        return properties, list(dict.fromkeys(required))

    def _add_properties(
        self,
        node: SchemaNode,
        properties: dict[str, SchemaNode],
        required: list[str],
        visiting: frozenset[str],
    ) -> None:
        if node.kind is SchemaKind.REFERENCE and node.ref is not None:
            if node.ref in visiting:
                return
            self._add_properties(self.graph.resolve(node.ref), properties, required, visiting | {node.ref})
            return
        for name, prop in node.properties.items():
            properties.setdefault(name, prop)
        required.extend(node.required)
        for parent in node.all_of:
            self._add_properties(parent, properties, required, visiting)
