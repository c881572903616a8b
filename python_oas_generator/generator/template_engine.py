"""
Manifest Template Engine

This module uses Jinja2 templates to render the resolver's decisions, model
records and endpoint records as Markdown manifests.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from python_oas_generator.constants import DEFAULT_PACKAGE_NAME
from python_oas_generator.generator.filters import FILTERS
from python_oas_generator.resolver.materialization import MaterializationDecision
from python_oas_generator.resolver.records import model_import
from python_oas_generator.utils.string_case import pascalcase, snakecase, to_model_filename

if TYPE_CHECKING:
    from python_oas_generator.parser.oas_parser import ParsedSpec
    from python_oas_generator.resolver.engine import GenerationResult
    from python_oas_generator.resolver.records import CodegenModel, CodegenOperation

MODELS_MANIFEST = "models.md"
OPERATIONS_MANIFEST = "operations.md"


class ModelAnalyzer:
    """Groups and orders models for the manifests."""

    @staticmethod
    def group_by_decision(models: dict[str, CodegenModel]) -> dict[MaterializationDecision, list[CodegenModel]]:
        """Group models by materialization decision, in declaration order."""
        groups: dict[MaterializationDecision, list[CodegenModel]] = {}
        for model in models.values():
            groups.setdefault(model.decision, []).append(model)
        return {decision: groups[decision] for decision in MaterializationDecision if decision in groups}

    @staticmethod
    def inlined_schemas(result: GenerationResult) -> list[str]:
        """Names of the schemas that stay inline."""
        return [name for name, decision in result.materialization.decisions.items() if not decision.is_model]


class OperationAnalyzer:
    """Analyzes operations for imports."""

    @staticmethod
    def get_all_imports(operations: list[CodegenOperation]) -> list[str]:
        """Get all models imported by any operation."""
        return sorted({name for op in operations for name in op.imports})


class ManifestTemplateEngine:
    """Template engine for rendering materialization manifests."""

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template engine."""
        if template_dir is None:
            current_dir = Path(__file__).parent
            template_dir = current_dir.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters for manifest rendering."""
        builtin_filters = {
            "snake_case": snakecase,
            "pascal_case": pascalcase,
            "model_filename": to_model_filename,
        }

        self.env.filters.update(builtin_filters)
        self.env.filters.update(FILTERS)

    def _register_globals(self) -> None:
        """Register global functions available in templates."""
        model_analyzer = ModelAnalyzer()
        op_analyzer = OperationAnalyzer()

        globals_map: dict[str, Any] = {
            "group_by_decision": model_analyzer.group_by_decision,
            "inlined_schemas": model_analyzer.inlined_schemas,
            "get_all_imports": op_analyzer.get_all_imports,
            "model_import": model_import,
        }

        self.env.globals.update(globals_map)

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        template = self.env.get_template(template_name)
        return template.render(**context)


class ManifestGenerator:
    """Renders the manifests of one generation run."""

    def __init__(self, template_engine: ManifestTemplateEngine | None = None) -> None:
        """Initialize the manifest generator."""
        self.template_engine = template_engine or ManifestTemplateEngine()

    def generate_manifests(
        self,
        spec: ParsedSpec,
        result: GenerationResult,
        output_dir: Path,
        package_name: str = DEFAULT_PACKAGE_NAME,
    ) -> dict[Path, str]:
        """Render the model and operation manifests.

        Args:
            spec: The loaded specification.
            result: The engine output for that specification.
            output_dir: Directory the manifests are written to.
            package_name: Package the generated client would live in, used for
                import statements.

        Returns:
            Rendered manifest contents keyed by output path.
        """
        output_dir = Path(output_dir)
        context = {
            "spec": spec,
            "result": result,
            "package_name": package_name,
            "models": result.models,
            "operations": result.operations,
            "tags": {op.operation_id: op.tags for op in spec.operations},
            "failures": result.failures,
            "operation_failures": result.operation_failures,
        }

        return {
            output_dir / MODELS_MANIFEST: self.template_engine.render_template(f"{MODELS_MANIFEST}.j2", context),
            output_dir / OPERATIONS_MANIFEST: self.template_engine.render_template(
                f"{OPERATIONS_MANIFEST}.j2", context
            ),
        }
