"""
Schema Resolution Module

Materialization decisions, type expressions, composed-schema handling,
enum members and the reference-rewriting pass.
"""

from .composition import CompositionResolver, CompositionResult, CompositionVariant
from .engine import Engine, GenerationResult
from .enums import EnumMaterializer, EnumVar, EnumWrapper
from .materialization import MaterializationDecision, MaterializationMap, MaterializationPolicy, classify
from .model_builder import ModelBuilder
from .records import (
    CodegenModel,
    CodegenOperation,
    CodegenParameter,
    CodegenProperty,
    CodegenResponse,
    model_import,
)
from .rewriter import ReferenceRewriter
from .type_expression import TypeExpression, TypeExpressionResolver

__all__ = [
    "CodegenModel",
    "CodegenOperation",
    "CodegenParameter",
    "CodegenProperty",
    "CodegenResponse",
    "CompositionResolver",
    "CompositionResult",
    "CompositionVariant",
    "Engine",
    "EnumMaterializer",
    "EnumVar",
    "EnumWrapper",
    "GenerationResult",
    "MaterializationDecision",
    "MaterializationMap",
    "MaterializationPolicy",
    "ModelBuilder",
    "ReferenceRewriter",
    "TypeExpression",
    "TypeExpressionResolver",
    "classify",
    "model_import",
]
