"""
Python OpenAPI Schema Resolver

Decides which OpenAPI schemas become generated Python model classes,
synthesizes the type expressions of every schema use site and rewrites
references once all decisions are known.
"""

from .generator import ManifestGenerator, ManifestTemplateEngine
from .parser import OASParser, ParsedSpec, SchemaGraph
from .resolver import Engine, GenerationResult, MaterializationDecision, classify

__version__ = "1.0.0"

__all__ = [
    "Engine",
    "GenerationResult",
    "ManifestGenerator",
    "ManifestTemplateEngine",
    "MaterializationDecision",
    "OASParser",
    "ParsedSpec",
    "SchemaGraph",
    "classify",
]
