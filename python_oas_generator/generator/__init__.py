"""
Manifest Generator Module

This module provides Jinja2-based rendering of the resolver's decisions
and records as Markdown manifests.
"""

from .template_engine import ManifestGenerator, ManifestTemplateEngine

__all__ = [
    "ManifestGenerator",
    "ManifestTemplateEngine",
]
