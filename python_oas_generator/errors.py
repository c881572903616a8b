"""
Error taxonomy for schema resolution and model materialization.

Errors raised while classifying or resolving one named schema are recorded
against that schema only; they never leak into the decisions made for
other schemas.
"""


class CodegenError(Exception):
    """Base class for all generator errors."""


class UnresolvedReferenceError(CodegenError):
    """A ``$ref`` does not resolve inside the schema table."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Unresolved schema reference: {ref}")


class UnsupportedSchemaShapeError(CodegenError):
    """A schema combination the resolver has no branch for."""

    def __init__(self, reason: str, schema_name: str | None = None) -> None:
        self.reason = reason
        self.schema_name = schema_name
        where = f"schema '{schema_name}'" if schema_name else "anonymous schema"
        super().__init__(f"Unsupported shape for {where}: {reason}")


class MissingDecisionError(CodegenError):
    """A reference was rewritten before its materialization decision existed."""

    def __init__(self, schema_name: str) -> None:
        self.schema_name = schema_name
        super().__init__(f"No materialization decision recorded for schema '{schema_name}'")


class ReferenceRewriteError(CodegenError):
    """A record was passed through the reference rewriter more than once."""


class AmbiguousDateValueWarning(UserWarning):
    """A date or date-time value could not be parsed as its declared type."""
