"""
Jinja2 filters for the materialization manifests.

The manifests are Markdown documents listing, per model and endpoint, the
decisions and type expressions the resolver produced.
"""

import re
from typing import Any

from python_oas_generator.resolver.materialization import MaterializationDecision
from python_oas_generator.utils.string_case import to_var_name

_DECISION_LABELS = {
    MaterializationDecision.OBJECT: "object",
    MaterializationDecision.ARRAY_WRAPPER: "array wrapper",
    MaterializationDecision.ENUM_WRAPPER: "enum wrapper",
    MaterializationDecision.VALIDATED_SCALAR_WRAPPER: "validated scalar wrapper",
    MaterializationDecision.INLINE: "inline",
}


def code_span(text: Any) -> str:  # noqa: ANN401
    """Wrap a value in a Markdown code span.

    Values containing backticks are fenced with double backticks.

    Examples:
        >>> code_span("[str]")
        '`[str]`'
        >>> code_span(None)
        ''
    """
    if text is None or text == "":
        return ""
    value = str(text)
    if "`" in value:
        return f"`` {value} ``"
    return f"`{value}`"


def table_cell(text: Any) -> str:  # noqa: ANN401
    """Make a value safe for a single Markdown table cell.

    Args:
        text: The value to place in the cell.

    Returns:
        The value with pipes escaped and line breaks collapsed.
    """
    if text is None:
        return ""
    return " ".join(str(text).split()).replace("|", "\\|")


def first_line(text: str | None) -> str:
    """Return the first non-empty line of a description."""
    if not text:
        return ""
    for line in text.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def decision_label(decision: MaterializationDecision) -> str:
    return _DECISION_LABELS[decision]


def yes_no(value: bool) -> str:  # noqa: FBT001
    return "yes" if value else "no"


def python_path_params(path: str) -> str:
    """Rename path parameter placeholders to the Python argument names.

    Examples:
        >>> python_path_params("/v2/accounts/{account-id}/transactions")
        '/v2/accounts/{account_id}/transactions'
        >>> python_path_params("/pets/{petId}")
        '/pets/{pet_id}'
    """
    if not path:
        return ""

    def replace_param(match: re.Match[str]) -> str:
        param_content = match.group(1)
        return "{" + to_var_name(param_content) + "}"

    return re.sub(r"\{([^}]+)\}", replace_param, path)


# Register filters that will be available in Jinja templates
FILTERS = {
    "code_span": code_span,
    "table_cell": table_cell,
    "first_line": first_line,
    "decision_label": decision_label,
    "yes_no": yes_no,
    "python_path_params": python_path_params,
}
