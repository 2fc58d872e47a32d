"""Output formatting helpers for CLI commands."""

from __future__ import annotations

import json
from typing import Any

from notifycard.expressions.values import to_json_compatible

__all__ = [
    "format_error",
    "format_json",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Bad context", details=["Field: vars"]))
        Error: Bad context
          Field: vars
    """
    lines = [f"Error: {message}"]
    for detail in details or ():
        lines.append(f"  {detail}")
    if suggestion:
        lines.append(f"Suggestion: {suggestion}")
    return "\n".join(lines)


def format_json(data: Any) -> str:
    """Format an evaluation result as indented JSON.

    NaN and infinities are spelled out as strings since JSON has no literal
    for them.

    Example:
        >>> format_json({"count": 3.0})
        '{\\n  "count": 3\\n}'
    """
    return json.dumps(
        to_json_compatible(data, nonfinite_as_string=True),
        indent=2,
        ensure_ascii=False,
        default=str,
    )
