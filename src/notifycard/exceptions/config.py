from __future__ import annotations

from typing import Any

from notifycard.exceptions.base import NotifyCardError


class ConfigError(NotifyCardError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised when configuration or a context file cannot be loaded, parsed, or
    validated. This includes YAML parsing failures, Pydantic validation errors,
    invalid environment variable values and unknown context scopes.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "max_depth").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        # YAML parsing failure
        raise ConfigError("Failed to parse notifycard.yaml: invalid YAML syntax")

        # Pydantic validation failure
        raise ConfigError(
            "Invalid configuration value",
            field="expressions.max_depth",
            value=-1,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
