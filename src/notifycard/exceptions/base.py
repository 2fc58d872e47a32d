from __future__ import annotations


class NotifyCardError(Exception):
    """Base exception class for all notifycard-specific errors.

    This is the root of the notifycard exception hierarchy. Catching it at the
    CLI boundary lets system exceptions propagate naturally while every
    expected failure (bad config, malformed expression) is reported cleanly.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            render_template(template, ctx)
        except NotifyCardError as e:
            logger.error("render_failed", error=e.message)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the NotifyCardError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
