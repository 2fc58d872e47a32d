"""notifycard exception hierarchy.

All project exceptions can be imported from this package:
    from notifycard.exceptions import ConfigError, NotifyCardError

Expression errors live next to the evaluator in notifycard.expressions.errors
and inherit from NotifyCardError.
"""

from __future__ import annotations

from notifycard.exceptions.base import NotifyCardError
from notifycard.exceptions.config import ConfigError

__all__ = [
    "NotifyCardError",
    "ConfigError",
]
