"""CLI context and exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from notifycard.config import NotifyCardConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Exit codes for the notifycard CLI.

    Click itself exits with 2 on usage errors.
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by every command.

    Attributes:
        config: Loaded configuration.
        config_path: Path given with --config, if any.
        verbosity: Number of -v flags.
        quiet: Only log errors.
    """

    config: NotifyCardConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
