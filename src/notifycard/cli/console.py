"""Shared Rich Console for CLI diagnostics.

Rich handles TTY detection: styled output in terminals, plain text when
piped into another CI step. Command results go to stdout through click.echo
so they can be piped; everything on this console goes to stderr.
"""

from __future__ import annotations

from rich.console import Console

__all__ = ["err_console"]

err_console = Console(stderr=True)
