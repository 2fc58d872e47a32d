"""Evaluation context: six named scopes of JSON-like data.

A context is an immutable record. Every scope is always present after
normalization, possibly empty, so nothing downstream checks for a missing
scope.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from notifycard.exceptions import ConfigError

__all__ = [
    "SCOPE_NAMES",
    "EvalContext",
    "normalize_context",
    "context_from_environ",
]

SCOPE_NAMES: tuple[str, ...] = ("envs", "vars", "github", "matrix", "job", "steps")

_GITHUB_PREFIX = "GITHUB_"


@dataclass(frozen=True, slots=True)
class EvalContext:
    """The six scopes identifiers are resolved against.

    Attributes:
        envs: Environment variables (string to string). Lookups here fall back
            to upper- and lower-cased keys.
        vars: Repository/workflow variables.
        github: CI platform metadata (repository, sha, ref, ...).
        matrix: Current matrix combination.
        job: Current job (id, name, status).
        steps: Outputs of previous steps.
    """

    envs: Mapping[str, Any] = field(default_factory=dict)
    vars: Mapping[str, Any] = field(default_factory=dict)
    github: Mapping[str, Any] = field(default_factory=dict)
    matrix: Mapping[str, Any] = field(default_factory=dict)
    job: Mapping[str, Any] = field(default_factory=dict)
    steps: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in SCOPE_NAMES:
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, {})
            elif not isinstance(value, Mapping):
                raise ConfigError(
                    f"Context scope '{name}' must be a mapping, "
                    f"got {type(value).__name__}",
                    field=name,
                    value=value,
                )

    def scope(self, name: str) -> Mapping[str, Any]:
        """Return the scope called ``name``.

        Raises:
            KeyError: If ``name`` is not one of SCOPE_NAMES.
        """
        if name not in SCOPE_NAMES:
            raise KeyError(name)
        scope: Mapping[str, Any] = getattr(self, name)
        return scope

    def replace(self, **scopes: Mapping[str, Any] | None) -> EvalContext:
        """Return a copy with the given scopes swapped out."""
        return dataclasses.replace(self, **scopes)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: dict(self.scope(name)) for name in SCOPE_NAMES}


def normalize_context(
    context: EvalContext | Mapping[str, Any] | None,
) -> EvalContext:
    """Fill in missing scopes with empty mappings.

    Args:
        context: An EvalContext, a partial mapping keyed by scope name, or None.

    Returns:
        A fully populated EvalContext.

    Raises:
        ConfigError: If the mapping names an unknown scope or a scope is not
            a mapping.
    """
    if context is None:
        return EvalContext()
    if isinstance(context, EvalContext):
        return context
    unknown = sorted(set(context) - set(SCOPE_NAMES))
    if unknown:
        raise ConfigError(
            f"Unknown context scope(s): {', '.join(map(str, unknown))}. "
            f"Expected a subset of: {', '.join(SCOPE_NAMES)}",
            field=str(unknown[0]),
        )
    return EvalContext(**{name: context.get(name) for name in SCOPE_NAMES})


def context_from_environ(
    environ: Mapping[str, str] | None = None,
    *,
    vars: Mapping[str, Any] | None = None,  # noqa: A002
    matrix: Mapping[str, Any] | None = None,
    job: Mapping[str, Any] | None = None,
    steps: Mapping[str, Any] | None = None,
) -> EvalContext:
    """Build a context from a process environment.

    ``envs`` receives a snapshot of the environment. ``github`` receives every
    ``GITHUB_*`` variable with the prefix removed and the rest lower-cased,
    so ``GITHUB_REPOSITORY`` is available as ``github.repository``.

    Args:
        environ: Environment to read. Defaults to ``os.environ``.
        vars: Workflow variables.
        matrix: Matrix values.
        job: Current job metadata.
        steps: Previous step outputs.

    Returns:
        A fully populated EvalContext.
    """
    source = os.environ if environ is None else environ
    envs = dict(source)
    github = {
        key[len(_GITHUB_PREFIX) :].lower(): value
        for key, value in envs.items()
        if key.startswith(_GITHUB_PREFIX) and len(key) > len(_GITHUB_PREFIX)
    }
    return EvalContext(
        envs=envs,
        vars=vars,  # type: ignore[arg-type]
        github=github,
        matrix=matrix,  # type: ignore[arg-type]
        job=job,  # type: ignore[arg-type]
        steps=steps,  # type: ignore[arg-type]
    )
