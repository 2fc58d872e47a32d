"""Identifier resolution against a normalized context.

Identifiers are dotted paths. The first segment picks where to look:

- ``appEnv`` / ``processEnv``: the rest of the path (re-joined with dots) is a
  host environment variable name, tried exact, upper-cased, lower-cased.
- one of the six scope names: descend into that scope.
- anything else: look the root up in ``envs`` case-insensitively.

Every descent step is a checked lookup that returns UNDEFINED instead of
raising, so a missing key, a null in the middle of the path or a scalar
where a container was expected all end the walk with UNDEFINED.

Note that ``appEnv`` lookups read process state that is not part of the
context argument; pass ``environ`` explicitly to make evaluation hermetic.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from notifycard.expressions.context import SCOPE_NAMES, EvalContext
from notifycard.expressions.values import UNDEFINED, is_nil

__all__ = ["HOST_ENV_ROOTS", "IdentifierResolver"]

HOST_ENV_ROOTS = frozenset({"appEnv", "processEnv"})


def _lookup(container: Any, key: str) -> Any:
    """Exact-key child lookup; UNDEFINED when there is no such child."""
    if isinstance(container, Mapping):
        return container.get(key, UNDEFINED)
    if isinstance(container, (list, tuple)):
        if key.isdecimal() and key.isascii() and int(key) < len(container):
            return container[int(key)]
        return UNDEFINED
    return UNDEFINED


def _lookup_any_case(container: Any, key: str) -> Any:
    """Try ``key``, then its upper- and lower-cased forms.

    The first non-null hit wins. When all three are null or missing, the
    result is whatever the lower-cased attempt found: None if ``key.lower()``
    is present with a null value, UNDEFINED otherwise.
    """
    value: Any = UNDEFINED
    for candidate in (key, key.upper(), key.lower()):
        value = _lookup(container, candidate)
        if not is_nil(value):
            return value
    return value


class IdentifierResolver:
    """Resolves dotted identifier paths.

    Attributes:
        context: The normalized context (read-only).
        environ: Host environment used for ``appEnv``/``processEnv``.

    Example:
        ```python
        resolver = IdentifierResolver(EvalContext(vars={"NAME": "demo"}))
        resolver.resolve("vars.NAME")  # "demo"
        resolver.resolve("nope.x")  # UNDEFINED
        ```
    """

    def __init__(
        self,
        context: EvalContext,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.context = context
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

    def resolve(self, path: str) -> Any:
        """Resolve ``path`` to a value, or UNDEFINED if nothing is there."""
        root, *rest = path.split(".")

        if root in HOST_ENV_ROOTS:
            if not rest:
                return UNDEFINED
            return self._host_env(".".join(rest))

        if root in SCOPE_NAMES:
            current: Any = self.context.scope(root)
            case_insensitive = root == "envs"
        else:
            current = _lookup_any_case(self.context.envs, root)
            if current is UNDEFINED:
                return UNDEFINED
            case_insensitive = True

        for segment in rest:
            if is_nil(current):
                return UNDEFINED
            if case_insensitive:
                current = _lookup_any_case(current, segment)
            else:
                current = _lookup(current, segment)
        return current

    def _host_env(self, key: str) -> Any:
        for candidate in (key, key.upper(), key.lower()):
            value = self.environ.get(candidate)
            if value is not None:
                return value
        return UNDEFINED
