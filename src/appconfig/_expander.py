"""Expansion of home directories, environment variables and registry variables.

Rules are applied in order, each as a single pass over the string:

1. ``~`` / ``~user`` at the start of the value (up to ``/`` or the end)
2. ``${NAME}`` -- environment variable, or ``""`` when unset
3. ``$(NAME)`` -- registry variable, or ``""`` when undefined or absent
4. ``$NAME``   -- registry variable, then environment variable, else left as-is
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ._environment import Environment

if TYPE_CHECKING:
    from ._registry import Registry

_HOME_RE = re.compile(r"^~([^/]*)")
_ENV_RE = re.compile(r"\$\{(\w+)\}")
_REGISTRY_RE = re.compile(r"\$\((\w+)\)")
_BARE_RE = re.compile(r"\$(\w+)")


def _registry_value(registry: Registry, name: str) -> str | None:
    """Return the variable's value as a string, or ``None`` if undefined or absent."""
    if not registry.is_defined(name) or not registry.has_value(name):
        return None
    return str(registry.get(name))


def expand(value: Any, registry: Registry, environment: Environment | None = None) -> Any:
    """Expand *value* against *registry* and the environment.

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value

    env = environment or registry.environment

    def _home(match: re.Match[str]) -> str:
        user = match.group(1)
        home = env.home_dir(user or None)
        return home if home is not None else match.group(0)

    def _env(match: re.Match[str]) -> str:
        return env.get_env(match.group(1)) or ""

    def _variable(match: re.Match[str]) -> str:
        return _registry_value(registry, match.group(1)) or ""

    def _bare(match: re.Match[str]) -> str:
        name = match.group(1)
        found = _registry_value(registry, name)
        if found:
            return found
        found = env.get_env(name)
        if found:
            return found
        return match.group(0)

    value = _HOME_RE.sub(_home, value, count=1)
    value = _ENV_RE.sub(_env, value)
    value = _REGISTRY_RE.sub(_variable, value)
    value = _BARE_RE.sub(_bare, value)
    return value
