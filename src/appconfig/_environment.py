"""Environment protocol, the live OS implementation, and an in-memory fake for tests."""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable


@runtime_checkable
class Environment(Protocol):
    """Read-only view of the process environment and user database.

    The expander and the command-line parser only ever read through this
    protocol, so tests can run without touching ``os.environ`` or the
    password database.
    """

    def get_env(self, key: str) -> str | None:
        ...

    def home_dir(self, user: str | None = None) -> str | None:
        ...


class OSEnvironment:
    """Reads from ``os.environ`` and the platform user database."""

    def get_env(self, key: str) -> str | None:
        return os.environ.get(key)

    def home_dir(self, user: str | None = None) -> str | None:
        if not user:
            home = os.environ.get("HOME")
            if home:
                return home
        expanded = os.path.expanduser(f"~{user or ''}")
        # expanduser hands back its input unchanged when the user is unknown.
        if expanded.startswith("~"):
            return None
        return expanded


class FakeEnvironment:
    """Dict-backed environment for tests.

    >>> env = FakeEnvironment(env={"HOME": "/home/abw"}, homes={"bob": "/home/bob"})
    >>> env.home_dir()
    '/home/abw'
    >>> env.home_dir("bob")
    '/home/bob'
    """

    def __init__(
        self,
        env: dict[str, str] | None = None,
        homes: dict[str, str] | None = None,
    ) -> None:
        self._env: dict[str, str] = dict(env or {})
        self._homes: dict[str, str] = dict(homes or {})

    # -- Protocol methods ---------------------------------------------------

    def get_env(self, key: str) -> str | None:
        return self._env.get(key)

    def home_dir(self, user: str | None = None) -> str | None:
        if not user:
            return self._env.get("HOME") or self._homes.get("")
        return self._homes.get(user)

    # -- Mutation helpers for test setup ------------------------------------

    def set_env(self, key: str, value: str) -> None:
        self._env[key] = value

    def set_home(self, user: str, path: str) -> None:
        self._homes[user] = path
