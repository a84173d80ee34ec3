"""Foundation types for the registry.

Provides the absent-value sentinel, the error hierarchy, and the result
object returned by the ingestion pipelines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Undefined:
    """Sentinel for a variable that has no value (distinct from ``None``)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

# Value stored for flag-style entries that carry no explicit value.
FLAG_VALUE = 1


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base exception for registry and ingestion errors."""


class NoSuchVariableError(ConfigError):
    """Raised when get/set/validate is called on an undefined variable."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name}: no such variable")


class InvalidOptionError(ConfigError):
    """An unrecognised or unusable option was passed to the registry or ``define``."""

    def __init__(self, option: str, reason: str = "is not a valid configuration option") -> None:
        self.option = option
        super().__init__(f"{option} {reason}")


class NotInvocableError(ConfigError):
    """A hook, action or validator option was not callable."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"{option} value is not callable")


class IngestionError(ConfigError):
    """Base for problems found while reading a config file or command line.

    File errors carry ``source`` and ``line``; command-line errors carry
    ``token``.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        line: int | None = None,
        token: str | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.line = line
        self.token = token
        super().__init__(self._format())

    def _format(self) -> str:
        if self.source is not None and self.line is not None:
            return f"{self.source}:{self.line}: {self.message}"
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message


class FileOpenError(IngestionError):
    """The config file could not be opened or read. Fatal to that parse call."""


class ParseError(IngestionError):
    """A config-file line matched no splitting pattern."""


class UndefinedVariableError(IngestionError):
    """A config-file line or command-line trigger names an undefined variable."""

    def __init__(self, name: str, **context: Any) -> None:
        self.name = name
        super().__init__(f"no such variable: {name}", **context)


class ValidationFailure(IngestionError):
    """A value was rejected by the variable's validator."""

    def __init__(self, name: str, value: Any, **context: Any) -> None:
        self.name = name
        self.value = value
        if context.get("token") is not None:
            message = f"{context['token']} {value}: invalid data ({name})"
        else:
            message = f"invalid data for '{name}'"
        super().__init__(message, **context)


class MissingArgumentError(IngestionError):
    """A command-line flag requires a value that was not supplied."""

    def __init__(self, token: str) -> None:
        super().__init__(f"{token} expects an argument", token=token)


class InvalidFlagError(IngestionError):
    """A ``-``-prefixed command-line token matched no trigger."""

    def __init__(self, token: str) -> None:
        super().__init__(f"{token}: invalid flag", token=token)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class ParseResult:
    """Outcome of one config-file or command-line parse.

    Attributes:
        source: File name, stream name or ``"<argv>"``
        ok: False only when the input could not be read at all
        applied: Number of variables successfully set
        errors: Every recoverable problem reported during the parse
    """

    source: str
    ok: bool = True
    applied: int = 0
    errors: list[ConfigError] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def clean(self) -> bool:
        """True when the parse succeeded without reporting any error."""
        return self.ok and not self.errors
