"""Validators for variable values.

A variable's ``validator`` option is either a regular-expression string or a
predicate called as ``predicate(name, value)``. Both are normalised into a
callable with that signature by :func:`compile_validator`.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Sequence

Predicate = Callable[[str, Any], Any]


# ---------------------------------------------------------------------------
# Validator wrappers
# ---------------------------------------------------------------------------


class PatternValidator:
    """Accepts a value when the pattern matches anywhere in ``str(value)``.

    >>> PatternValidator(r"\\d+")("port", "8080")
    True
    """

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    def __call__(self, name: str, value: Any) -> bool:
        if value is None:
            return False
        return self.regex.search(str(value)) is not None

    def __repr__(self) -> str:
        return f"PatternValidator({self.pattern!r})"


class PredicateValidator:
    """Wraps a user predicate and coerces its result to ``bool``."""

    def __init__(self, predicate: Predicate) -> None:
        self.predicate = predicate

    def __call__(self, name: str, value: Any) -> bool:
        return bool(self.predicate(name, value))

    def __repr__(self) -> str:
        return f"PredicateValidator({self.predicate!r})"


def compile_validator(spec: Any) -> PatternValidator | PredicateValidator:
    """Normalise a ``validator`` option.

    Raises ``re.error`` for a bad pattern and ``TypeError`` when *spec* is
    neither a string, a compiled pattern nor a callable.
    """
    if isinstance(spec, (PatternValidator, PredicateValidator)):
        return spec
    if isinstance(spec, (str, re.Pattern)):
        return PatternValidator(spec)
    if callable(spec):
        return PredicateValidator(spec)
    raise TypeError(f"{type(spec).__name__} is not a pattern or a callable")


# ---------------------------------------------------------------------------
# Predicate helpers
# ---------------------------------------------------------------------------

class Boolean:
    """Accepts values that read as a boolean (``yes``, ``off``, ``1`` ...).

    >>> Boolean()("debug", "yes")
    True
    >>> Boolean()("debug", "maybe")
    False
    >>> Boolean.read(" Off ")
    False
    """

    words: dict[str, bool] = {
        **dict.fromkeys(("1", "true", "yes", "on", "t", "y"), True),
        **dict.fromkeys(("0", "false", "no", "off", "f", "n", ""), False),
    }

    @classmethod
    def read(cls, value: Any) -> bool | None:
        """The boolean *value* spells, or ``None`` when it is not one."""
        if isinstance(value, (bool, int, float)):
            return bool(value)
        if isinstance(value, str):
            return cls.words.get(value.strip().lower())
        return None

    def __call__(self, name: str, value: Any) -> bool:
        return self.read(value) is not None


class Choices:
    """Accepts a value that is one of a fixed set of choices.

    >>> Choices(["debug", "info", "warning"])("log_level", "info")
    True
    """

    def __init__(
        self,
        choices: Sequence[Any],
        cast: Callable[[Any], Any] = str,
    ) -> None:
        self.choices = choices
        self.cast = cast

    def __call__(self, name: str, value: Any) -> bool:
        try:
            casted = self.cast(value)
        except (TypeError, ValueError):
            return False
        return casted in self.choices
