"""Test utilities for registries."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ._registry import Registry
from ._types import ConfigError


@contextmanager
def capture_errors(registry: Registry) -> Iterator[list[ConfigError]]:
    """Temporarily route the registry's error sink into a list.

    Usage::

        with capture_errors(registry) as errors:
            registry.parse_args(["-nothing"])
        assert isinstance(errors[0], InvalidFlagError)
    """
    previous = registry.settings
    captured: list[ConfigError] = []
    registry.settings = previous.model_copy(update={"error": captured.append})
    try:
        yield captured
    finally:
        registry.settings = previous
