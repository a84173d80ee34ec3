"""Command-line ingestion.

Flags are matched against each variable's command triggers. Arguments are
consumed from the front of the list in place; whatever is left (positional
arguments, or everything after the end-of-arguments marker) stays for the
caller::

    argv = ["-v", "-o", "/tmp/out", "--", "-not-a-flag", "input.txt"]
    registry.parse_args(argv)
    argv  # ["-not-a-flag", "input.txt"]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._types import (
    FLAG_VALUE,
    ConfigError,
    InvalidFlagError,
    MissingArgumentError,
    ParseResult,
    ValidationFailure,
)

if TYPE_CHECKING:
    from ._registry import Registry

logger = logging.getLogger(__name__)

ARGV_SOURCE = "<argv>"


def _is_flag(token: Any) -> bool:
    return isinstance(token, str) and token.startswith("-")


class CommandLineParser:
    """Consumes ``-flag [value]`` tokens from an argument list into a :class:`Registry`."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def parse(self, argv: list[Any]) -> ParseResult:
        """Parse and consume flags from the front of *argv*.

        Every problem is reported and skipped, so the result is always ``ok``;
        inspect ``result.errors`` for the individual failures.
        """
        registry = self.registry
        settings = registry.settings

        if settings.cmd_env is not None:
            defaults = registry.environment.get_env(settings.cmd_env)
            if defaults is not None:
                argv[:0] = defaults.split()

        if settings.cmd_parse is not None:
            outcome = settings.cmd_parse(registry, argv)
            if isinstance(outcome, ParseResult):
                return outcome
            return ParseResult(source=ARGV_SOURCE, ok=bool(outcome))

        result = ParseResult(source=ARGV_SOURCE)

        while argv and _is_flag(argv[0]):
            token = argv.pop(0)
            if token == settings.end_of_args:
                break

            variable = registry.trigger(token)
            if variable is None:
                self._fail(result, InvalidFlagError(token))
                continue

            # A truthy result from the hook means the argument was handled.
            if settings.arg_parse is not None and settings.arg_parse(
                registry, token, variable, argv
            ):
                continue

            spec = registry.spec(variable)
            if spec.argument_required:
                if argv and isinstance(argv[0], str) and not _is_flag(argv[0]):
                    value = argv.pop(0)
                else:
                    # A None placeholder occupies the value slot, so it goes too.
                    if argv and argv[0] is None:
                        argv.pop(0)
                    self._fail(result, MissingArgumentError(token))
                    continue
            else:
                value = FLAG_VALUE

            if not registry.validate(variable, value):
                self._fail(result, ValidationFailure(variable, value, token=token))
                continue

            registry.set(variable, value)
            result.applied += 1

        logger.debug(
            "Parsed arguments: %d variable(s) set, %d error(s), %d argument(s) left",
            result.applied,
            len(result.errors),
            len(argv),
        )
        return result

    def _fail(self, result: ParseResult, error: ConfigError) -> None:
        result.errors.append(error)
        self.registry.report(error)
