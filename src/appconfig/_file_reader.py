"""Config-file ingestion.

File format::

    # comments and blank lines are ignored
    name value
    name = value
    flag
    long_value = first part \\
                 continued here

A line ending in an unescaped backslash continues onto the next line.
Values are expanded (see :mod:`appconfig._expander`) when the variable's
``expand`` option is set, then validated and stored.
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING, Iterable, Iterator, TextIO

from ._expander import expand
from ._types import (
    FLAG_VALUE,
    ConfigError,
    FileOpenError,
    ParseError,
    ParseResult,
    UndefinedVariableError,
    ValidationFailure,
)

if TYPE_CHECKING:
    from ._registry import Registry

logger = logging.getLogger(__name__)

# Variable name, then either "=" (optionally padded) or whitespace, then the value.
_LINE_RE = re.compile(r"([^\s=]+)(?:(?:\s*=\s*|\s+)(.*))?", re.DOTALL)


def _logical_lines(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Join continuation lines, yielding ``(first_line_number, text)``.

    An odd run of trailing backslashes marks a continuation; an even run is
    a literal backslash and its final pair collapses to one.
    """
    buffer: str | None = None
    start = 0

    for number, raw in enumerate(lines, start=1):
        text = raw.rstrip("\r\n")
        if buffer is None:
            buffer = ""
            start = number

        trailing = len(text) - len(text.rstrip("\\"))
        if trailing % 2:
            buffer += text[:-1]
            continue
        if trailing:
            text = text[:-1]

        yield start, buffer + text
        buffer = None

    # A continuation marker on the final line has nothing left to join.
    if buffer is not None:
        yield start, buffer


class ConfigFileReader:
    """Reads ``name value`` lines into a :class:`Registry`."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def parse(self, source: str | os.PathLike[str] | TextIO | Iterable[str]) -> ParseResult:
        """Parse a config file path, an open text stream, or any iterable of lines.

        Paths are opened as UTF-8 and always closed again; streams passed in
        are left open for the caller.
        """
        settings = self.registry.settings
        name = self._source_name(source)

        if settings.file_parse is not None:
            outcome = settings.file_parse(self.registry, source)
            if isinstance(outcome, ParseResult):
                return outcome
            return ParseResult(source=name, ok=bool(outcome))

        if isinstance(source, (str, os.PathLike)):
            try:
                fp = open(source, encoding="utf-8")
            except OSError as exc:
                result = ParseResult(source=name, ok=False)
                self._fail(result, FileOpenError(exc.strerror or str(exc), source=name))
                return result
            with fp:
                return self._parse_lines(fp, name)

        return self._parse_lines(source, name)

    @staticmethod
    def _source_name(source: object) -> str:
        if isinstance(source, (str, os.PathLike)):
            return os.fspath(source)
        return str(getattr(source, "name", "<stream>"))

    def _fail(self, result: ParseResult, error: ConfigError) -> None:
        result.errors.append(error)
        self.registry.report(error)

    def _parse_lines(self, lines: Iterable[str], name: str) -> ParseResult:
        registry = self.registry
        line_parse = registry.settings.line_parse
        result = ParseResult(source=name)
        logical = _logical_lines(lines)

        while True:
            try:
                number, text = next(logical)
            except StopIteration:
                break
            except (OSError, UnicodeDecodeError) as exc:
                # Unreadable input ends the parse; lines already applied stay set.
                result.ok = False
                self._fail(result, FileOpenError(f"read failed: {exc}", source=name))
                break

            text = text.strip()
            if not text or text.startswith("#"):
                continue

            # A truthy result from the hook means the line was handled.
            if line_parse is not None and line_parse(registry, name, number, text):
                continue

            match = _LINE_RE.fullmatch(text)
            if match is None:
                self._fail(result, ParseError("parse error", source=name, line=number))
                continue

            variable, value = match.group(1), match.group(2)
            variable = registry.resolve(variable)
            if not registry.is_defined(variable):
                self._fail(result, UndefinedVariableError(variable, source=name, line=number))
                continue

            spec = registry.spec(variable)
            if value is None:
                if spec.argument_required:
                    registry.reset(variable)
                    result.applied += 1
                    continue
                value = FLAG_VALUE

            if spec.expand:
                value = expand(value, registry)

            if not registry.validate(variable, value):
                self._fail(
                    result, ValidationFailure(variable, value, source=name, line=number)
                )
                continue

            registry.set(variable, value)
            result.applied += 1

        logger.debug(
            "Read %s: %d variable(s) set, %d error(s)", name, result.applied, len(result.errors)
        )
        return result
