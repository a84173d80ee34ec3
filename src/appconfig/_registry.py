"""The variable registry: definitions, aliases, triggers and current values.

Typical use::

    registry = Registry(cmd_env="MYAPP_OPTS")
    registry.define("verbose", aliases="v", command_triggers=True)
    registry.define("outdir", default="~/out", argument_required=True, command_triggers="-o")

    registry.parse_file("~/.myapprc")
    registry.parse_args(sys.argv[1:])

    registry.get("outdir")
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Iterable, Mapping, TextIO

from ._environment import Environment, OSEnvironment
from ._options import RegistrySettings, VariableSpec, build_options, canonical_options
from ._types import (
    UNDEFINED,
    ConfigError,
    InvalidOptionError,
    NoSuchVariableError,
    NotInvocableError,
    ParseResult,
)
from ._validators import PatternValidator, PredicateValidator, compile_validator

logger = logging.getLogger(__name__)


class Registry:
    """Owns every variable's definition and current value.

    Names are case-folded to lower case unless the registry was built with
    ``case_sensitive=True``. Aliases are resolved a single hop: an alias that
    points at another alias is not followed further.
    """

    def __init__(
        self,
        settings: RegistrySettings | Mapping[str, Any] | None = None,
        *,
        environment: Environment | None = None,
        **options: Any,
    ) -> None:
        self.environment: Environment = environment or OSEnvironment()

        self._specs: dict[str, VariableSpec] = {}
        self._values: dict[str, Any] = {}
        self._validators: dict[str, PatternValidator | PredicateValidator] = {}
        self._aliases: dict[str, str] = {}
        self._triggers: dict[str, str] = {}

        errors: list[ConfigError] = []
        if isinstance(settings, RegistrySettings) and not options:
            self.settings = settings
        else:
            raw: dict[str, Any] = {}
            if isinstance(settings, RegistrySettings):
                raw.update(settings.model_dump(exclude_defaults=True))
            elif settings is not None:
                raw.update(settings)
            raw.update(options)
            clean, errors = canonical_options(RegistrySettings, raw)
            self.settings, build_errors = build_options(RegistrySettings, clean)
            errors.extend(build_errors)

        # Global options are applied beneath every define() call.
        self._global_options, global_errors = canonical_options(
            VariableSpec, self.settings.global_options
        )
        errors.extend(global_errors)

        for error in errors:
            self.report(error)

    # -- Name handling ------------------------------------------------------

    @property
    def case_sensitive(self) -> bool:
        return self.settings.case_sensitive

    def _fold(self, name: str) -> str:
        return name if self.settings.case_sensitive else name.lower()

    def resolve(self, name: str) -> str:
        """Return the canonical name for *name* after case folding and one alias hop."""
        folded = self._fold(name)
        return self._aliases.get(folded, folded)

    def _require(self, name: str) -> str:
        canonical = self.resolve(name)
        if canonical not in self._specs:
            raise NoSuchVariableError(canonical)
        return canonical

    def is_defined(self, name: str) -> bool:
        return self.resolve(name) in self._specs

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_defined(name)

    def names(self) -> list[str]:
        """Canonical names of every defined variable, in definition order."""
        return list(self._specs)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def triggers(self) -> dict[str, str]:
        return dict(self._triggers)

    def trigger(self, token: str) -> str | None:
        """Return the canonical name bound to a command-line token, if any."""
        return self._triggers.get(self._fold(token))

    def spec(self, name: str) -> VariableSpec:
        return self._specs[self._require(name)]

    # -- Definition ---------------------------------------------------------

    def define(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> str:
        """Register *name* as a variable and initialise it to its default.

        Options may be given as a mapping, as keyword arguments, or both.
        Unknown or unusable options are reported through :meth:`report` and
        skipped; the variable is still defined. Returns the canonical name.
        """
        raw = dict(options or {})
        raw.update(kwargs)
        local, errors = canonical_options(VariableSpec, raw)
        merged = {**self._global_options, **local}

        validator = None
        if merged.get("validator") is not None:
            try:
                validator = compile_validator(merged["validator"])
            except TypeError:
                errors.append(NotInvocableError("validator"))
                merged.pop("validator")
            except re.error as exc:
                errors.append(InvalidOptionError("validator", f"is not a valid pattern: {exc}"))
                merged.pop("validator")

        spec, build_errors = build_options(VariableSpec, merged)
        errors.extend(build_errors)
        if spec.validator is None:
            validator = None

        canonical = self._fold(name)
        # A name being defined as a variable can no longer be an alias.
        self._aliases.pop(canonical, None)

        self._specs[canonical] = spec
        self._values[canonical] = UNDEFINED
        if validator is not None:
            self._validators[canonical] = validator
        else:
            self._validators.pop(canonical, None)

        for alias in spec.aliases:
            folded = self._fold(alias)
            if folded in self._specs:
                errors.append(InvalidOptionError(alias, "is already a variable name"))
                continue
            self._aliases[folded] = canonical

        if spec.command_triggers is True:
            tokens = [f"-{name}", *(f"-{alias}" for alias in spec.aliases)]
        elif spec.command_triggers is False:
            tokens = []
        else:
            tokens = list(spec.command_triggers)
        for token in tokens:
            self._triggers[self._fold(token)] = canonical

        for error in errors:
            self.report(error)

        logger.debug(
            "Defined variable %r (aliases=%s, triggers=%s)", canonical, list(spec.aliases), tokens
        )
        self.reset(canonical)
        return canonical

    def add_alias(self, alias: str, target: str) -> bool:
        """Point *alias* at *target*, which does not have to be defined yet.

        Lookups through the alias fail until *target* is defined. Returns
        False (after reporting) when *alias* is already a variable name.
        """
        folded = self._fold(alias)
        if folded in self._specs:
            self.report(InvalidOptionError(alias, "is already a variable name"))
            return False
        self._aliases[folded] = self._fold(target)
        return True

    # -- Values -------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Return the current value, or ``None`` when the variable has no value.

        A value of ``0``, ``""`` or ``False`` is returned as-is; use
        :meth:`has_value` to tell an absent value from ``None``.
        """
        value = self._values[self._require(name)]
        return None if value is UNDEFINED else value

    def has_value(self, name: str) -> bool:
        return self._values[self._require(name)] is not UNDEFINED

    def set(self, name: str, value: Any) -> Any:
        """Assign *value* and run the change-hook, if any.

        ``None`` clears the value. Returns the change-hook's result, or
        ``True`` when no hook is bound. No validation happens here.
        """
        canonical = self._require(name)
        absent = value is None or value is UNDEFINED
        self._values[canonical] = UNDEFINED if absent else value

        hook = self._specs[canonical].on_change
        if hook is not None:
            return hook(self, canonical, None if absent else value)
        return True

    def reset(self, name: str) -> Any:
        """Set the variable back to its default value (or absent if it has none)."""
        canonical = self._require(name)
        return self.set(canonical, self._specs[canonical].default)

    def validate(self, name: str, value: Any) -> bool:
        """Check *value* against the variable's validator. No validator means valid."""
        canonical = self._require(name)
        validator = self._validators.get(canonical)
        if validator is None:
            return True
        return validator(canonical, value)

    def as_dict(self) -> dict[str, Any]:
        """Snapshot of canonical name to value; absent values are ``None``."""
        return {
            name: (None if value is UNDEFINED else value) for name, value in self._values.items()
        }

    # -- Ingestion ----------------------------------------------------------

    def parse_file(self, source: str | os.PathLike[str] | TextIO | Iterable[str]) -> ParseResult:
        """Read variables from a config file path or an open text stream."""
        from ._file_reader import ConfigFileReader

        return ConfigFileReader(self).parse(source)

    def parse_args(self, argv: list[Any]) -> ParseResult:
        """Read variables from command-line arguments, consuming them from *argv*."""
        from ._cmdline import CommandLineParser

        return CommandLineParser(self).parse(argv)

    # -- Errors -------------------------------------------------------------

    def report(self, error: ConfigError) -> None:
        """Send a recoverable error to the configured sink (or the log)."""
        handler = self.settings.error
        if handler is not None:
            handler(error)
        else:
            logger.warning("%s", error)

    # -- Debugging ----------------------------------------------------------

    def dump(self) -> str:
        """Human-readable listing of settings, variables, aliases and triggers."""
        lines = []
        for hook in ("file_parse", "line_parse", "cmd_parse", "arg_parse", "error"):
            value = getattr(self.settings, hook)
            lines.append(f"{hook:<10} => {value if value is not None else '<none>'}")
        lines.append(
            f"{'case':<10} => {'sensitive' if self.settings.case_sensitive else 'insensitive'}"
        )

        lines.append("VARIABLES")
        for name, spec in self._specs.items():
            lines.append(f"  {name}")
            lines.append(f"    {'value':<9}: {self._display(self._values[name])}")
            lines.append(f"    {'default':<9}: {self._display(spec.default)}")
            lines.append(f"    {'validator':<9}: {self._display(self._validators.get(name))}")
            lines.append(f"    {'argument':<9}: {'required' if spec.argument_required else 'none'}")

        lines.append("ALIASES")
        for alias, target in self._aliases.items():
            lines.append(f"    {alias:<12} => {target}")

        lines.append("TRIGGERS")
        for token, target in self._triggers.items():
            lines.append(f"    {token:<12} => {target}")

        return "\n".join(lines)

    @staticmethod
    def _display(value: Any) -> str:
        return "<none>" if value is None or value is UNDEFINED else str(value)
