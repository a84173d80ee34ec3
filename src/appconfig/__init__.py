"""Application configuration variables from code, config files and the command line.

Declare variables on a ``Registry`` (defaults, aliases, validators, change
hooks, command-line triggers), then fill them from a config file and the
command line through one shared namespace.
"""

from ._version import __version__
from ._app_config import AppConfig
from ._cmdline import CommandLineParser
from ._environment import Environment, FakeEnvironment, OSEnvironment
from ._expander import expand
from ._file_reader import ConfigFileReader
from ._options import RegistrySettings, VariableSpec
from ._registry import Registry
from ._testing import capture_errors
from ._types import (
    FLAG_VALUE,
    UNDEFINED,
    ConfigError,
    FileOpenError,
    IngestionError,
    InvalidFlagError,
    InvalidOptionError,
    MissingArgumentError,
    NoSuchVariableError,
    NotInvocableError,
    ParseError,
    ParseResult,
    UndefinedVariableError,
    ValidationFailure,
)
from ._validators import Boolean, Choices, PatternValidator, PredicateValidator

__all__ = [
    "__version__",
    # Core
    "Registry",
    "RegistrySettings",
    "VariableSpec",
    "ConfigFileReader",
    "CommandLineParser",
    "expand",
    "ParseResult",
    "UNDEFINED",
    "FLAG_VALUE",
    # Errors
    "ConfigError",
    "NoSuchVariableError",
    "InvalidOptionError",
    "NotInvocableError",
    "IngestionError",
    "FileOpenError",
    "ParseError",
    "UndefinedVariableError",
    "ValidationFailure",
    "MissingArgumentError",
    "InvalidFlagError",
    # Validators
    "PatternValidator",
    "PredicateValidator",
    "Boolean",
    "Choices",
    # Typed snapshots
    "AppConfig",
    # Environment and testing
    "Environment",
    "OSEnvironment",
    "FakeEnvironment",
    "capture_errors",
]
