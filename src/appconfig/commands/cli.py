"""CLI for trying out config files and command lines against ad-hoc variables."""

from __future__ import annotations

import sys

import click

from .._registry import Registry
from .._types import ConfigError


def check_command(
    *,
    variables: list[str],
    flags: list[str],
    config_file: str | None = None,
    args: list[str] | None = None,
    case_sensitive: bool = False,
    cmd_env: str | None = None,
) -> tuple[Registry, list[str], list[ConfigError]]:
    """Define the given variables, then read the config file and arguments.

    Args:
        variables: ``NAME`` or ``NAME=DEFAULT`` specs for value-taking variables
        flags: Names of flag-style variables
        config_file: Optional config file to read first
        args: Command-line arguments to parse after the file
        case_sensitive: Treat variable names case-sensitively
        cmd_env: Environment variable holding default arguments

    Returns:
        The populated registry, the arguments left unconsumed, and every
        error reported along the way.
    """
    errors: list[ConfigError] = []
    registry = Registry(case_sensitive=case_sensitive, cmd_env=cmd_env, error=errors.append)

    for spec in variables:
        name, _, default = spec.partition("=")
        registry.define(
            name,
            default=default or None,
            argument_required=True,
            command_triggers=True,
        )
    for name in flags:
        registry.define(name, command_triggers=True)

    if config_file is not None:
        registry.parse_file(config_file)

    remaining = list(args or [])
    registry.parse_args(remaining)
    return registry, remaining, errors


@click.group("appconfig")
def appconfig_group():
    """Application configuration tools."""
    pass


@appconfig_group.command(
    "check",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option("--file", "config_file", type=click.Path(dir_okay=False), default=None)
@click.option(
    "--var",
    "variables",
    multiple=True,
    help="Define a value-taking variable: NAME or NAME=DEFAULT (repeatable)",
)
@click.option("--flag", "flags", multiple=True, help="Define a flag variable (repeatable)")
@click.option("--case-sensitive", is_flag=True, default=False, help="Case-sensitive names")
@click.option("--cmd-env", default=None, help="Environment variable with default arguments")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def check_cli(
    config_file: str | None,
    variables: tuple[str, ...],
    flags: tuple[str, ...],
    case_sensitive: bool,
    cmd_env: str | None,
    args: tuple[str, ...],
) -> None:
    """Read a config file and arguments, then print every variable.

    Each variable NAME is triggered on the command line by -NAME.

    Examples:\n
        appconfig check --var outdir --flag verbose -- -outdir /tmp -verbose\n
        appconfig check --var port=8000 --file server.conf\n
    """
    registry, remaining, errors = check_command(
        variables=list(variables),
        flags=list(flags),
        config_file=config_file,
        args=list(args),
        case_sensitive=case_sensitive,
        cmd_env=cmd_env,
    )

    for name, value in registry.as_dict().items():
        click.echo(f"{name} = {value if value is not None else '<none>'}")
    if remaining:
        click.echo(f"remaining: {' '.join(str(arg) for arg in remaining)}")

    for error in errors:
        click.secho(f"Error: {error}", fg="red", err=True)
    if errors:
        sys.exit(1)


def main() -> None:
    appconfig_group()
