"""
Configuration for a small backup tool using the registry.

Reads ``~/.backuprc`` and then the command line, with defaults taken from
the ``BACKUP_OPTS`` environment variable:

    # ~/.backuprc
    host       laptop
    target   = ~/backups/$(host)
    compress
    keep       7

    $ BACKUP_OPTS="-v" python backup_tool.py -keep 14 /home/abw/src
"""

import os
import sys

from appconfig import AppConfig, Choices, Registry


# ============================================================================
# Declarations
# ============================================================================

def build_registry() -> Registry:
    """Declare every variable the tool understands."""
    registry = Registry(
        cmd_env="BACKUP_OPTS",
        global_options={"command_triggers": True},
    )

    registry.define("verbose", aliases="v")
    registry.define("compress", aliases="z")
    registry.define("host", default="localhost", argument_required=True)
    registry.define("target", default="~/backups", argument_required=True)
    registry.define("keep", default="5", validator=r"^\d+$", argument_required=True)
    registry.define(
        "method",
        default="tar",
        validator=Choices(["tar", "rsync"]),
        argument_required=True,
        command_triggers=["-m", "-method"],
    )
    return registry


# ============================================================================
# Typed view
# ============================================================================

class BackupConfig(AppConfig):
    verbose: bool = False
    compress: bool = False
    host: str
    target: str
    keep: int
    method: str


def main(argv: list[str]) -> int:
    registry = build_registry()

    rc_file = os.path.expanduser("~/.backuprc")
    if os.path.exists(rc_file):
        registry.parse_file(rc_file)
    result = registry.parse_args(argv)

    if result.errors:
        for error in result.errors:
            print(f"backup: {error}", file=sys.stderr)
        return 2

    cfg = BackupConfig.from_registry(registry)
    if cfg.verbose:
        print(registry.dump())

    print(f"backing up {argv or ['.']} to {cfg.target} with {cfg.method}, keeping {cfg.keep}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
