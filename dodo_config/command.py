"""The ``config`` command: listing and validating backdrop configuration."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from .config import BackdropLoadError, get_all_backdrops
from .configuration import default_config_files

NAME = "config"

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command and its subcommands."""
    parser = argparse.ArgumentParser(prog=NAME, description="Config plugin subcommands")
    sub = parser.add_subparsers(dest="subcommand")

    list_cmd = sub.add_parser("list", help="List available backdrop configurations")
    list_cmd.set_defaults(run=_run_list)

    validate = sub.add_parser(
        "validate", help="Validate configuration files for syntax errors"
    )
    validate.add_argument("files", nargs="+", metavar="FILE")
    validate.set_defaults(run=_run_validate)

    return parser


def _run_list(args: argparse.Namespace) -> int:
    try:
        backdrops = get_all_backdrops(*default_config_files())
    except BackdropLoadError as err:
        log.error("%s", err)
        backdrops = err.backdrops

    for name in backdrops:
        print(name)
    return 0


def _run_validate(args: argparse.Namespace) -> int:
    try:
        get_all_backdrops(*args.files)
    except BackdropLoadError as err:
        message = str(err).replace(os.getcwd() + os.sep, "")
        print(f"{message}\n")
        return 0

    print("configuration is valid!")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the process exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    if getattr(args, "run", None) is None:
        parser.print_help()
        return 0
    return args.run(args)


if __name__ == "__main__":
    sys.exit(main())