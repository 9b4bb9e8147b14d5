# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Entry point for the ``fieldrules`` command line tool."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import ConfigurationError
from . import commands

logger = logging.getLogger("fieldrules.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldrules",
        description="Check records against declarative field rules.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate records from a JSON or YAML file")
    check.add_argument("records", type=Path, help="File holding one record or a list of records")
    check.add_argument("--record-type", "-t", required=True, help="Record type declared in the schema")
    check.add_argument("--schema", type=Path, default=None, help="Schema file (YAML or JSON)")
    check.add_argument("--format", choices=("text", "json"), default="text")
    check.set_defaults(func=commands.check_command)

    inspect = sub.add_parser("inspect", help="List record types and their date intervals")
    inspect.add_argument("--schema", type=Path, default=None, help="Schema file (YAML or JSON)")
    inspect.add_argument("--format", choices=("text", "json"), default="text")
    inspect.set_defaults(func=commands.inspect_command)

    return parser


def run_command(args: argparse.Namespace) -> int:
    """Run the handler bound to *args*, mapping configuration errors to exit 2."""

    try:
        code = args.func(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR
    return EXIT_OK if code is None else code


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_command(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
