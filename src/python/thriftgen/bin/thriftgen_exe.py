# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""The `thriftgen` command: regenerate thrift bindings for whatever changed since the last run.

Run `thriftgen --help`.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from thriftgen.base.exceptions import OutputDirectoryError, ThriftGenException
from thriftgen.fs.paths import to_path
from thriftgen.init.logging import initialize_logging
from thriftgen.invalidation.build_invalidator import BuildInvalidator
from thriftgen.option.config import Config, ConfigSource
from thriftgen.thrift import options
from thriftgen.util.dirutil import rm_rf
from thriftgen.util.logging import LogLevel
from thriftgen.util.strutil import pluralize
from thriftgen.version import THRIFTGEN_SEMVER

logger = logging.getLogger(__name__)

THRIFTGEN_SUCCEEDED_EXIT_CODE = 0
THRIFTGEN_FAILED_EXIT_CODE = 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thriftgen",
        description="Compile thrift IDL sources that changed since the last successful run.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        action="append",
        help=(
            f"A TOML config file; may be repeated, later files override earlier ones. "
            f"Defaults to {options.DEFAULT_CONFIG_FILE} in the base directory."
        ),
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="The directory relative paths are resolved against. Defaults to the cwd.",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Forget the recorded inputs and recompile every source.",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Delete the thrift output directory and the recorded inputs, then exit.",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=LogLevel,
        choices=list(LogLevel),
        default=LogLevel.INFO,
        metavar="{" + ",".join(level.value for level in LogLevel) + "}",
        help="The log level.",
    )
    parser.add_argument(
        "--print-stacktrace",
        action="store_true",
        help="Print the full exception stack trace for any errors.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {THRIFTGEN_SEMVER}")
    return parser


def run(args: argparse.Namespace) -> None:
    base_dir = to_path(args.base_dir or os.getcwd(), os.getcwd())
    config_files = [to_path(path, base_dir) for path in args.config or ()] or [
        base_dir / options.DEFAULT_CONFIG_FILE
    ]
    config = Config.load(
        [ConfigSource.read(path) for path in config_files],
        seed_values={"buildroot": str(base_dir)},
    )
    task = options.create_task(config, base_dir)
    invalidator = BuildInvalidator(options.workdir(config, base_dir))

    if args.clean:
        invalidator.force_invalidate_all()
        output_dir = task.config().output_dir
        try:
            rm_rf(output_dir)
        except OSError as e:
            raise OutputDirectoryError(output_dir, "delete") from e
        logger.info(f"Removed {output_dir}.")
        return

    if args.full:
        invalidator.force_invalidate_all()
    compiled = task.execute(invalidator)
    if compiled:
        logger.info(f"Compiled {pluralize(len(compiled), 'thrift source')}.")
    else:
        logger.info("Thrift sources are up to date.")


def main(argv: Sequence[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    with initialize_logging(args.level, print_stacktrace=args.print_stacktrace):
        try:
            run(args)
        except KeyboardInterrupt as e:
            print(f"Interrupted by user:\n{e}", file=sys.stderr)
            return THRIFTGEN_FAILED_EXIT_CODE
        except ThriftGenException as e:
            logger.error(str(e), exc_info=args.print_stacktrace)
            return THRIFTGEN_FAILED_EXIT_CODE
    return THRIFTGEN_SUCCEEDED_EXIT_CODE


def console_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    console_main()
