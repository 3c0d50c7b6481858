# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line entry point that builds and runs a Go script."""

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, TextIO

from rich.console import Console
from rich.logging import RichHandler

from goscript.build import DEFAULT_COMPILER, BuildError, Options, process
from goscript.paths import is_file
from goscript.runner import ProcessRunner, RunnerConfig
from goscript.scaffold import (
    DEFAULT_IMPORTS,
    HELPER_IMPORT,
    STANDARD_IMPORTS,
    ImportEntry,
)

logger = logging.getLogger(__name__)

FAILURE_EXIT_CODE: int = 255
USAGE_EXIT_CODE: int = 2
INLINE_SCRIPT_NAME: str = "noname"


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure application logging with Rich handler on stderr.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
            )
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(
        prog="goscript",
        description="Run a Go script: boilerplate is added, then it is compiled and run.",
    )
    parser.add_argument(
        "--showsource", action="store_true", help="Show generated source code."
    )
    parser.add_argument(
        "--noclean", action="store_true", help="No cleaning of generated files."
    )
    parser.add_argument("--src", default="", help="Source code.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the compile and run commands instead of executing them.",
    )
    parser.add_argument(
        "--compiler", default=DEFAULT_COMPILER, help="Go toolchain executable."
    )
    parser.add_argument(
        "--helper-package",
        default=HELPER_IMPORT.namespace,
        help="Import path of the process helper package.",
    )
    parser.add_argument(
        "--no-helper",
        action="store_true",
        help="Do not import the process helper package.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument("script", nargs="?", help="Script file.")
    parser.add_argument(
        "args", nargs=argparse.REMAINDER, help="Arguments passed to the script."
    )
    return parser


def run(argv: list[str], stdin: BinaryIO, stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    A script that exits non-zero ends the process with its exit code through
    ``SystemExit``.

    Args:
        argv: CLI arguments.
        stdin: Standard input, read when no script is given.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return USAGE_EXIT_CODE
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    script_args: list[str] = list(args.args)
    try:
        source, script_path = _read_script(args=args, stdin=stdin)
    except OSError as exc:
        logger.warning(f"Failed to read script (script={args.script} error={exc})")
        stderr.write(f"Failed: {exc}\n")
        return FAILURE_EXIT_CODE
    if args.src and args.script is not None:
        script_args.insert(0, args.script)

    options = Options(
        show_source=args.showsource,
        no_clean=args.noclean,
        compiler=args.compiler,
        imports=select_imports(
            helper_package=args.helper_package, no_helper=args.no_helper
        ),
    )
    runner = ProcessRunner(RunnerConfig(dry_run=args.dry_run), diagnostics=stderr)
    try:
        process(source, script_path, script_args, options, runner=runner, stdout=stdout)
    except BuildError as exc:
        stderr.write(f"Failed: {exc}\n")
        return FAILURE_EXIT_CODE
    return 0


def select_imports(helper_package: str, no_helper: bool) -> tuple[ImportEntry, ...]:
    """Build the import table from CLI settings.

    Args:
        helper_package: Import path of the helper package.
        no_helper: Leave the helper package out.

    Returns:
        Ordered import table.
    """
    if no_helper:
        return STANDARD_IMPORTS
    if helper_package == HELPER_IMPORT.namespace:
        return DEFAULT_IMPORTS
    return STANDARD_IMPORTS + (ImportEntry(helper_package, HELPER_IMPORT.symbol),)


def _read_script(args: argparse.Namespace, stdin: BinaryIO) -> tuple[bytes, Path]:
    """Read the script from ``--src``, a file or stdin.

    Raises:
        OSError: If the script cannot be read.
    """
    if args.src:
        return args.src.encode("utf-8"), Path(INLINE_SCRIPT_NAME)
    if args.script is None:
        return stdin.read(), Path(INLINE_SCRIPT_NAME)
    script_path = Path(args.script)
    if not is_file(script_path):
        raise FileNotFoundError(f"script not found: {script_path}")
    return script_path.read_bytes(), script_path


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(
        sys.argv[1:], stdin=sys.stdin.buffer, stdout=sys.stdout, stderr=sys.stderr
    )
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
