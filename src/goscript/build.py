# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Compile an assembled script into a temporary executable and run it."""

import contextlib
import logging
import secrets
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO

from goscript.paths import exists
from goscript.runner import ExecResult, IOMode, ProcessRunner
from goscript.scaffold import DEFAULT_IMPORTS, ImportEntry, assemble_source

logger = logging.getLogger(__name__)

TEMP_PREFIX: str = "goscript-"
SOURCE_SUFFIX: str = ".go"
EXECUTABLE_SUFFIX: str = ".exe"
DEFAULT_COMPILER: str = "go"


class BuildError(RuntimeError):
    """Represent a failure before the script could run to completion."""


class ScriptWriteError(BuildError):
    """Represent a failure to persist the assembled source."""


class CompileError(BuildError):
    """Represent a compiler failure."""

    def __init__(self, message: str, result: ExecResult) -> None:
        super().__init__(message)
        self.result = result


class ScriptRunError(BuildError):
    """Represent a built script that could not be started."""

    def __init__(self, message: str, result: ExecResult) -> None:
        super().__init__(message)
        self.result = result


@dataclass(frozen=True)
class Options:
    """Describe how one script is built and run.

    Attributes:
        show_source: Print the assembled source before compiling.
        no_clean: Keep the temporary source and executable.
        compiler: Go toolchain executable.
        imports: Namespaces dot-imported into the program.
        temp_dir: Directory for temporary artifacts; the platform default
            when ``None``.
    """

    show_source: bool = False
    no_clean: bool = False
    compiler: str = DEFAULT_COMPILER
    imports: tuple[ImportEntry, ...] = DEFAULT_IMPORTS
    temp_dir: Path | None = None


def source_basename(script_name: str) -> str:
    """Return the artifact suffix for a script name, ending in ``.go``."""
    if script_name.endswith(SOURCE_SUFFIX):
        return script_name
    return script_name + SOURCE_SUFFIX


def candidate_source_path(script_name: str, temp_dir: Path) -> Path:
    """Return one random temporary source path for a script."""
    token = secrets.token_hex(4)
    return temp_dir / f"{TEMP_PREFIX}{token}-{source_basename(script_name)}"


def executable_path(source_path: Path) -> Path:
    """Return the executable path built from a temporary source path."""
    return source_path.with_name(source_path.name + EXECUTABLE_SUFFIX)


def write_temp_source(code: bytes, script_name: str, temp_dir: Path | None = None) -> Path:
    """Write code to a fresh temporary source file.

    Names that already exist are skipped; the file is created exclusively so
    a name taken between the check and the write is skipped as well.

    Args:
        code: Assembled source.
        script_name: Base name of the script.
        temp_dir: Target directory; platform temporary directory when ``None``.

    Returns:
        Path of the written file.

    Raises:
        ScriptWriteError: If the file cannot be created or written.
    """
    directory = temp_dir if temp_dir is not None else Path(tempfile.gettempdir())
    while True:
        try:
            path = candidate_source_path(script_name, directory)
            if exists(path):
                continue
            with path.open("xb") as handle:
                handle.write(code)
        except FileExistsError:
            continue
        except OSError as exc:
            logger.warning(f"Failed to write temporary source (directory={directory} error={exc})")
            raise ScriptWriteError(f"cannot write temporary source: {exc}") from exc
        logger.debug(f"Wrote temporary source (path={path} bytes={len(code)})")
        return path


def script_argument(script_path: Path) -> str:
    """Return the absolute script path, or the path as given if it cannot be resolved."""
    try:
        return str(script_path.absolute())
    except OSError as exc:
        logger.debug(f"Cannot resolve script path (path={script_path} error={exc})")
        return str(script_path)


def process(
    source: bytes,
    script_path: Path,
    args: Sequence[str],
    options: Options | None = None,
    runner: ProcessRunner | None = None,
    stdout: TextIO | None = None,
) -> ExecResult:
    """Build and run a script.

    Temporary artifacts are removed on every exit path unless
    ``options.no_clean`` is set, including when the script exits non-zero.

    Args:
        source: Raw script bytes.
        script_path: Path the script was read from; names the artifacts and
            becomes ``Args[0]`` of the program.
        args: Arguments forwarded to the script.
        options: Build options.
        runner: Process runner; a default runner when ``None``.
        stdout: Stream for the ``show_source`` dump; ``sys.stdout`` when ``None``.

    Returns:
        Result of the script run, which exited with status ``0``.

    Raises:
        ScriptWriteError: If the source cannot be written.
        CompileError: If the compiler fails.
        ScriptRunError: If the built program cannot be started.
        SystemExit: With the script's exit code when it is non-zero.
    """
    options = options or Options()
    runner = runner or ProcessRunner()
    code = assemble_source(source, options.imports)
    if options.show_source:
        _show_source(code=code, stdout=stdout or sys.stdout)

    with contextlib.ExitStack() as cleanup:
        source_file = write_temp_source(code, script_path.name, options.temp_dir)
        if not options.no_clean:
            cleanup.callback(_remove_artifact, source_file)

        exe_file = executable_path(source_file)
        build = runner.run(
            options.compiler,
            ["build", "-o", str(exe_file), str(source_file)],
            IOMode.INHERITED,
            label="Build",
        )
        if build.error is not None:
            logger.warning(
                f"Compile failed (source={source_file} exit_code={build.exit_code} "
                f"error={build.error})"
            )
            raise CompileError(str(build.error), result=build)
        if not options.no_clean:
            cleanup.callback(_remove_artifact, exe_file)

        result = runner.run(
            exe_file,
            [script_argument(script_path), *args],
            IOMode.INHERITED,
            label="Run",
        )
        if result.exit_code != 0:
            logger.debug(f"Script exited (exit_code={result.exit_code})")
            raise SystemExit(result.exit_code)
        if result.error is not None:
            logger.warning(f"Script did not start (executable={exe_file} error={result.error})")
            raise ScriptRunError(str(result.error), result=result)
        return result


def _show_source(code: bytes, stdout: TextIO) -> None:
    try:
        stdout.write(code.decode("utf-8", errors="replace"))
        stdout.write("\n")
        stdout.flush()
    except (OSError, ValueError) as exc:
        logger.warning(f"Failed to print assembled source (error={exc})")


def _remove_artifact(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning(f"Failed to remove temporary file (path={path} error={exc})")
    else:
        logger.debug(f"Removed temporary file (path={path})")
