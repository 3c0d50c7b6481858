# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""External process execution with exit status extraction and dry-run support."""

import enum
import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from typing import Protocol, Sequence, TextIO

logger = logging.getLogger(__name__)

DEFAULT_EXIT_CODE: int = 1
SIGNAL_EXIT_BASE: int = 128


class Displayable(Protocol):
    """Anything that can render itself as a display string."""

    def __str__(self) -> str: ...


def render(value: Displayable, *args: object) -> str:
    """Render a value as a string.

    Args:
        value: Value to render. Treated as a ``%`` format string when ``args``
            are given.
        *args: Optional format arguments.

    Returns:
        Rendered text.
    """
    text = str(value)
    if args:
        return text % args
    return text


class IOMode(enum.Enum):
    """Select how the child's output streams are connected."""

    INHERITED = "inherited"
    CAPTURE_STDOUT = "capture_stdout"
    CAPTURE_BOTH = "capture_both"


@dataclass(frozen=True)
class NormalExit:
    """The process exited on its own with ``code``."""

    code: int


@dataclass(frozen=True)
class SignalTerminated:
    """The process was killed by ``signal``."""

    signal: int


@dataclass(frozen=True)
class SpawnFailed:
    """The process could not be started."""

    error: OSError | ValueError


Termination = NormalExit | SignalTerminated | SpawnFailed


class ProcessError(RuntimeError):
    """Represent a failed process invocation."""


class ProcessExitError(ProcessError):
    """Represent a process that ended with a non-zero status or a signal."""

    def __init__(self, command: Sequence[str], exit_code: int, signal: int | None = None) -> None:
        if signal is None:
            message = f"{shlex.join(command)}: exit status {exit_code}"
        else:
            message = f"{shlex.join(command)}: terminated by signal {signal}"
        super().__init__(message)
        self.command = tuple(command)
        self.exit_code = exit_code
        self.signal = signal


class ProcessSpawnError(ProcessError):
    """Represent a process that could not be started."""

    def __init__(self, command: Sequence[str], cause: OSError | ValueError) -> None:
        reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else cause
        super().__init__(f"{shlex.join(command)}: {reason}")
        self.command = tuple(command)
        self.cause = cause


def termination_from_returncode(returncode: int) -> Termination:
    """Map a ``subprocess`` return code to a termination variant.

    Negative return codes are POSIX signal terminations.
    """
    if returncode < 0:
        return SignalTerminated(signal=-returncode)
    return NormalExit(code=returncode)


def exit_code(termination: Termination) -> int:
    """Extract the numeric exit status of a termination.

    Args:
        termination: How the process ended.

    Returns:
        The exit code; ``128 + signal`` for signalled processes and ``0`` when
        the process never started.
    """
    if isinstance(termination, NormalExit):
        return termination.code
    if isinstance(termination, SignalTerminated):
        # Shell encoding. Go's WaitStatus.ExitStatus() would give -1 here.
        return SIGNAL_EXIT_BASE + termination.signal
    return 0


@dataclass(frozen=True)
class ExecResult:
    """Represent the outcome of one process invocation.

    ``error`` can be set while ``exit_code`` is ``0``: a process that could
    not be started has no exit status. Check ``error`` to detect failure.

    Attributes:
        command: Executable and arguments as run.
        termination: How the process ended.
        stdout: Captured standard output; empty when not captured. Decoded
            as UTF-8 with invalid bytes replaced by U+FFFD, so binary output
            is not preserved.
        stderr: Captured standard error; empty when not captured. Decoded
            like ``stdout``.
    """

    command: tuple[str, ...]
    termination: Termination
    stdout: str = ""
    stderr: str = ""

    @property
    def exit_code(self) -> int:
        return exit_code(self.termination)

    @property
    def error(self) -> ProcessError | None:
        termination = self.termination
        if isinstance(termination, SpawnFailed):
            return ProcessSpawnError(self.command, termination.error)
        if isinstance(termination, SignalTerminated):
            return ProcessExitError(self.command, self.exit_code, signal=termination.signal)
        if termination.code != 0:
            return ProcessExitError(self.command, termination.code)
        return None


@dataclass(frozen=True)
class RunnerConfig:
    """Process runner settings, fixed when the runner is built.

    Attributes:
        dry_run: Report commands instead of running them.
    """

    dry_run: bool = False


def strip_line_terminators(text: str) -> str:
    """Drop trailing carriage returns and line feeds."""
    return text.rstrip("\r\n")


class ProcessRunner:
    """Run external commands."""

    def __init__(
        self, config: RunnerConfig | None = None, diagnostics: TextIO | None = None
    ) -> None:
        """Initialize runner.

        Args:
            config: Runner settings; defaults to real execution.
            diagnostics: Stream for dry-run reports; defaults to ``sys.stderr``.
        """
        self._config = config or RunnerConfig()
        self._diagnostics = diagnostics

    @property
    def config(self) -> RunnerConfig:
        return self._config

    def run(
        self,
        executable: Displayable,
        args: Sequence[Displayable] = (),
        io_mode: IOMode = IOMode.INHERITED,
        label: str = "Exec",
    ) -> ExecResult:
        """Run a command and wait for it.

        Standard input is always inherited. Output streams are inherited or
        captured according to ``io_mode``.

        Args:
            executable: Program to run.
            args: Arguments passed to the program.
            io_mode: Output stream handling.
            label: Prefix of the dry-run report.

        Returns:
            Invocation result. Spawn failures are reported in the result, not
            raised.
        """
        command = tuple([render(executable), *(render(arg) for arg in args)])
        if self._config.dry_run:
            self._report(label=label, command=command)
            return ExecResult(command=command, termination=NormalExit(code=0))

        capture_stdout = io_mode in (IOMode.CAPTURE_STDOUT, IOMode.CAPTURE_BOTH)
        capture_stderr = io_mode is IOMode.CAPTURE_BOTH
        logger.debug(f"Running command (command={command} io_mode={io_mode.value})")
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE if capture_stdout else None,
                stderr=subprocess.PIPE if capture_stderr else None,
                check=False,
            )
        except (OSError, ValueError) as exc:
            logger.warning(f"Failed to start command (command={command} error={exc})")
            return ExecResult(command=command, termination=SpawnFailed(error=exc))

        termination = termination_from_returncode(completed.returncode)
        if completed.returncode != 0:
            logger.debug(
                f"Command failed (command={command} returncode={completed.returncode})"
            )
        return ExecResult(
            command=command,
            termination=termination,
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
        )

    def exec(self, executable: Displayable, *args: Displayable) -> ExecResult:
        """Run with the caller's stdio."""
        return self.run(executable, args, IOMode.INHERITED, label="Exec")

    def exec_with_stdout(self, executable: Displayable, *args: Displayable) -> ExecResult:
        """Run with stdout captured."""
        return self.run(executable, args, IOMode.CAPTURE_STDOUT, label="ExecWithStdout")

    def exec_with_stderr_out(
        self, executable: Displayable, *args: Displayable
    ) -> ExecResult:
        """Run with stdout and stderr captured."""
        return self.run(executable, args, IOMode.CAPTURE_BOTH, label="ExecWithStdErrOut")

    def eval(self, executable: Displayable, *args: Displayable) -> str:
        """Return the captured stdout of a command without trailing newlines."""
        return strip_line_terminators(self.exec_with_stdout(executable, *args).stdout)

    def _report(self, label: str, command: tuple[str, ...]) -> None:
        stream = self._diagnostics or sys.stderr
        stream.write(f"{label}: {shlex.join(command)}\n")


def _decode(data: bytes | None) -> str:
    if data is None:
        return ""
    return data.decode("utf-8", errors="replace")


def succeeded(error: BaseException | None, code: int = 0) -> bool:
    """Tell whether an invocation succeeded.

    Only ``error`` decides; ``code`` alone never signals failure.
    """
    return error is None


def must_succeed(
    error: BaseException | None, code: int = 0, stderr: TextIO | None = None
) -> None:
    """Exit the program when an invocation failed.

    Args:
        error: Error of the invocation.
        code: Exit code of the invocation.
        stderr: Stream for the failure message; defaults to ``sys.stderr``.

    Raises:
        SystemExit: With ``DEFAULT_EXIT_CODE`` when ``error`` is set.
    """
    if succeeded(error, code):
        return
    stream = stderr or sys.stderr
    if code != 0:
        stream.write(f"Failed with error code: {code}\n")
    else:
        stream.write(f"Failed with error: {error}\n")
    logger.warning(f"Required command failed (code={code} error={error})")
    raise SystemExit(DEFAULT_EXIT_CODE)
