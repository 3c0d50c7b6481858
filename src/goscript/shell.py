# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Shell command lines on top of the process runner."""

import logging

from goscript.runner import (
    Displayable,
    ExecResult,
    IOMode,
    ProcessRunner,
    render,
    strip_line_terminators,
)

logger = logging.getLogger(__name__)

DEFAULT_SHELL: str = "bash"


class Shell:
    """Run command lines through ``<shell> -c``."""

    def __init__(self, runner: ProcessRunner, executable: str = DEFAULT_SHELL) -> None:
        """Initialize adapter.

        Args:
            runner: Runner used for every invocation, dry-run setting included.
            executable: Shell program.
        """
        self._runner = runner
        self._executable = executable

    def run(self, command: Displayable, *args: object) -> ExecResult:
        """Run a command line with the caller's stdio.

        Args:
            command: Command line, or a ``%`` format string when ``args`` are
                given.
            *args: Format arguments.

        Returns:
            Invocation result.
        """
        return self._runner.run(
            self._executable, ["-c", render(command, *args)], IOMode.INHERITED, label="Bash"
        )

    def run_with_stdout(self, command: Displayable, *args: object) -> ExecResult:
        """Run a command line with stdout captured."""
        return self._runner.run(
            self._executable,
            ["-c", render(command, *args)],
            IOMode.CAPTURE_STDOUT,
            label="BashWithStdout",
        )

    def eval(self, command: Displayable, *args: object) -> str:
        """Return a command line's stdout like shell command substitution."""
        return strip_line_terminators(self.run_with_stdout(command, *args).stdout)
