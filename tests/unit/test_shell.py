# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the shell adapter."""

import io

from goscript.runner import ProcessRunner, RunnerConfig
from goscript.shell import Shell


def test_shell_001_eval_strips_trailing_newline() -> None:
    assert Shell(ProcessRunner()).eval("echo hello") == "hello"


def test_shell_002_eval_supports_pipelines_and_format_arguments() -> None:
    shell = Shell(ProcessRunner())

    assert shell.eval("printf 'b\\na\\n' | sort | head -n %d", 1) == "a"


def test_shell_003_run_returns_exit_code() -> None:
    result = Shell(ProcessRunner()).run("exit %d", 4)

    assert result.exit_code == 4
    assert result.error is not None
    assert result.command == ("bash", "-c", "exit 4")


def test_shell_004_run_with_stdout_captures_output() -> None:
    result = Shell(ProcessRunner()).run_with_stdout("echo one; echo two")

    assert result.error is None
    assert result.stdout == "one\ntwo\n"


def test_shell_005_dry_run_reports_command_line() -> None:
    diagnostics = io.StringIO()
    shell = Shell(ProcessRunner(RunnerConfig(dry_run=True), diagnostics=diagnostics))

    assert shell.eval("rm -rf %s", "/nonexistent") == ""
    result = shell.run("exit 9")

    assert result.exit_code == 0
    assert diagnostics.getvalue() == (
        "BashWithStdout: bash -c 'rm -rf /nonexistent'\n"
        "Bash: bash -c 'exit 9'\n"
    )


def test_shell_006_custom_shell_executable() -> None:
    shell = Shell(ProcessRunner(), executable="sh")

    assert shell.eval("echo $0") == "sh"
