# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the process runner."""

import io
import signal
from pathlib import Path

import pytest

from goscript.runner import (
    DEFAULT_EXIT_CODE,
    NormalExit,
    ProcessExitError,
    ProcessRunner,
    ProcessSpawnError,
    RunnerConfig,
    SignalTerminated,
    SpawnFailed,
    exit_code,
    must_succeed,
    render,
    succeeded,
    termination_from_returncode,
)


def test_run_001_missing_executable_reports_error_with_zero_code() -> None:
    result = ProcessRunner().run("not-an-executable-xyz", [])

    assert isinstance(result.termination, SpawnFailed)
    assert isinstance(result.error, ProcessSpawnError)
    assert result.exit_code == 0
    assert not succeeded(result.error, result.exit_code)


def test_run_002_dry_run_reports_and_skips_execution(tmp_path: Path) -> None:
    diagnostics = io.StringIO()
    runner = ProcessRunner(RunnerConfig(dry_run=True), diagnostics=diagnostics)
    marker = tmp_path / "marker"

    result = runner.exec("touch", str(marker), "two words")

    assert result.error is None
    assert result.exit_code == 0
    assert not marker.exists()
    assert diagnostics.getvalue() == f"Exec: touch {marker} 'two words'\n"


def test_run_003_dry_run_skips_missing_executables() -> None:
    diagnostics = io.StringIO()
    runner = ProcessRunner(RunnerConfig(dry_run=True), diagnostics=diagnostics)

    result = runner.exec_with_stdout("not-an-executable-xyz", "--flag")

    assert result.error is None
    assert result.exit_code == 0
    assert result.stdout == ""
    assert diagnostics.getvalue().startswith("ExecWithStdout: not-an-executable-xyz")


def test_run_004_capture_stdout_and_eval() -> None:
    runner = ProcessRunner()

    result = runner.exec_with_stdout("printf", "hello\\r\\n\\n")

    assert result.error is None
    assert result.stdout == "hello\r\n\n"
    assert runner.eval("printf", "hello\\r\\n\\n") == "hello"


def test_run_005_capture_both_streams_independently() -> None:
    result = ProcessRunner().exec_with_stderr_out("sh", "-c", "echo out; echo err >&2")

    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert result.error is None


def test_run_006_non_zero_exit_is_an_error_with_its_code() -> None:
    result = ProcessRunner().exec("sh", "-c", "exit 7")

    assert result.termination == NormalExit(code=7)
    assert result.exit_code == 7
    assert isinstance(result.error, ProcessExitError)
    assert result.error.exit_code == 7
    assert result.error.signal is None


def test_run_007_signal_termination_maps_to_shell_status() -> None:
    result = ProcessRunner().exec("sh", "-c", "kill -TERM $$")

    assert result.termination == SignalTerminated(signal=signal.SIGTERM)
    assert result.exit_code == 128 + signal.SIGTERM
    assert isinstance(result.error, ProcessExitError)
    assert result.error.signal == signal.SIGTERM


def test_run_008_exit_code_over_termination_variants() -> None:
    assert exit_code(NormalExit(code=0)) == 0
    assert exit_code(NormalExit(code=42)) == 42
    assert exit_code(SignalTerminated(signal=9)) == 137
    assert exit_code(SpawnFailed(error=FileNotFoundError(2, "missing"))) == 0
    assert termination_from_returncode(-2) == SignalTerminated(signal=2)
    assert termination_from_returncode(3) == NormalExit(code=3)


def test_run_009_render_formats_only_with_arguments() -> None:
    assert render(123) == "123"
    assert render("a%db", 123) == "a123b"
    assert render("100%") == "100%"
    assert render(Path("/tmp/x")) == "/tmp/x"


def test_run_010_succeeded_ignores_code_without_error() -> None:
    assert succeeded(None, 0)
    assert succeeded(None, 1)
    assert not succeeded(RuntimeError("boom"), 0)


def test_run_011_must_succeed_returns_on_success() -> None:
    stderr = io.StringIO()

    must_succeed(None, 0, stderr=stderr)
    must_succeed(None, 1, stderr=stderr)

    assert stderr.getvalue() == ""


def test_run_012_must_succeed_exits_with_code_message() -> None:
    stderr = io.StringIO()

    with pytest.raises(SystemExit) as exc_info:
        must_succeed(RuntimeError("boom"), 3, stderr=stderr)

    assert exc_info.value.code == DEFAULT_EXIT_CODE
    assert stderr.getvalue() == "Failed with error code: 3\n"


def test_run_013_must_succeed_exits_with_error_message() -> None:
    stderr = io.StringIO()
    result = ProcessRunner().run("not-an-executable-xyz")

    with pytest.raises(SystemExit) as exc_info:
        must_succeed(result.error, result.exit_code, stderr=stderr)

    assert exc_info.value.code == DEFAULT_EXIT_CODE
    assert stderr.getvalue().startswith("Failed with error: not-an-executable-xyz")


def test_run_014_null_byte_argument_is_a_spawn_failure() -> None:
    result = ProcessRunner().run("echo", ["a\0b"])

    assert isinstance(result.termination, SpawnFailed)
    assert isinstance(result.error, ProcessSpawnError)
    assert result.exit_code == 0
    assert "embedded null byte" in str(result.error)


def test_run_015_captured_output_replaces_invalid_utf8() -> None:
    result = ProcessRunner().exec_with_stdout("printf", "a\\377b")

    assert result.error is None
    assert result.stdout == "a\ufffdb"
