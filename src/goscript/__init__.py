# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for goscript components."""

from goscript.build import (
    BuildError,
    CompileError,
    Options,
    ScriptRunError,
    ScriptWriteError,
    process,
)
from goscript.runner import (
    ExecResult,
    IOMode,
    ProcessRunner,
    RunnerConfig,
    must_succeed,
    succeeded,
)
from goscript.scaffold import DEFAULT_IMPORTS, ImportEntry, assemble_source
from goscript.scanner import ScanStage, scan
from goscript.shell import Shell

__all__ = [
    "BuildError",
    "CompileError",
    "DEFAULT_IMPORTS",
    "ExecResult",
    "IOMode",
    "ImportEntry",
    "Options",
    "ProcessRunner",
    "RunnerConfig",
    "ScanStage",
    "ScriptRunError",
    "ScriptWriteError",
    "Shell",
    "assemble_source",
    "must_succeed",
    "process",
    "scan",
    "succeeded",
]
