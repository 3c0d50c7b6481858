# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Line classification of script source into directive, import and body stages."""

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DIRECTIVE_MARKER = b"#"
IMPORT_KEYWORD = b"import "
LINE_COMMENT = b"//"


class ScanStage(enum.Enum):
    """Represent the position of the scanner in a script."""

    READY = "ready"
    IMPORT = "import"
    MAIN = "main"


@dataclass(frozen=True)
class ScanResult:
    """Represent a classified script.

    Attributes:
        prologue: Lines before the body, without terminators. Directive lines
            are kept as empty lines so line numbers do not shift.
        body: Verbatim remainder of the script starting at the first body
            line; ``None`` when the script has no body.
        stage: Stage the scanner ended in.
    """

    prologue: tuple[bytes, ...]
    body: bytes | None
    stage: ScanStage


def advance_stage(stage: ScanStage, line: bytes) -> ScanStage:
    """Classify one non-empty line.

    A ``READY`` line that is not a directive is classified again as an
    ``IMPORT`` line, so no line leaves this function unclassified.

    Args:
        stage: Stage before the line.
        line: Line content without its terminator.

    Returns:
        Stage after the line.
    """
    if stage is ScanStage.READY:
        if line.startswith(DIRECTIVE_MARKER):
            return ScanStage.READY
        stage = ScanStage.IMPORT
    if stage is ScanStage.IMPORT:
        trimmed = line.strip()
        if (
            trimmed
            and not trimmed.startswith(IMPORT_KEYWORD)
            and not trimmed.startswith(LINE_COMMENT)
        ):
            return ScanStage.MAIN
    return stage


def scan(source: bytes) -> ScanResult:
    """Split a script into its prologue and body.

    Args:
        source: Raw script bytes.

    Returns:
        Classification result.
    """
    prologue: list[bytes] = []
    stage = ScanStage.READY
    pos = 0
    while pos < len(source):
        end = source.find(b"\n", pos)
        if end < 0:
            line = source[pos:]
            next_pos = len(source)
        else:
            line = source[pos:end]
            next_pos = end + 1

        if line:
            stage = advance_stage(stage, line)
            if stage is ScanStage.MAIN:
                logger.debug(f"Body starts (offset={pos} lines_before={len(prologue)})")
                return ScanResult(prologue=tuple(prologue), body=source[pos:], stage=stage)
            if stage is ScanStage.READY:
                line = b""
        prologue.append(line)
        pos = next_pos

    logger.debug(f"Script has no body (lines={len(prologue)} stage={stage.value})")
    return ScanResult(prologue=tuple(prologue), body=None, stage=stage)
