# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scaffold injection around a classified script."""

import logging
from dataclasses import dataclass

from goscript.scanner import scan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportEntry:
    """Represent one dot-imported namespace.

    Attributes:
        namespace: Go import path.
        symbol: Exported member referenced once so the import counts as used.
    """

    namespace: str
    symbol: str


STANDARD_IMPORTS: tuple[ImportEntry, ...] = (
    ImportEntry("fmt", "Printf"),
    ImportEntry("os", "Exit"),
    ImportEntry("strings", "Contains"),
    ImportEntry("math", "Abs"),
    ImportEntry("strconv", "Atoi"),
    ImportEntry("time", "Sleep"),
)
HELPER_IMPORT = ImportEntry("github.com/daviddengcn/gosl/builtin", "Exec")
DEFAULT_IMPORTS: tuple[ImportEntry, ...] = STANDARD_IMPORTS + (HELPER_IMPORT,)

PACKAGE_CLAUSE = b"package main;"
CLOSING = b"\n}\n"


def package_header(imports: tuple[ImportEntry, ...]) -> bytes:
    """Render the package clause and dot-imports on a single line."""
    parts = [PACKAGE_CLAUSE]
    for entry in imports:
        parts.append(f' import . "{entry.namespace}";'.encode("utf-8"))
    return b"".join(parts)


def entry_head(imports: tuple[ImportEntry, ...]) -> bytes:
    """Render ``init`` and the opening of ``main``.

    ``init`` shifts the program name out of ``Args`` and touches one symbol
    per import.
    """
    uses = "".join(f" _ = {entry.symbol};" for entry in imports)
    return f"func init() {{ Args = Args[1:];{uses} }}; func main() {{ ".encode("utf-8")


def assemble_source(
    source: bytes, imports: tuple[ImportEntry, ...] = DEFAULT_IMPORTS
) -> bytes:
    """Build a complete Go compilation unit from a script.

    Header and entry head carry no newlines, so line N of the script stays
    line N of the result.

    Args:
        source: Raw script bytes.
        imports: Namespaces dot-imported into the program.

    Returns:
        Assembled source ready for the compiler.
    """
    result = scan(source)
    code = bytearray(package_header(imports))
    for line in result.prologue:
        code += line
        code += b"\n"
    code += entry_head(imports)
    if result.body is not None:
        code += result.body
    code += CLOSING
    logger.debug(
        f"Assembled source (input_bytes={len(source)} output_bytes={len(code)} "
        f"stage={result.stage.value})"
    )
    return bytes(code)
