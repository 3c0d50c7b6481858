"""Filesystem predicates."""

import logging
import os
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def _stat(path: str | os.PathLike[str]) -> os.stat_result | None:
    """Stat a path, returning ``None`` when it does not exist.

    Raises:
        OSError: For failures other than a missing path, such as permission
            errors.
    """
    try:
        return Path(path).stat()
    except (FileNotFoundError, NotADirectoryError):
        return None


def exists(path: str | os.PathLike[str]) -> bool:
    """Check whether a path exists."""
    return _stat(path) is not None


def is_dir(path: str | os.PathLike[str]) -> bool:
    """Check whether a path exists and is a directory."""
    info = _stat(path)
    return info is not None and stat.S_ISDIR(info.st_mode)


def is_file(path: str | os.PathLike[str]) -> bool:
    """Check whether a path exists and is not a directory."""
    info = _stat(path)
    return info is not None and not stat.S_ISDIR(info.st_mode)
