"""Build utilities for xcpack.

Filesystem helpers shared by the builder, the wrapper and the pipeline.
"""

import os
import shutil
import stat
import sys
import time
from pathlib import Path
from typing import Any, Callable


def remove_readonly(func: Callable[[str], None], path: str, excinfo: Any) -> None:
    """Error handler for shutil.rmtree that clears the read-only bit and retries.

    Built frameworks can contain read-only files (signed binaries, copied
    headers), which would otherwise abort the removal.
    """
    os.chmod(path, stat.S_IWRITE)
    func(path)


def safe_rmtree(path: Path, max_retries: int = 3) -> None:
    """
    Remove a directory tree, file or symlink if it exists.

    Args:
        path: Path to remove
        max_retries: Maximum number of attempts for trees that refuse to go

    Raises:
        OSError: If the path cannot be removed after all retries
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return

    if not path.exists():
        return

    for attempt in range(max_retries):
        try:
            if sys.version_info >= (3, 12):
                shutil.rmtree(path, onexc=remove_readonly)
            else:
                shutil.rmtree(path, onerror=remove_readonly)
            return
        except OSError as e:
            if attempt < max_retries - 1:
                time.sleep(0.5)
            else:
                raise OSError(
                    f"Failed to remove {path} after {max_retries} attempts: {e}"
                ) from e


def is_non_empty_dir(path: Path) -> bool:
    """Check that path is a directory with at least one entry."""
    if not path.is_dir():
        return False
    try:
        return any(path.iterdir())
    except OSError:
        return False


def tail(text: str, max_lines: int = 40) -> str:
    """Return the last max_lines lines of text."""
    lines = text.rstrip().splitlines()
    if len(lines) <= max_lines:
        return "\n".join(lines)
    omitted = len(lines) - max_lines
    return "\n".join([f"... ({omitted} lines omitted)"] + lines[-max_lines:])
