"""SDK Header Resolution.

This module locates the directory holding the SDK's public header, which
the raw-library strategy needs to synthesize a bundle.

Resolution Order:
    1. Tree search: any directory under the submodule (bounded depth)
       that contains the header file
    2. Conventional directories (e.g. sdk/, include/, sdk/macos/) relative
       to the submodule, first one that exists, is non-empty and holds
       the header
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from .path_probe import EntryKind, NamePattern, PathProbe

DEFAULT_HEADER_DIRS = ("sdk", "include", "sdk/macos")


class HeaderResolver:
    """Resolves the public header directory of an SDK submodule."""

    def __init__(
        self,
        header_name: str = "parsec.h",
        search_depth: int = 4,
        conventional_dirs: Sequence[str] = DEFAULT_HEADER_DIRS,
    ):
        """Initialize header resolver.

        Args:
            header_name: File name of the SDK's public header
            search_depth: Maximum depth of the tree search
            conventional_dirs: Fallback directories relative to the submodule root
        """
        self.header_name = header_name
        self.search_depth = search_depth
        self.conventional_dirs = tuple(conventional_dirs)

    def resolve_headers(self, submodule_root: Path) -> Optional[Path]:
        """Find the directory that contains the public header.

        Args:
            submodule_root: Root of the SDK submodule

        Returns:
            Directory containing the header, or None if it cannot be found
        """
        header = self.locate_header_file(submodule_root, self.search_depth)
        if header is not None:
            logging.debug(f"Header {self.header_name} found by tree search: {header}")
            return header.parent

        for rel_dir in self.conventional_dirs:
            candidate = submodule_root / rel_dir
            if not candidate.is_dir() or not PathProbe.list_children(candidate):
                continue
            if (candidate / self.header_name).is_file():
                logging.debug(f"Header {self.header_name} found in conventional directory: {candidate}")
                return candidate

        return None

    def locate_header_file(self, root: Path, max_depth: int) -> Optional[Path]:
        """Find the header file itself under root.

        Args:
            root: Directory to search
            max_depth: Maximum search depth

        Returns:
            Path to the header file, or None
        """
        return PathProbe.find(root, [NamePattern(self.header_name, EntryKind.FILE)], max_depth)
