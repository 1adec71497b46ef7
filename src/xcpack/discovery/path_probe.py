"""Bounded filesystem search.

This module provides the depth-limited search used to discover artifacts
inside an SDK submodule whose layout is not known in advance.

Search Semantics:
    - Breadth-first: shallower entries always win over deeper ones
    - Lexicographic order within a level (stable across runs)
    - Depth 1 is the direct children of the root; the root never matches
    - Unreadable directories are skipped, never fatal
    - Symlinked directories can match by name but are not descended into
"""

import fnmatch
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional


class EntryKind(Enum):
    """Type filter applied to a name pattern."""

    ANY = "any"
    FILE = "file"
    DIR = "dir"


@dataclass(frozen=True)
class NamePattern:
    """Shell-style name pattern with an entry type filter.

    Examples:
        NamePattern("*.framework", EntryKind.DIR)
        NamePattern("parsec.h", EntryKind.FILE)
    """

    glob: str
    kind: EntryKind = EntryKind.ANY

    def matches(self, path: Path) -> bool:
        """Check whether a filesystem entry satisfies this pattern."""
        if not fnmatch.fnmatchcase(path.name, self.glob):
            return False
        if self.kind == EntryKind.DIR:
            return path.is_dir()
        if self.kind == EntryKind.FILE:
            return path.is_file()
        return True

    def __str__(self) -> str:
        if self.kind == EntryKind.ANY:
            return self.glob
        return f"{self.glob} ({self.kind.value})"


class PathProbe:
    """Stateless, side-effect-free artifact search."""

    @staticmethod
    def list_children(directory: Path) -> List[Path]:
        """List the entries of a directory in lexicographic order.

        Args:
            directory: Directory to enumerate

        Returns:
            Sorted child paths, or an empty list if the directory cannot be read
        """
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except (PermissionError, OSError):
            return []

    @staticmethod
    def find(root: Path, patterns: Iterable[NamePattern], max_depth: int) -> Optional[Path]:
        """Find the first entry under root matching any pattern.

        Args:
            root: Directory to search
            patterns: Name patterns; an entry matching any one of them is a hit
            max_depth: Maximum depth below root to inspect (1 = direct children)

        Returns:
            Path of the first match in breadth-first order, or None
        """
        patterns = list(patterns)
        if max_depth < 1 or not patterns or not root.is_dir():
            return None

        queue = deque([(root, 1)])
        while queue:
            directory, depth = queue.popleft()
            for entry in PathProbe.list_children(directory):
                if any(pattern.matches(entry) for pattern in patterns):
                    return entry
                if depth < max_depth and entry.is_dir() and not entry.is_symlink():
                    queue.append((entry, depth + 1))

        return None
