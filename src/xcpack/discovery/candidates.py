"""Packaging input discovery.

Finds the three kinds of artifact a packaging strategy can start from:
a buildable Xcode project, a prebuilt framework bundle, or a raw library.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .path_probe import EntryKind, NamePattern, PathProbe

LIBRARY_PATTERNS = [
    NamePattern("*.dylib", EntryKind.FILE),
    NamePattern("*.so", EntryKind.FILE),
    NamePattern("*.a", EntryKind.FILE),
]


class CandidateKind(Enum):
    """Discriminator for discovered artifacts."""

    BUILDABLE_PROJECT = "buildable-project"
    PREBUILT_BUNDLE = "prebuilt-bundle"
    RAW_LIBRARY = "raw-library"


@dataclass(frozen=True)
class Candidate:
    """A discovered filesystem artifact."""

    kind: CandidateKind
    path: Path


class CandidateLocator:
    """Searches a submodule for packaging inputs."""

    def __init__(self, sdk_name: str, project_depth: int = 1, artifact_depth: int = 4):
        """Initialize candidate locator.

        Args:
            sdk_name: SDK name, used to name the Xcode project (<sdk_name>.xcodeproj)
            project_depth: Search depth for the Xcode project
            artifact_depth: Search depth for prebuilt bundles and libraries
        """
        self.sdk_name = sdk_name
        self.project_depth = project_depth
        self.artifact_depth = artifact_depth

    @property
    def project_patterns(self) -> List[NamePattern]:
        return [NamePattern(f"{self.sdk_name}.xcodeproj", EntryKind.DIR)]

    @property
    def bundle_patterns(self) -> List[NamePattern]:
        return [NamePattern("*.framework", EntryKind.DIR)]

    @property
    def library_patterns(self) -> List[NamePattern]:
        return list(LIBRARY_PATTERNS)

    def find_buildable_project(self, root: Path) -> Optional[Candidate]:
        return self._find(root, CandidateKind.BUILDABLE_PROJECT, self.project_patterns, self.project_depth)

    def find_prebuilt_bundle(self, root: Path) -> Optional[Candidate]:
        return self._find(root, CandidateKind.PREBUILT_BUNDLE, self.bundle_patterns, self.artifact_depth)

    def find_raw_library(self, root: Path) -> Optional[Candidate]:
        return self._find(root, CandidateKind.RAW_LIBRARY, self.library_patterns, self.artifact_depth)

    @staticmethod
    def _find(
        root: Path, kind: CandidateKind, patterns: List[NamePattern], depth: int
    ) -> Optional[Candidate]:
        path = PathProbe.find(root, patterns, depth)
        if path is None:
            return None
        return Candidate(kind=kind, path=path.resolve())
