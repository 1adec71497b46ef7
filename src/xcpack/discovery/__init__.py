"""Artifact discovery for xcpack.

This module inspects an SDK submodule of unknown layout:
- Bounded, deterministic path search
- Public header resolution
- Buildable project / prebuilt bundle / raw library discovery
"""

from .candidates import Candidate, CandidateKind, CandidateLocator
from .header_resolver import DEFAULT_HEADER_DIRS, HeaderResolver
from .path_probe import EntryKind, NamePattern, PathProbe

__all__ = [
    "Candidate",
    "CandidateKind",
    "CandidateLocator",
    "DEFAULT_HEADER_DIRS",
    "HeaderResolver",
    "EntryKind",
    "NamePattern",
    "PathProbe",
]
