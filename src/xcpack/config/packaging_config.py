"""Packaging configuration.

Every path and name the pipeline needs, derived from the project root.

Default Layout:
    <project_root>/
    ├── Frameworks/
    │   ├── ParsecSDK.framework/     # SDK submodule (read-only input)
    │   ├── ParsecSDK.xcframework/   # Unified bundle (output)
    │   └── ParsecSDK.xcframework.lock
    └── build_parsec/                # Scratch directory for variant builds
        ├── macos/
        └── maccatalyst/

Environment overrides:
    XCPACK_BUILD_DIR: scratch build directory
    XCPACK_XCODEBUILD: xcodebuild executable
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ..build.variants import DEFAULT_VARIANTS, PlatformVariant
from ..discovery.header_resolver import DEFAULT_HEADER_DIRS


@dataclass
class PackagingConfig:
    """Resolved configuration for one pipeline run."""

    project_root: Path
    submodule_root: Path
    output_path: Path
    build_dir: Path
    sdk_name: str = "ParsecSDK"
    scheme: Optional[str] = None
    header_name: str = "parsec.h"
    header_dirs: Tuple[str, ...] = DEFAULT_HEADER_DIRS
    project_search_depth: int = 1
    artifact_search_depth: int = 4
    header_search_depth: int = 4
    diagnostics_header_depth: int = 6
    listing_depth: int = 4
    variants: List[PlatformVariant] = field(default_factory=lambda: list(DEFAULT_VARIANTS))
    xcodebuild: str = "xcodebuild"

    @classmethod
    def for_project(cls, project_root: Path, **overrides: Any) -> "PackagingConfig":
        """Build the default configuration for a project.

        Args:
            project_root: Root of the consuming project
            **overrides: Field values that replace the derived defaults
                (None values are ignored)

        Returns:
            PackagingConfig
        """
        project_root = Path(project_root).resolve()
        overrides = {key: value for key, value in overrides.items() if value is not None}
        sdk_name = overrides.get("sdk_name", "ParsecSDK")
        frameworks_dir = project_root / "Frameworks"

        build_env = os.environ.get("XCPACK_BUILD_DIR")
        defaults = {
            "submodule_root": frameworks_dir / f"{sdk_name}.framework",
            "output_path": frameworks_dir / f"{sdk_name}.xcframework",
            "build_dir": Path(build_env).resolve() if build_env else project_root / "build_parsec",
            "xcodebuild": os.environ.get("XCPACK_XCODEBUILD", "xcodebuild"),
        }
        defaults.update(overrides)

        for key in ("submodule_root", "output_path", "build_dir"):
            path = Path(defaults[key])
            if not path.is_absolute():
                path = project_root / path
            defaults[key] = path
        if "header_dirs" in defaults:
            defaults["header_dirs"] = tuple(defaults["header_dirs"])

        return cls(project_root=project_root, **defaults)

    @property
    def lock_path(self) -> Path:
        """Advisory lock file guarding the output path."""
        return self.output_path.with_name(self.output_path.name + ".lock")
