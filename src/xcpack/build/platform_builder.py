"""Per-variant framework builds.

This module drives xcodebuild against a discovered SDK project to produce
one framework per platform variant.

Design:
    - One xcodebuild invocation per variant, run strictly one after another
    - Outputs go to <output_root>/<variant>/, never into the project
    - Intermediates go to <output_root>/<variant>/DerivedData, so variants
      never share a toolchain cache
    - Redistributable settings: BUILD_LIBRARY_FOR_DISTRIBUTION=YES,
      SKIP_INSTALL=NO, position-independent code
    - A failed variant raises BuildFailure with the captured toolchain output;
      build_all() records it and moves on to the next variant
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .build_utils import safe_rmtree
from .command_runner import CommandRunner, SubprocessRunner, format_command
from .variants import PlatformVariant


class BuildFailure(Exception):
    """Raised when the toolchain fails to build one platform variant."""

    def __init__(self, variant: PlatformVariant, message: str, output: str = ""):
        super().__init__(f"{variant.label} build failed: {message}")
        self.variant = variant
        self.output = output


@dataclass
class BuildOutput:
    """Built framework per variant; a missing entry means that variant failed."""

    frameworks: Dict[PlatformVariant, Path] = field(default_factory=dict)
    failures: Dict[PlatformVariant, BuildFailure] = field(default_factory=dict)

    @property
    def succeeded(self) -> List[Path]:
        return list(self.frameworks.values())

    def get(self, variant: PlatformVariant) -> Optional[Path]:
        return self.frameworks.get(variant)


class PlatformBuilder:
    """Builds an SDK framework for individual platform variants."""

    CONFIGURATION = "Release"

    def __init__(
        self,
        sdk_name: str,
        scheme: Optional[str] = None,
        runner: Optional[CommandRunner] = None,
        xcodebuild: str = "xcodebuild",
    ):
        """Initialize platform builder.

        Args:
            sdk_name: Framework product name (produces <sdk_name>.framework)
            scheme: Xcode scheme to build (defaults to sdk_name)
            runner: Command runner (defaults to SubprocessRunner)
            xcodebuild: xcodebuild executable
        """
        self.sdk_name = sdk_name
        self.scheme = scheme or sdk_name
        self.runner = runner or SubprocessRunner()
        self.xcodebuild = xcodebuild

    def variant_build_dir(self, output_root: Path, variant: PlatformVariant) -> Path:
        return output_root / variant.value

    def derived_data_dir(self, output_root: Path, variant: PlatformVariant) -> Path:
        """Per-variant intermediates, kept apart from the shared ~/Library DerivedData."""
        return self.variant_build_dir(output_root, variant) / "DerivedData"

    def expected_framework(self, output_root: Path, variant: PlatformVariant) -> Path:
        """Where xcodebuild places the framework for a variant."""
        return self.variant_build_dir(output_root, variant) / self.CONFIGURATION / f"{self.sdk_name}.framework"

    def build_command(self, project_path: Path, variant: PlatformVariant, output_root: Path) -> List[str]:
        cmd = [
            self.xcodebuild,
            "-project", str(project_path),
            "-scheme", self.scheme,
            "-configuration", self.CONFIGURATION,
        ]
        cmd.extend(variant.selector_args)
        cmd.extend([
            "-derivedDataPath", str(self.derived_data_dir(output_root, variant)),
            f"BUILD_DIR={self.variant_build_dir(output_root, variant)}",
            "SKIP_INSTALL=NO",
            "BUILD_LIBRARY_FOR_DISTRIBUTION=YES",
            "GCC_DYNAMIC_NO_PIC=NO",
        ])
        return cmd

    def build(self, project_path: Path, variant: PlatformVariant, output_root: Path) -> Path:
        """Build the framework for one variant.

        Args:
            project_path: Path to the .xcodeproj
            variant: Platform variant to build
            output_root: Root build directory; the variant builds into a subdirectory

        Returns:
            Path to the built framework

        Raises:
            BuildFailure: If xcodebuild fails or produces no framework
        """
        variant_dir = self.variant_build_dir(output_root, variant)
        safe_rmtree(variant_dir)
        variant_dir.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(project_path, variant, output_root)
        logging.info(f"Building {variant.label} framework...")
        logging.debug(format_command(cmd))

        result = self.runner.run(cmd, cwd=project_path.parent)
        if not result.ok:
            raise BuildFailure(variant, f"xcodebuild exited with status {result.returncode}", result.output)

        framework = self.expected_framework(output_root, variant)
        if not framework.is_dir():
            raise BuildFailure(variant, f"xcodebuild succeeded but {framework} was not produced", result.output)

        logging.info(f"{variant.label} build succeeded: {framework}")
        return framework

    def build_all(
        self, project_path: Path, variants: Iterable[PlatformVariant], output_root: Path
    ) -> BuildOutput:
        """Build every variant, continuing through per-variant failures.

        Args:
            project_path: Path to the .xcodeproj
            variants: Variants to build, in order
            output_root: Root build directory

        Returns:
            BuildOutput with the frameworks that were built and the failures
        """
        output = BuildOutput()
        for variant in variants:
            try:
                output.frameworks[variant] = self.build(project_path, variant, output_root)
            except BuildFailure as e:
                logging.warning(f"{e}; continuing with remaining variants")
                output.failures[variant] = e
        return output
