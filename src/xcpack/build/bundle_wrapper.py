"""Unified bundle creation.

This module wraps `xcodebuild -create-xcframework`, the tool that merges
platform-specific binaries into a single multi-platform .xcframework.

Modes:
    - from_built_variants: merge one or more freshly built frameworks
    - from_single_bundle: wrap one prebuilt framework as-is
    - from_library_and_headers: synthesize a bundle from a raw library
      plus its header directory

Every mode writes to the same output path and clears it first. The tool
writes into a <name>.partial sibling directory and the result is renamed onto the output path
only once it holds a non-empty bundle, so an interrupted or failed merge
never leaves a malformed bundle at the output path.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .build_utils import is_non_empty_dir, safe_rmtree
from .command_runner import CommandRunner, SubprocessRunner, format_command


class WrapFailure(Exception):
    """Raised when the bundle-merge tool rejects its inputs."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class BundleWrapper:
    """Produces the unified bundle at a single well-known location."""

    def __init__(
        self,
        output_path: Path,
        runner: Optional[CommandRunner] = None,
        xcodebuild: str = "xcodebuild",
    ):
        """Initialize bundle wrapper.

        Args:
            output_path: Path of the .xcframework to create
            runner: Command runner (defaults to SubprocessRunner)
            xcodebuild: xcodebuild executable
        """
        self.output_path = output_path
        self.runner = runner or SubprocessRunner()
        self.xcodebuild = xcodebuild

    def from_built_variants(self, paths: Iterable[Path]) -> Path:
        """Merge per-variant frameworks into one bundle.

        Args:
            paths: Built frameworks (at least one)

        Returns:
            Path to the unified bundle

        Raises:
            WrapFailure: If no frameworks are given or the merge fails
        """
        frameworks = sorted(set(paths))
        if not frameworks:
            raise WrapFailure("No built frameworks provided for the bundle")

        args: List[str] = []
        for framework in frameworks:
            args.extend(["-framework", str(framework)])
        return self._create(args, f"{len(frameworks)} built framework(s)")

    def from_single_bundle(self, path: Path) -> Path:
        """Wrap one prebuilt framework as a single-slice bundle."""
        return self._create(["-framework", str(path)], path.name)

    def from_library_and_headers(self, library_path: Path, header_dir: Path) -> Path:
        """Synthesize a bundle from a raw library and a header directory."""
        return self._create(
            ["-library", str(library_path), "-headers", str(header_dir)],
            f"{library_path.name} with headers from {header_dir}",
        )

    @property
    def staging_dir(self) -> Path:
        """Sibling directory the tool writes into before the bundle is moved into place."""
        return self.output_path.with_name(self.output_path.name + ".partial")

    def _create(self, input_args: List[str], description: str) -> Path:
        # The tool requires an .xcframework output name
        staging = self.staging_dir / self.output_path.name
        safe_rmtree(self.staging_dir)
        self.staging_dir.mkdir(parents=True)
        safe_rmtree(self.output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = [self.xcodebuild, "-create-xcframework"] + input_args + ["-output", str(staging)]
        logging.info(f"Creating {self.output_path.name} from {description}...")
        logging.debug(format_command(cmd))

        try:
            result = self.runner.run(cmd)
            if not result.ok:
                raise WrapFailure(
                    f"xcodebuild -create-xcframework exited with status {result.returncode}",
                    result.output,
                )
            if not is_non_empty_dir(staging):
                raise WrapFailure(
                    f"xcodebuild -create-xcframework produced no bundle at {staging}",
                    result.output,
                )
            staging.rename(self.output_path)
        finally:
            safe_rmtree(self.staging_dir)

        logging.info(f"Created {self.output_path}")
        return self.output_path
