"""
Build components for xcpack.

This module provides the toolchain-facing side of the pipeline:
- External command execution (xcodebuild)
- Per-variant framework builds
- Unified bundle (.xcframework) creation
"""

from .build_utils import safe_rmtree
from .bundle_wrapper import BundleWrapper, WrapFailure
from .command_runner import CommandResult, CommandRunner, SubprocessRunner
from .platform_builder import BuildFailure, BuildOutput, PlatformBuilder
from .variants import DEFAULT_VARIANTS, PlatformVariant

__all__ = [
    "safe_rmtree",
    "BundleWrapper",
    "WrapFailure",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "BuildFailure",
    "BuildOutput",
    "PlatformBuilder",
    "DEFAULT_VARIANTS",
    "PlatformVariant",
]
