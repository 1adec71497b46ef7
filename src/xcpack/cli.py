"""
Command-line interface for xcpack.

This module provides the `xcpack` CLI tool for producing the unified SDK bundle.
"""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from xcpack import __version__
from xcpack.build.build_utils import is_non_empty_dir
from xcpack.cli_utils import BannerFormatter, ErrorFormatter, PathValidator
from xcpack.config import PackagingConfig
from xcpack.log_utils import setup_logging
from xcpack.pipeline import PipelineController
from xcpack.pipeline.output_lock import OutputLockedError


@dataclass
class PackArgs:
    """Arguments shared by the build and diagnose commands."""

    project_dir: Path
    submodule: Optional[Path] = None
    output: Optional[Path] = None
    sdk_name: Optional[str] = None
    header: Optional[str] = None
    header_dirs: List[str] = field(default_factory=list)
    force: bool = False
    log_file: Optional[Path] = None
    verbose: bool = False

    def to_config(self) -> PackagingConfig:
        return PackagingConfig.for_project(
            self.project_dir,
            submodule_root=self.submodule,
            output_path=self.output,
            sdk_name=self.sdk_name,
            header_name=self.header,
            header_dirs=tuple(self.header_dirs) if self.header_dirs else None,
        )


def build_command(args: PackArgs) -> None:
    """Create the unified bundle if it does not exist yet.

    Examples:
        xcpack build                          # Package the SDK of the current project
        xcpack build ../OpenParsec            # Package a specific project
        xcpack build --force                  # Rebuild even if the bundle exists
        xcpack build --header-dir vendor/inc  # Extra conventional header directory
    """
    print(f"xcpack v{__version__}")
    print()

    try:
        setup_logging(verbose=args.verbose, log_file=args.log_file)
        config = args.to_config()

        if args.verbose:
            print(f"Project: {config.project_root}")
            print(f"Submodule: {config.submodule_root}")
            print(f"Output: {config.output_path}")
            print()

        result = PipelineController(config).run(force=args.force)

        if result.success:
            if result.skipped_existing:
                ErrorFormatter.print_success(f"{config.output_path.name} already exists; nothing to do.")
            else:
                ErrorFormatter.print_success("Bundle created!")
                for outcome in result.outcomes:
                    print(f"  {outcome.strategy.value}: {outcome.status.value} - {outcome.detail}")
            print()
            print(f"Bundle: {result.bundle_path}")
            print(f"Time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            ErrorFormatter.print_error("Packaging failed!", result.message)
            print(result.diagnostics or "")
            sys.exit(result.exit_code)

    except OutputLockedError as e:
        ErrorFormatter.print_error("Output is locked", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def diagnose_command(args: PackArgs) -> None:
    """Report what the submodule contains without building anything.

    Examples:
        xcpack diagnose
        xcpack diagnose --submodule vendor/ParsecSDK
    """
    try:
        setup_logging(verbose=args.verbose, log_file=args.log_file)
        config = args.to_config()
        controller = PipelineController(config)
        root = config.submodule_root

        project = controller.locator.find_buildable_project(root)
        bundle = controller.locator.find_prebuilt_bundle(root)
        library = controller.locator.find_raw_library(root)
        header_dir = controller.header_resolver.resolve_headers(root)

        def describe(found) -> str:
            return str(found.path) if found is not None else "not found"

        BannerFormatter.print_banner(
            "\n".join([
                f"Submodule: {root}",
                f"Output: {config.output_path} ({'present' if is_non_empty_dir(config.output_path) else 'missing'})",
                f"Xcode project: {describe(project)}",
                f"Prebuilt framework: {describe(bundle)}",
                f"Raw library: {describe(library)}",
                f"Header directory: {header_dir if header_dir else 'not found'}",
            ])
        )
        print()
        print(controller.diagnose(exhausted=False))
        sys.exit(0)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--submodule",
        type=Path,
        default=None,
        help="SDK submodule directory (default: Frameworks/<sdk>.framework)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Unified bundle path (default: Frameworks/<sdk>.xcframework)",
    )
    parser.add_argument(
        "--sdk-name",
        default=None,
        help="SDK product and scheme name (default: ParsecSDK)",
    )
    parser.add_argument(
        "--header",
        default=None,
        help="Public header file name (default: parsec.h)",
    )
    parser.add_argument(
        "--header-dir",
        dest="header_dirs",
        action="append",
        default=[],
        help="Conventional header directory relative to the submodule (repeatable; replaces the defaults)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a rotating log file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output, including toolchain commands",
    )


def main() -> None:
    """xcpack - package a vendored SDK into a unified .xcframework bundle."""
    parser = argparse.ArgumentParser(
        prog="xcpack",
        description="xcpack - package a vendored SDK into a unified .xcframework bundle",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"xcpack {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    build_parser = subparsers.add_parser(
        "build",
        help="Create the unified bundle (no-op if it already exists)",
    )
    _add_common_arguments(build_parser)
    build_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Remove an existing bundle and run the packaging strategies again",
    )

    diagnose_parser = subparsers.add_parser(
        "diagnose",
        help="Report what the SDK submodule contains without building",
    )
    _add_common_arguments(diagnose_parser)

    parsed_args = parser.parse_args()

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    pack_args = PackArgs(
        project_dir=parsed_args.project_dir,
        submodule=parsed_args.submodule,
        output=parsed_args.output,
        sdk_name=parsed_args.sdk_name,
        header=parsed_args.header,
        header_dirs=parsed_args.header_dirs,
        force=getattr(parsed_args, "force", False),
        log_file=parsed_args.log_file,
        verbose=parsed_args.verbose,
    )

    if parsed_args.command == "build":
        build_command(pack_args)
    elif parsed_args.command == "diagnose":
        diagnose_command(pack_args)


if __name__ == "__main__":
    main()
