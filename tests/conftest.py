"""Shared fixtures: a fake xcodebuild and SDK submodule layouts."""

from pathlib import Path
from typing import List, Optional

import pytest

from xcpack.build.command_runner import CommandResult, CommandRunner
from xcpack.config import PackagingConfig


class FakeRunner(CommandRunner):
    """Stands in for xcodebuild.

    Builds create <BUILD_DIR>/Release/<sdk>.framework; -create-xcframework
    creates the output directory with one slice per input. Like the real
    tool, -create-xcframework refuses to write over an existing output.
    """

    def __init__(self, sdk_name: str = "ParsecSDK"):
        self.sdk_name = sdk_name
        self.calls: List[List[str]] = []
        self.failing_variants: set = set()
        self.silent_variants: set = set()
        self.wrap_returncode = 0
        self.wrap_leaves_partial = False
        self.wrap_writes_nothing = False
        self.rejected_wrap_inputs: set = set()
        self.wrap_interrupted = False

    @property
    def builds(self) -> List[List[str]]:
        return [cmd for cmd in self.calls if "-create-xcframework" not in cmd]

    @property
    def wraps(self) -> List[List[str]]:
        return [cmd for cmd in self.calls if "-create-xcframework" in cmd]

    def run(self, command: List[str], cwd: Optional[Path] = None) -> CommandResult:
        self.calls.append(list(command))
        if "-create-xcframework" in command:
            return self._wrap(command)
        return self._build(command)

    def _build(self, command: List[str]) -> CommandResult:
        build_dir = Path(next(arg.split("=", 1)[1] for arg in command if arg.startswith("BUILD_DIR=")))
        variant = build_dir.name
        if variant in self.failing_variants:
            return CommandResult(command, 65, stdout="** BUILD FAILED **", stderr=f"error: {variant} is not supported")
        if variant not in self.silent_variants:
            framework = build_dir / "Release" / f"{self.sdk_name}.framework"
            framework.mkdir(parents=True)
            (framework / self.sdk_name).write_bytes(b"\xcf\xfa\xed\xfe")
        return CommandResult(command, 0, stdout="** BUILD SUCCEEDED **")

    def _wrap(self, command: List[str]) -> CommandResult:
        output = Path(command[command.index("-output") + 1])
        inputs = [command[i + 1] for i, arg in enumerate(command) if arg in ("-framework", "-library")]

        if output.exists():
            return CommandResult(command, 70, stderr=f"error: the path does not point to a valid location: {output}")
        if self.wrap_interrupted:
            output.mkdir(parents=True)
            (output / "Info.plist").write_text("<plist/>")
            raise KeyboardInterrupt
        if self.rejected_wrap_inputs.intersection(command):
            return CommandResult(command, 1, stderr="error: unable to read the framework binary")
        if self.wrap_returncode != 0:
            if self.wrap_leaves_partial:
                output.mkdir(parents=True)
                (output / "partial").write_text("half-written")
            return CommandResult(
                command, self.wrap_returncode, stderr="error: binaries with multiple platforms are not supported"
            )
        if self.wrap_writes_nothing:
            return CommandResult(command, 0)

        output.mkdir(parents=True)
        (output / "Info.plist").write_text("<plist/>")
        for index, source in enumerate(inputs):
            slice_dir = output / f"slice-{index}"
            slice_dir.mkdir()
            (slice_dir / Path(source).name).write_text(source)
        return CommandResult(command, 0, stdout=f"xcframework successfully written out to: {output}")


class SubmoduleLayout:
    """Builds SDK submodule layouts under a temporary project root."""

    def __init__(self, project_root: Path, sdk_name: str = "ParsecSDK"):
        self.project_root = project_root
        self.sdk_name = sdk_name
        self.submodule = project_root / "Frameworks" / f"{sdk_name}.framework"
        self.submodule.mkdir(parents=True)

    @property
    def output(self) -> Path:
        return self.project_root / "Frameworks" / f"{self.sdk_name}.xcframework"

    def config(self, **overrides) -> PackagingConfig:
        return PackagingConfig.for_project(self.project_root, sdk_name=self.sdk_name, **overrides)

    def add_project(self) -> Path:
        project = self.submodule / f"{self.sdk_name}.xcodeproj"
        project.mkdir()
        (project / "project.pbxproj").write_text("// !$*UTF8*$!")
        return project

    def add_framework(self, rel_path: str = "prebuilt/ParsecSDK.framework") -> Path:
        framework = self.submodule / rel_path
        framework.mkdir(parents=True)
        (framework / self.sdk_name).write_bytes(b"\xcf\xfa\xed\xfe")
        return framework

    def add_library(self, rel_path: str = "lib/libparsec.dylib") -> Path:
        library = self.submodule / rel_path
        library.parent.mkdir(parents=True, exist_ok=True)
        library.write_bytes(b"\xcf\xfa\xed\xfe")
        return library

    def add_header(self, rel_dir: str = "include", name: str = "parsec.h") -> Path:
        directory = self.submodule / rel_dir
        directory.mkdir(parents=True, exist_ok=True)
        (directory / name).write_text("#pragma once\n")
        return directory


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer environment overrides out of the tests."""
    monkeypatch.delenv("XCPACK_BUILD_DIR", raising=False)
    monkeypatch.delenv("XCPACK_XCODEBUILD", raising=False)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def layout(tmp_path):
    return SubmoduleLayout(tmp_path / "project")
