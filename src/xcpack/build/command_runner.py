"""External command execution.

This module wraps the external tools the pipeline depends on (xcodebuild
for building and for -create-xcframework) behind a narrow interface.

Design:
    - run(command, cwd) -> CommandResult(returncode, stdout, stderr)
    - A missing executable is reported as exit code 127, not raised
    - A timeout is reported as exit code 124, not raised
    - Tests substitute their own CommandRunner instead of real toolchains
"""

import logging
import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Exit status and captured output of an external command."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        parts = [part.rstrip() for part in (self.stdout, self.stderr) if part and part.strip()]
        return "\n".join(parts)


def format_command(command: List[str]) -> str:
    """Render a command list the way it would be typed in a shell."""
    return " ".join(shlex.quote(arg) for arg in command)


class CommandRunner(ABC):
    """Interface for running external tools."""

    @abstractmethod
    def run(self, command: List[str], cwd: Optional[Path] = None) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            command: Executable followed by its arguments
            cwd: Working directory (None = current directory)

        Returns:
            CommandResult with exit code and captured output
        """
        pass


class SubprocessRunner(CommandRunner):
    """Runs commands synchronously through subprocess."""

    def __init__(self, timeout: Optional[float] = 1800):
        """Initialize subprocess runner.

        Args:
            timeout: Per-command timeout in seconds (None = no timeout)
        """
        self.timeout = timeout

    def run(self, command: List[str], cwd: Optional[Path] = None) -> CommandResult:
        logging.debug(f"Running: {format_command(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return CommandResult(
                command=list(command),
                returncode=EXIT_NOT_FOUND,
                stderr=f"command not found: {command[0]}",
            )
        except subprocess.TimeoutExpired as e:
            return CommandResult(
                command=list(command),
                returncode=EXIT_TIMEOUT,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr) + f"\ncommand timed out after {self.timeout}s",
            )

        return CommandResult(
            command=list(command),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


def _decode(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
