"""Advisory lock around the unified bundle output path.

A PID file next to the output path marks a pipeline run in progress.
A lock left behind by a process that no longer exists is stale and is
taken over.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import psutil


class OutputLockedError(Exception):
    """Raised when another live process holds the output lock."""

    def __init__(self, lock_path: Path, pid: int):
        super().__init__(f"Output is locked by running process {pid} ({lock_path})")
        self.lock_path = lock_path
        self.pid = pid


class OutputLock:
    """PID-file lock, usable as a context manager."""

    def __init__(self, lock_path: Path):
        self.lock_path = lock_path
        self._held = False

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            OutputLockedError: If a live process already holds it
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        for _ in range(2):
            try:
                fd = os.open(str(self.lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                holder = self._read_holder()
                if holder is not None and holder != os.getpid() and psutil.pid_exists(holder):
                    raise OutputLockedError(self.lock_path, holder)
                logging.info(f"Removing stale lock file: {self.lock_path}")
                self.lock_path.unlink(missing_ok=True)
                continue

            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))
            self._held = True
            return

        holder = self._read_holder()
        raise OutputLockedError(self.lock_path, holder if holder is not None else -1)

    def release(self) -> None:
        if self._held:
            self.lock_path.unlink(missing_ok=True)
            self._held = False

    def _read_holder(self) -> Optional[int]:
        try:
            return int(self.lock_path.read_text().strip())
        except (OSError, ValueError):
            return None

    def __enter__(self) -> "OutputLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
