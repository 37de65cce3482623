"""Processes attached to virtual displays."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from overlaykit.handle import Handle, HandleVec

log = logging.getLogger(__name__)


@dataclass
class ManagedProcess:
    """A child process that was spawned for a display."""

    auth_key: str
    child: subprocess.Popen
    display_handle: Handle
    exec_path: str
    args: list[str] = field(default_factory=list)
    env: list[tuple[str, str]] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.child.pid

    def is_running(self) -> bool:
        try:
            return self.child.poll() is None
        except OSError as exc:
            log.error("Polling child process failed: %s", exc)
            return False

    def terminate(self) -> None:
        """Ask the child to exit gracefully with SIGTERM."""
        log.info("Sending SIGTERM (graceful exit) to process %s", self.exec_path)
        try:
            self.child.send_signal(signal.SIGTERM)
        except (ProcessLookupError, PermissionError):
            pass


@dataclass
class ExternalProcess:
    """A process that connected on its own and is not our child."""

    pid: int
    display_handle: Handle

    def is_running(self) -> bool:
        return self.pid != 0 and Path(f"/proc/{self.pid}").exists()

    def terminate(self) -> None:
        """Interrupt the process with SIGINT and forget its pid."""
        if self.pid != 0:
            try:
                os.kill(self.pid, signal.SIGINT)
            except (ProcessLookupError, PermissionError):
                pass
        self.pid = 0


Process = Union[ManagedProcess, ExternalProcess]


def find_by_pid(processes: HandleVec[Process], pid: int) -> Handle | None:
    """Return the handle of the process with the given pid, if any."""
    return processes.find(lambda process: process.pid == pid)