"""Wayland socket naming and the environment of connecting processes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

STARTING_DISPLAY_NUM = 20
AUTH_VAR = "WAYVR_DISPLAY_AUTH"
NAME_VAR = "WAYVR_DISPLAY_NAME"
DISPLAY_NUM_FILE = "wayvr.disp"


@dataclass
class WaylandEnv:
    display_num: int = STARTING_DISPLAY_NUM

    def display_num_string(self) -> str:
        """Return the socket name, e.g. "wayland-20"."""
        return f"wayland-{self.display_num}"


@dataclass
class ProcessWayVREnv:
    """Display variables found in a client process's environment."""

    display_auth: str | None = None
    display_name: str | None = None


def parse_environ(data: str | bytes) -> ProcessWayVREnv:
    """Parse NUL-separated KEY=VALUE entries, as found in /proc/<pid>/environ."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    env = ProcessWayVREnv()
    for entry in filter(None, data.split("\0")):
        key, sep, value = entry.partition("=")
        if not sep:
            continue
        if key == AUTH_VAR:
            env.display_auth = value
        elif key == NAME_VAR:
            env.display_name = value
    return env


def read_process_env(pid: int) -> ProcessWayVREnv:
    """Read the display variables of a running process; raises OSError if unreadable."""
    return parse_environ(Path(f"/proc/{pid}/environ").read_bytes())


def export_display_number(display_num: int) -> Path:
    """Write the display number into the runtime directory and return the file."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    base = Path(runtime_dir) if runtime_dir is not None else Path("/tmp")
    path = base / DISPLAY_NUM_FILE
    path.write_text(f"{display_num}\n", encoding="utf-8")
    return path