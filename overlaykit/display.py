"""A virtual display that tiles the windows of the processes it hosts."""

from __future__ import annotations

import logging
import os
import subprocess
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from overlaykit.clock import get_millis
from overlaykit.config_wayvr import CompositorConfig
from overlaykit.event_queue import SyncEventQueue
from overlaykit.handle import Handle
from overlaykit.wayland_env import AUTH_VAR, WaylandEnv
from overlaykit.window import WindowManager

log = logging.getLogger(__name__)


def generate_auth_key() -> str:
    """Return a fresh random key that identifies processes spawned for a display."""
    return str(uuid.uuid4())


class MouseIndex(Enum):
    """Mouse buttons, valued by their Linux input event codes."""

    LEFT = 0x110  # BTN_LEFT
    CENTER = 0x112  # BTN_MIDDLE
    RIGHT = 0x111  # BTN_RIGHT

    def button_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class ProcessCleanup:
    """Task: drop every window that belongs to the given process."""

    process_handle: Handle


@dataclass(frozen=True)
class DisplayHideRequest:
    """Signal: the display has had no windows long enough to be hidden."""

    display_handle: Handle


@dataclass
class SpawnProcessResult:
    auth_key: str
    child: subprocess.Popen


DisplayTask = Union[ProcessCleanup]


@dataclass
class _DisplayWindow:
    window_handle: Handle
    process_handle: Handle
    toplevel: Any


class Display:
    """A named virtual screen whose windows share its width in equal columns."""

    def __init__(
        self,
        wm: WindowManager,
        wayland_env: WaylandEnv,
        width: int,
        height: int,
        name: str,
        primary: bool = False,
    ) -> None:
        self.wm = wm
        self.wayland_env = wayland_env
        self.width = width
        self.height = height
        self.name = name
        self.primary = primary
        self.visible = True
        self.overlay_id: Any = None
        self.wants_redraw = True
        self.displayed_windows: list[_DisplayWindow] = []
        self.last_pressed_time_ms = 0
        self.no_windows_since: int | None = None
        self.tasks: SyncEventQueue[DisplayTask] = SyncEventQueue()

    def add_window(self, window_handle: Handle, process_handle: Handle, toplevel: Any) -> None:
        """Attach a window to this display and re-tile all windows."""
        log.debug("Attaching toplevel surface into display")
        self.displayed_windows.append(_DisplayWindow(window_handle, process_handle, toplevel))
        self._reposition_windows()

    def _reposition_windows(self) -> None:
        count = len(self.displayed_windows)
        for i, entry in enumerate(self.displayed_windows):
            window = self.wm.windows.get(entry.window_handle)
            if window is None:
                continue
            left = int(i / count * self.width)
            right = int((i + 1) / count * self.width)
            window.set_pos(left, 0)
            window.set_size(right - left, self.height)

    def tick(
        self,
        config: CompositorConfig,
        handle: Handle,
        signals: SyncEventQueue[DisplayHideRequest],
    ) -> None:
        """Request hiding when idle too long, then run pending display tasks."""
        if self.visible:
            if self.displayed_windows:
                self.no_windows_since = None
            elif config.auto_hide_delay is not None and self.no_windows_since is not None:
                if self.no_windows_since + config.auto_hide_delay < get_millis():
                    signals.send(DisplayHideRequest(handle))

        while (task := self.tasks.read()) is not None:
            if isinstance(task, ProcessCleanup):
                self.displayed_windows = [
                    entry
                    for entry in self.displayed_windows
                    if entry.process_handle != task.process_handle
                ]
                log.info(
                    'Cleanup finished for display "%s". Current window count: %d',
                    self.name,
                    len(self.displayed_windows),
                )
                self.no_windows_since = get_millis()
                self._reposition_windows()

    def hovered_window(self, cursor_x: int, cursor_y: int) -> Handle | None:
        """Return the handle of the window under the cursor, if any."""
        for entry in self.displayed_windows:
            window = self.wm.windows.get(entry.window_handle)
            if window is not None and window.contains(cursor_x, cursor_y):
                return entry.window_handle
        return None

    def set_visible(self, visible: bool) -> None:
        log.info('Display "%s" visible: %s', self.name, visible)
        if self.visible != visible:
            self.visible = visible
            if visible:
                self.wants_redraw = True
                self.no_windows_since = None

    def _process_env(self, auth_key: str, extra: Iterable[tuple[str, str]]) -> dict[str, str]:
        env = dict(os.environ)
        env.pop("DISPLAY", None)
        env["WAYLAND_DISPLAY"] = self.wayland_env.display_num_string()
        env[AUTH_VAR] = auth_key
        env.update(extra)
        return env

    def spawn_process(
        self,
        exec_path: str,
        args: Sequence[str],
        env: Iterable[tuple[str, str]],
    ) -> SpawnProcessResult:
        """Start a program that connects to this display's Wayland socket."""
        log.info('Spawning subprocess with exec path "%s"', exec_path)
        auth_key = generate_auth_key()
        try:
            child = subprocess.Popen(
                [exec_path, *args],
                env=self._process_env(auth_key, env),
            )
        except OSError as exc:
            raise RuntimeError(
                f'Failed to launch process with path "{exec_path}": {exc}. '
                "Make sure your exec path exists."
            ) from exc
        return SpawnProcessResult(auth_key, child)