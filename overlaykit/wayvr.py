"""The compositor core: displays, their processes, clients and pending tasks."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Union

from overlaykit.config_wayvr import CompositorConfig
from overlaykit.display import Display, DisplayHideRequest, ProcessCleanup
from overlaykit.event_queue import SyncEventQueue
from overlaykit.handle import Handle, HandleVec
from overlaykit.process import ExternalProcess, ManagedProcess, Process, find_by_pid
from overlaykit.wayland_env import ProcessWayVREnv, WaylandEnv
from overlaykit.window import WindowManager

log = logging.getLogger(__name__)

INVALID_DISPLAY_HANDLE = "Invalid display handle"


@dataclass
class WayVRClient:
    """A connected Wayland client bound to one display."""

    client_id: Any
    display_handle: Handle
    pid: int


@dataclass(frozen=True)
class NewToplevel:
    """Task: a client created a toplevel surface that needs a display."""

    client_id: Any
    toplevel: Any


@dataclass(frozen=True)
class NewExternalProcess:
    """Task: a process we did not spawn connected to the compositor."""

    env: ProcessWayVREnv
    client_id: Any
    pid: int


@dataclass(frozen=True)
class ProcessTerminationRequest:
    """Task: ask a process to stop."""

    process_handle: Handle


WayVRTask = Union[NewToplevel, NewExternalProcess, ProcessTerminationRequest]


class WayVR:
    """Tracks displays, processes and clients and routes their events."""

    def __init__(self, config: CompositorConfig, wayland_env: WaylandEnv | None = None) -> None:
        log.info("Initializing WayVR")
        self.config = config
        self.wayland_env = wayland_env if wayland_env is not None else WaylandEnv()
        self.displays: HandleVec[Display] = HandleVec()
        self.processes: HandleVec[Process] = HandleVec()
        self.wm = WindowManager()
        self.clients: list[WayVRClient] = []
        self.tasks: SyncEventQueue[WayVRTask] = SyncEventQueue()
        self.signals: SyncEventQueue[DisplayHideRequest] = SyncEventQueue()
        self.redraw_requests: set[Any] = set()

    def add_client(self, client: WayVRClient) -> None:
        self.clients.append(client)

    def new_toplevel(self, client_id: Any, toplevel: Any) -> None:
        """Queue a freshly created toplevel surface for attachment to a display."""
        self.tasks.send(NewToplevel(client_id, toplevel))

    def _check_redraws(self) -> None:
        for _, display in self.displays.items():
            for entry in display.displayed_windows:
                if entry.toplevel in self.redraw_requests:
                    self.redraw_requests.discard(entry.toplevel)
                    display.wants_redraw = True

    def _reap_processes(self) -> None:
        finished = [
            (handle, process.display_handle)
            for handle, process in self.processes.items()
            if not process.is_running()
        ]
        for process_handle, display_handle in finished:
            self.processes.remove(process_handle)
            display = self.displays.get(display_handle)
            if display is not None:
                display.tasks.send(ProcessCleanup(process_handle))
                display.wants_redraw = True

    def _attach_toplevel(self, task: NewToplevel) -> None:
        client = next((c for c in self.clients if c.client_id == task.client_id), None)
        if client is None:
            return
        window_handle = self.wm.create_window(task.toplevel)
        process_handle = find_by_pid(self.processes, client.pid)
        if process_handle is None:
            log.error(
                "WayVR window creation failed: Unexpected process ID %d. "
                "It wasn't registered before.",
                client.pid,
            )
            return
        display = self.displays.get(client.display_handle)
        if display is None:
            log.error("Could not attach window handle into display")
            return
        display.add_window(window_handle, process_handle, task.toplevel)

    def tick_events(self) -> list[NewExternalProcess]:
        """Advance one frame; return external processes awaiting a display."""
        results: list[NewExternalProcess] = []

        self._check_redraws()
        self._reap_processes()

        for handle, display in self.displays.items():
            display.tick(self.config, handle, self.signals)

        while (task := self.tasks.read()) is not None:
            if isinstance(task, NewExternalProcess):
                results.append(task)
            elif isinstance(task, NewToplevel):
                self._attach_toplevel(task)
            elif isinstance(task, ProcessTerminationRequest):
                process = self.processes.get(task.process_handle)
                if process is not None:
                    process.terminate()

        return results

    def set_display_visible(self, display: Handle, visible: bool) -> None:
        target = self.displays.get(display)
        if target is not None:
            target.set_visible(visible)

    def primary_display(self) -> Handle | None:
        return self.displays.find(lambda display: display.primary)

    def display_by_name(self, name: str) -> Handle | None:
        return self.displays.find(lambda display: display.name == name)

    def create_display(self, width: int, height: int, name: str, primary: bool) -> Handle:
        display = Display(self.wm, self.wayland_env, width, height, name, primary)
        return self.displays.add(display)

    def destroy_display(self, handle: Handle) -> None:
        self.displays.remove(handle)

    def process_query(
        self,
        display_handle: Handle,
        exec_path: str,
        args: Sequence[str],
        env: Iterable[tuple[str, str]] = (),
    ) -> Handle | None:
        """Return a spawned process with the same display, path and arguments."""
        wanted_args = list(args)
        return self.processes.find(
            lambda process: isinstance(process, ManagedProcess)
            and process.display_handle == display_handle
            and process.exec_path == exec_path
            and process.args == wanted_args
        )

    def terminate_process(self, process_handle: Handle) -> None:
        """Queue a termination request, carried out on the next tick."""
        self.tasks.send(ProcessTerminationRequest(process_handle))

    def add_external_process(self, display_handle: Handle, pid: int) -> Handle:
        return self.processes.add(ExternalProcess(pid=pid, display_handle=display_handle))

    def spawn_process(
        self,
        display_handle: Handle,
        exec_path: str,
        args: Sequence[str],
        env: Iterable[tuple[str, str]] = (),
    ) -> Handle:
        """Start a program on a display; raises LookupError for an unknown display."""
        display = self.displays.get(display_handle)
        if display is None:
            raise LookupError(INVALID_DISPLAY_HANDLE)
        env_pairs = [(key, value) for key, value in env]
        result = display.spawn_process(exec_path, list(args), env_pairs)
        return self.processes.add(
            ManagedProcess(
                auth_key=result.auth_key,
                child=result.child,
                display_handle=display_handle,
                exec_path=exec_path,
                args=list(args),
                env=env_pairs,
            )
        )