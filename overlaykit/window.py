"""Windows placed on a virtual display and their manager."""

from __future__ import annotations

from typing import Any

from overlaykit.handle import Handle, HandleVec


class Window:
    """A toplevel surface with a position and size on its display."""

    def __init__(self, toplevel: Any) -> None:
        self.toplevel = toplevel
        self.pos_x = 0
        self.pos_y = 0
        self.size_x = 0
        self.size_y = 0

    def set_pos(self, pos_x: int, pos_y: int) -> None:
        self.pos_x = pos_x
        self.pos_y = pos_y

    def set_size(self, size_x: int, size_y: int) -> None:
        """Resize the window and ask the toplevel to reconfigure, if it can."""
        configure = getattr(self.toplevel, "configure", None)
        if callable(configure):
            configure(size_x, size_y)
        self.size_x = size_x
        self.size_y = size_y

    def contains(self, x: int, y: int) -> bool:
        return (
            self.pos_x <= x < self.pos_x + self.size_x
            and self.pos_y <= y < self.pos_y + self.size_y
        )


class WindowManager:
    """Owns every window, addressed by handle."""

    def __init__(self) -> None:
        self.windows: HandleVec[Window] = HandleVec()

    def find_window_handle(self, toplevel: Any) -> Handle | None:
        return self.windows.find(lambda window: window.toplevel == toplevel)

    def create_window(self, toplevel: Any) -> Handle:
        return self.windows.add(Window(toplevel))