from __future__ import annotations

import threading
from dataclasses import dataclass, replace

from frontend.grid_layout import GridGeometry
from frontend.status import DashboardSnapshot, NodeView

WIDE_LAYOUT_THRESHOLD = 4


@dataclass(frozen=True)
class RenderedDashboard:
    version: int = 0
    views: tuple[NodeView, ...] = ()
    error: str | None = None
    grid: GridGeometry = GridGeometry(columns=1, rows=1)
    timestamp: int = 0

    @property
    def wide_layout(self) -> bool:
        return len(self.views) > WIDE_LAYOUT_THRESHOLD


class DashboardRenderState:
    """Renderer handed to the controller; Dash callbacks read frames from it.

    Every change bumps `version`, which callbacks compare against the last
    version they painted to skip redundant updates.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._frame = RenderedDashboard()

    def current(self) -> RenderedDashboard:
        with self._lock:
            return self._frame

    def render(self, snapshot: DashboardSnapshot, views: tuple[NodeView, ...]) -> None:
        with self._lock:
            self._frame = replace(
                self._frame,
                version=self._frame.version + 1,
                views=views,
                error=None,
                timestamp=snapshot.timestamp,
            )

    def show_error(self, message: str) -> None:
        with self._lock:
            self._frame = replace(
                self._frame,
                version=self._frame.version + 1,
                views=(),
                error=message,
            )

    def apply_grid(self, geometry: GridGeometry) -> None:
        with self._lock:
            if geometry == self._frame.grid:
                return
            self._frame = replace(self._frame, version=self._frame.version + 1, grid=geometry)
