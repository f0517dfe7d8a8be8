from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Protocol

from frontend.api_client import DashboardFetchError
from frontend.grid_layout import GridGeometry, LayoutConstraints, fit
from frontend.status import DashboardSnapshot, NodeView, aggregate_snapshot

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_COLUMNS = 2


class Renderer(Protocol):
    def render(self, snapshot: DashboardSnapshot, views: tuple[NodeView, ...]) -> None: ...

    def show_error(self, message: str) -> None: ...

    def apply_grid(self, geometry: GridGeometry) -> None: ...


class DashboardController:
    """Runs one refresh cycle at a time: fetch, aggregate, render, then fit the grid.

    Holds only the latest snapshot so a viewport change can re-render without
    another fetch. Render and layout happen under one lock, so a relayout never
    applies a card count older than the snapshot on screen.
    """

    def __init__(
        self,
        fetch_snapshot: Callable[[], DashboardSnapshot],
        renderer: Renderer,
        constraints: LayoutConstraints | None = None,
        *,
        layout_columns: int = DEFAULT_LAYOUT_COLUMNS,
    ):
        self._fetch_snapshot = fetch_snapshot
        self._renderer = renderer
        self._constraints = constraints
        self._layout_columns = layout_columns if layout_columns > 0 else DEFAULT_LAYOUT_COLUMNS
        self._snapshot: DashboardSnapshot | None = None
        self._refresh_lock = threading.Lock()
        self._state_lock = threading.RLock()

    @property
    def snapshot(self) -> DashboardSnapshot | None:
        return self._snapshot

    @property
    def constraints(self) -> LayoutConstraints | None:
        return self._constraints

    def refresh(self) -> bool:
        if not self._refresh_lock.acquire(blocking=False):
            logger.debug("Refresh already in flight, coalescing trigger")
            return False
        try:
            try:
                snapshot = self._fetch_snapshot()
            except DashboardFetchError as exc:
                logger.error("Failed to fetch dashboard data: %s", exc)
                with self._state_lock:
                    self._snapshot = None
                    self._renderer.show_error(str(exc))
                return True

            with self._state_lock:
                self._snapshot = snapshot
                self._render_locked(snapshot)
            logger.info("Dashboard refreshed with %d databases", snapshot.card_count)
            return True
        finally:
            self._refresh_lock.release()

    def on_viewport_change(self, width: int, height: int) -> GridGeometry | None:
        with self._state_lock:
            if self._constraints is None:
                self._constraints = LayoutConstraints(viewport_width=int(width), viewport_height=int(height))
            else:
                self._constraints = self._constraints.with_viewport(width, height)

            if self._snapshot is None:
                return None
            return self._render_locked(self._snapshot)

    def geometry_for(self, card_count: int) -> GridGeometry:
        if self._constraints is None:
            rows = max(1, math.ceil(card_count / self._layout_columns))
            return GridGeometry(columns=self._layout_columns, rows=rows)
        return fit(card_count, self._constraints)

    def geometry_for_viewport(self, card_count: int, width: int, height: int) -> GridGeometry:
        """Fit for one particular viewport without touching the shared constraints.

        Each browser tab lays out its own copy of the frame with this.
        """
        with self._state_lock:
            base = self._constraints
        if base is None:
            base = LayoutConstraints(viewport_width=int(width), viewport_height=int(height))
        return fit(card_count, base.with_viewport(width, height))

    def _render_locked(self, snapshot: DashboardSnapshot) -> GridGeometry:
        self._renderer.render(snapshot, aggregate_snapshot(snapshot.nodes))
        geometry = self.geometry_for(snapshot.card_count)
        self._renderer.apply_grid(geometry)
        return geometry
