from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 600_000
DEFAULT_VIEW = "default"


@dataclass(frozen=True)
class RefreshSlot:
    start_hour: int
    end_hour: int
    interval_ms: int

    def covers(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


@dataclass(frozen=True)
class RefreshPolicy:
    slots: tuple[RefreshSlot, ...] = field(default_factory=tuple)
    default_interval_ms: int = DEFAULT_INTERVAL_MS

    @classmethod
    def from_slots(cls, slots: Sequence[RefreshSlot], default_interval_ms: int = DEFAULT_INTERVAL_MS) -> "RefreshPolicy":
        return cls(slots=tuple(slots), default_interval_ms=default_interval_ms)


def resolve_interval(hour: int, policy: RefreshPolicy) -> int:
    # first matching slot wins, slots are not normalized
    for slot in policy.slots:
        if slot.covers(hour):
            return slot.interval_ms
    return policy.default_interval_ms


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def _thread_timer(delay_seconds: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    return timer


class RefreshScheduler:
    """Re-polls the dashboard on a time-of-day dependent interval.

    One timer is armed at a time. Every armed timer gets a fresh token; a timer
    that fires after being superseded or cancelled sees a stale token and does
    nothing, and a re-arm that races a `stop()` loses. The poll callback owns
    its own error handling; anything it raises is logged and the scheduler
    re-arms regardless.

    Visibility is tracked per view (one per browser tab), so each tab coming
    back from hidden triggers its own immediate poll.
    """

    def __init__(
        self,
        poll: Callable[[], Any],
        policy: RefreshPolicy,
        *,
        clock: Callable[[], datetime] = datetime.now,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        self._poll = poll
        self._policy = policy
        self._clock = clock
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Timer | None = None
        self._token = 0
        # views currently hidden
        self._hidden_views: set[str] = set()

    @property
    def policy(self) -> RefreshPolicy:
        return self._policy

    @property
    def state(self) -> str:
        with self._lock:
            return "scheduled" if self._timer is not None else "idle"

    def is_hidden(self, view: str = DEFAULT_VIEW) -> bool:
        with self._lock:
            return view in self._hidden_views

    def current_interval_ms(self) -> int:
        return resolve_interval(self._clock().hour, self._policy)

    def start(self) -> int:
        return self._arm(expected_token=None)

    def stop(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._token += 1

    def on_visibility_change(self, hidden: bool, view: str = DEFAULT_VIEW) -> None:
        with self._lock:
            if hidden:
                self._hidden_views.add(view)
                return
            if view not in self._hidden_views:
                return
            self._hidden_views.discard(view)

        logger.info("Dashboard view %s became visible, refreshing immediately", view)
        self.stop()
        self._run_poll()
        self.start()

    def _arm(self, expected_token: int | None) -> int:
        interval_ms = self.current_interval_ms()
        with self._lock:
            if expected_token is not None and expected_token != self._token:
                # stopped or restarted since the poll finished
                return interval_ms
            self._cancel_locked()
            self._token += 1
            token = self._token
            timer = self._timer_factory(interval_ms / 1000.0, lambda: self._fire(token))
            self._timer = timer
        timer.start()
        logger.debug("Next dashboard refresh in %d ms", interval_ms)
        return interval_ms

    def _fire(self, token: int) -> None:
        with self._lock:
            if token != self._token:
                return
            self._timer = None
        self._run_poll()
        self._arm(expected_token=token)

    def _run_poll(self) -> None:
        try:
            self._poll()
        except Exception:
            logger.exception("Dashboard poll raised; keeping refresh schedule")

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
