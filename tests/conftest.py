from __future__ import annotations

from typing import Any, Callable

import pytest

from backend.api.schemas import DatabaseStatus
from frontend.status import DatabaseNode


def make_status(**overrides: Any) -> DatabaseStatus:
    fields: dict[str, Any] = {
        "name": "ERP数据库",
        "load_balancer_ip": "172.16.10.100",
        "load_balancer_alive": True,
        "load_balancer_port_1521": True,
        "load_balancer_db_connect": True,
        "connections": 42,
        "production_ip": "10.10.1.10",
        "production_alive": True,
        "production_port_1521": True,
        "production_db_connect": True,
        "production_status": "READ WRITE",
        "production_role": "PRIMARY",
        "production_dgdelay": -1,
        "disaster_ip": "10.20.1.10",
        "disaster_alive": True,
        "disaster_port_1521": True,
        "disaster_db_connect": True,
        "disaster_status": "READ ONLY WITH APPLY",
        "disaster_role": "PHYSICAL STANDBY",
        "disaster_dgdelay": 3,
    }
    fields.update(overrides)
    return DatabaseStatus(**fields)


def make_node(**overrides: Any) -> DatabaseNode:
    return DatabaseNode.from_status(make_status(**overrides))


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]

    @property
    def active(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if timer.started and not timer.cancelled]


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()
