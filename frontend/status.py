from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from backend.api.schemas import DatabaseStatus

Side = Literal["production", "disaster"]
Health = Literal["online", "warning", "offline"]
Level = Literal["nominal", "degraded", "critical"]

TARGET_PROD = "targetProd"
TARGET_DR = "targetDR"
TARGET_OFFLINE = "targetOffline"

PRIMARY_ROLE = "PRIMARY"
WARNING_LABEL = "Warning"

DELAY_NOMINAL_MAX_SECONDS = 5
DELAY_DEGRADED_MAX_SECONDS = 60
LB_NAME_SUFFIX = "数据库"

DEFAULT_ROLES: dict[str, str] = {"production": "Primary", "disaster": "Standby"}


@dataclass(frozen=True)
class InstanceTelemetry:
    ip: str
    alive: bool
    port_alive: bool
    db_connect: bool
    status: str | None = None
    role: str | None = None
    connections: int | None = None
    delay_seconds: int | None = None


@dataclass(frozen=True)
class LoadBalancerTelemetry:
    ip: str
    alive: bool
    port_alive: bool
    db_connect: bool


@dataclass(frozen=True)
class DatabaseNode:
    name: str
    production: InstanceTelemetry
    disaster: InstanceTelemetry
    load_balancer: LoadBalancerTelemetry

    @classmethod
    def from_status(cls, item: DatabaseStatus) -> "DatabaseNode":
        return cls(
            name=item.name,
            production=InstanceTelemetry(
                ip=item.production_ip,
                alive=item.production_alive,
                port_alive=item.production_port_1521,
                db_connect=item.production_db_connect,
                status=item.production_status,
                role=item.production_role,
                connections=item.connections,
            ),
            disaster=InstanceTelemetry(
                ip=item.disaster_ip,
                alive=item.disaster_alive,
                port_alive=item.disaster_port_1521,
                db_connect=item.disaster_db_connect,
                status=item.disaster_status,
                role=item.disaster_role,
                delay_seconds=item.disaster_dgdelay,
            ),
            load_balancer=LoadBalancerTelemetry(
                ip=item.load_balancer_ip,
                alive=item.load_balancer_alive,
                port_alive=item.load_balancer_port_1521,
                db_connect=item.load_balancer_db_connect,
            ),
        )


@dataclass(frozen=True)
class DashboardSnapshot:
    nodes: tuple[DatabaseNode, ...]
    timestamp: int = 0

    @property
    def card_count(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class SideStatus:
    label: str
    role: str
    overall: Health


@dataclass(frozen=True)
class Indicators:
    ping: bool
    port: bool
    db_connect: bool


@dataclass(frozen=True)
class SideView:
    side: Side
    ip: str
    status: SideStatus
    indicators: Indicators
    is_lb_target: bool
    # production only: shown while both sides are alive
    show_data_flow: bool = False
    connections: int | None = None
    connections_level: Level | None = None
    # disaster only: shown while the standby is alive
    delay_seconds: int | None = None
    delay_level: Level | None = None


@dataclass(frozen=True)
class LoadBalancerView:
    name: str
    ip: str
    target: str
    indicators: Indicators


@dataclass(frozen=True)
class NodeView:
    name: str
    production: SideView
    disaster: SideView
    load_balancer: LoadBalancerView


def _reported(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _instance(node: DatabaseNode, side: Side) -> InstanceTelemetry:
    if side == "production":
        return node.production
    if side == "disaster":
        return node.disaster
    raise ValueError(f"Unknown side: {side}")


def side_label(instance: InstanceTelemetry) -> str:
    reported = _reported(instance.status)
    if reported is not None:
        return reported
    return "OK" if instance.alive else "Offline"


def side_role(instance: InstanceTelemetry, side: Side) -> str:
    reported = _reported(instance.role)
    if reported is not None:
        return reported
    return DEFAULT_ROLES[side]


def overall_health(instance: InstanceTelemetry, label: str) -> Health:
    if instance.alive and instance.port_alive and instance.db_connect:
        return "warning" if label == WARNING_LABEL else "online"
    if instance.alive or instance.port_alive:
        return "warning"
    return "offline"


def derive_side(node: DatabaseNode, side: Side) -> SideStatus:
    instance = _instance(node, side)
    label = side_label(instance)
    return SideStatus(label=label, role=side_role(instance, side), overall=overall_health(instance, label))


def derive_routing_target(node: DatabaseNode) -> str:
    if not node.load_balancer.alive:
        return TARGET_OFFLINE
    if node.production.alive and node.production.role == PRIMARY_ROLE:
        return TARGET_PROD
    if node.disaster.alive and node.disaster.role == PRIMARY_ROLE:
        return TARGET_DR
    return TARGET_OFFLINE


def is_replicating(node: DatabaseNode) -> bool:
    return node.production.alive and node.disaster.alive


def delay_level(seconds: int | float | None) -> Level:
    if seconds is None or seconds <= DELAY_NOMINAL_MAX_SECONDS:
        return "nominal"
    if seconds <= DELAY_DEGRADED_MAX_SECONDS:
        return "degraded"
    return "critical"


def connections_level(count: int | None) -> Level:
    if count is None or count < 1:
        return "critical"
    return "nominal"


def lb_display_name(name: str) -> str:
    return name.split(LB_NAME_SUFFIX)[0]


def _indicators(alive: bool, port_alive: bool, db_connect: bool) -> Indicators:
    return Indicators(ping=alive, port=port_alive, db_connect=db_connect)


def aggregate_node(node: DatabaseNode) -> NodeView:
    target = derive_routing_target(node)
    prod, dr = node.production, node.disaster

    replicating = is_replicating(node)
    production = SideView(
        side="production",
        ip=prod.ip,
        status=derive_side(node, "production"),
        indicators=_indicators(prod.alive, prod.port_alive, prod.db_connect),
        is_lb_target=target == TARGET_PROD,
        show_data_flow=replicating,
        connections=prod.connections if replicating else None,
        connections_level=connections_level(prod.connections) if replicating else None,
    )
    disaster = SideView(
        side="disaster",
        ip=dr.ip,
        status=derive_side(node, "disaster"),
        indicators=_indicators(dr.alive, dr.port_alive, dr.db_connect),
        is_lb_target=target == TARGET_DR,
        delay_seconds=dr.delay_seconds if dr.alive else None,
        delay_level=delay_level(dr.delay_seconds) if dr.alive else None,
    )
    lb = node.load_balancer
    load_balancer = LoadBalancerView(
        name=lb_display_name(node.name),
        ip=lb.ip,
        target=target,
        indicators=_indicators(lb.alive, lb.port_alive, lb.db_connect),
    )
    return NodeView(name=node.name, production=production, disaster=disaster, load_balancer=load_balancer)


def aggregate_snapshot(nodes: Sequence[DatabaseNode]) -> tuple[NodeView, ...]:
    return tuple(aggregate_node(node) for node in nodes)
