from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from backend.api.schemas import DatabaseStatus
from backend.services import oracle_inspector, probes
from backend.services.oracle_inspector import InstanceDetails
from config.dashboard_config import DatabaseConfig

logger = logging.getLogger(__name__)


@dataclass
class InstanceState:
    alive: bool = False
    port_open: bool = False
    db_connected: bool = False
    status: str = "CHECKING"
    role: str = "UNKNOWN"
    delay_seconds: int = -1
    connections: int = -1


@dataclass
class LoadBalancerState:
    alive: bool = False
    port_open: bool = False
    db_connected: bool = False


class StatusCollector:
    """Probes every configured database pair and its load balancer concurrently.

    Probe failures never raise; they show up as false flags and the
    OFFLINE / PORT_ERROR / DB_CONNECTION_ERROR status strings.
    """

    def __init__(
        self,
        ping: Callable[[str], Awaitable[bool]] = probes.ping_host,
        check_port: Callable[[str, int], Awaitable[bool]] = probes.check_tcp_port,
        inspect: Callable[[str, DatabaseConfig, str], InstanceDetails] = oracle_inspector.inspect_instance,
        connect: Callable[[str, DatabaseConfig], bool] = oracle_inspector.can_connect,
    ):
        self._ping = ping
        self._check_port = check_port
        self._inspect = inspect
        self._connect = connect

    async def collect(self, databases: list[DatabaseConfig]) -> list[DatabaseStatus]:
        return list(await asyncio.gather(*(self.check_database(db) for db in databases)))

    async def check_database(self, db: DatabaseConfig) -> DatabaseStatus:
        lb, prod, dr = await asyncio.gather(
            self.check_load_balancer(db),
            self.check_instance(db.prod_ip, db, "Production"),
            self.check_instance(db.dr_ip, db, "Disaster Recovery"),
        )
        return DatabaseStatus(
            name=db.name,
            load_balancer_ip=db.lb_ip,
            load_balancer_alive=lb.alive,
            load_balancer_port_1521=lb.port_open,
            load_balancer_db_connect=lb.db_connected,
            connections=prod.connections,
            production_ip=db.prod_ip,
            production_alive=prod.alive,
            production_port_1521=prod.port_open,
            production_db_connect=prod.db_connected,
            production_status=prod.status,
            production_role=prod.role,
            production_dgdelay=prod.delay_seconds,
            disaster_ip=db.dr_ip,
            disaster_alive=dr.alive,
            disaster_port_1521=dr.port_open,
            disaster_db_connect=dr.db_connected,
            disaster_status=dr.status,
            disaster_role=dr.role,
            disaster_dgdelay=dr.delay_seconds,
        )

    async def check_load_balancer(self, db: DatabaseConfig) -> LoadBalancerState:
        state = LoadBalancerState()
        state.alive = await self._ping(db.lb_ip)
        if not state.alive:
            return state
        state.port_open = await self._check_port(db.lb_ip, db.port)
        if state.port_open:
            state.db_connected = await asyncio.to_thread(self._connect, db.lb_ip, db)
        return state

    async def check_instance(self, host: str, db: DatabaseConfig, instance_type: str) -> InstanceState:
        state = InstanceState()
        state.alive = await self._ping(host)
        if not state.alive:
            logger.info("%s instance of %s (%s) does not answer ping", instance_type, db.name, host)
            state.status = "OFFLINE"
            return state

        state.port_open = await self._check_port(host, db.port)
        if not state.port_open:
            logger.info("%s instance of %s (%s:%d) port closed", instance_type, db.name, host, db.port)
            state.status = "PORT_ERROR"
            return state

        details = await asyncio.to_thread(self._inspect, host, db, instance_type)
        state.db_connected = details.db_connected
        state.status = details.status
        state.role = details.role
        state.delay_seconds = details.delay_seconds
        state.connections = details.connections
        return state
