from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import oracledb

from config.dashboard_config import DatabaseConfig

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 5

DATABASE_INFO_SQL = "SELECT DATABASE_ROLE, OPEN_MODE FROM V$DATABASE"
DATAGUARD_LAG_SQL = (
    "SELECT NAME, VALUE FROM V$DATAGUARD_STATS WHERE NAME IN ('apply lag', 'transport lag')"
)
BUSINESS_SESSIONS_SQL = "SELECT COUNT(*) FROM V$SESSION WHERE TYPE != 'BACKGROUND' AND STATUS = 'ACTIVE'"

LAG_PATTERN = re.compile(r"^\+(\d+) (\d+):(\d+):(\d+)$")


class LagFormatError(ValueError):
    pass


def parse_lag(value: str | None) -> int:
    """Convert an Oracle interval string such as '+00 00:01:05' to seconds."""
    text = (value or "").strip()
    if not text:
        return 0
    match = LAG_PATTERN.match(text)
    if match is None:
        raise LagFormatError(f"invalid lag format: expected '+DD HH:MI:SS', got {text!r}")
    days, hours, minutes, seconds = (int(part) for part in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def total_lag_seconds(rows: list[tuple[Any, Any]]) -> int:
    """Transport lag plus apply lag; -1 when Data Guard reports nothing."""
    lags: dict[str, str | None] = {}
    for name, value in rows:
        if name in ("transport lag", "apply lag"):
            lags[name] = value
    if not lags:
        return -1
    return parse_lag(lags.get("transport lag")) + parse_lag(lags.get("apply lag"))


def _dsn(host: str, db: DatabaseConfig) -> str:
    return oracledb.makedsn(host, db.port, service_name=db.service_name)


def _connect(host: str, db: DatabaseConfig) -> oracledb.Connection:
    return oracledb.connect(
        user=db.username,
        password=db.password,
        dsn=_dsn(host, db),
        tcp_connect_timeout=CONNECT_TIMEOUT_SECONDS,
    )


def can_connect(host: str, db: DatabaseConfig) -> bool:
    try:
        with _connect(host, db) as connection:
            connection.ping()
    except oracledb.Error as exc:
        logger.debug("Connection test to %s (%s) failed: %s", db.name, host, exc)
        return False
    return True


@dataclass
class InstanceDetails:
    db_connected: bool = False
    status: str = "DB_CONNECTION_ERROR"
    role: str = "UNKNOWN"
    delay_seconds: int = -1
    connections: int = -1


def inspect_instance(host: str, db: DatabaseConfig, instance_type: str) -> InstanceDetails:
    """Query role, open mode and lag or session count from a reachable instance.

    Runs synchronously; callers on the event loop wrap it in `asyncio.to_thread`.
    """
    details = InstanceDetails()
    try:
        connection = _connect(host, db)
    except oracledb.Error as exc:
        logger.warning("Could not connect to %s database %s (%s:%d): %s", instance_type, db.name, host, db.port, exc)
        return details

    details.db_connected = True
    with connection:
        cursor = connection.cursor()
        try:
            cursor.execute(DATABASE_INFO_SQL)
            row = cursor.fetchone()
        except oracledb.Error as exc:
            logger.warning("Failed to get %s database info for %s (%s): %s", instance_type, db.name, host, exc)
            details.status = "INFO_FETCH_FAILED"
            return details

        role, open_mode = (row or ("", ""))
        if role:
            details.role = str(role)
        details.status = str(open_mode or "")

        if details.status == "READ WRITE":
            if instance_type == "Production":
                try:
                    cursor.execute(BUSINESS_SESSIONS_SQL)
                    details.connections = int(cursor.fetchone()[0])
                except oracledb.Error as exc:
                    logger.warning("Failed to count sessions for %s (%s): %s", db.name, host, exc)
        elif details.status:
            try:
                cursor.execute(DATAGUARD_LAG_SQL)
                details.delay_seconds = total_lag_seconds(cursor.fetchall())
            except (oracledb.Error, LagFormatError) as exc:
                logger.warning("Failed to get Data Guard lag for %s (%s): %s", db.name, host, exc)
    return details
