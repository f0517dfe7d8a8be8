from __future__ import annotations

import asyncio
import logging
import platform

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 3.0

_PING_SUCCESS_MARKERS = (
    "1 received",
    "2 received",
    "1 packets received",
    "2 packets received",
    "bytes from",
    "received = 1",
    "received = 2",
    "已接收 = 1",
    "已接收 = 2",
    "来自",
)


def _ping_command(ip: str) -> list[str]:
    if platform.system().lower() == "windows":
        return ["ping", "-n", "2", "-w", "1000", ip]
    return ["ping", "-c", "2", "-W", "1", ip]


def _decode_output(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        # Chinese Windows consoles answer in GBK
        return raw.decode("gbk", errors="replace")


def ping_output_indicates_reply(output: str) -> bool:
    lowered = output.lower()
    return any(marker in lowered for marker in _PING_SUCCESS_MARKERS)


async def ping_host(ip: str, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    if not ip:
        return False

    try:
        process = await asyncio.create_subprocess_exec(
            *_ping_command(ip),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        logger.warning("Cannot run ping for %s: %s", ip, exc)
        return False

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.warning("Ping %s timed out after %.1fs", ip, timeout)
        return False

    return ping_output_indicates_reply(_decode_output(stdout or b""))


async def check_tcp_port(ip: str, port: int, timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    if not ip or port <= 0:
        return False

    try:
        _reader, writer = await asyncio.wait_for(asyncio.open_connection(ip, port), timeout=timeout)
    except (OSError, asyncio.TimeoutError) as exc:
        logger.debug("Port %s:%s unreachable: %s", ip, port, exc)
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return True
