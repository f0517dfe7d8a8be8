from __future__ import annotations

from datetime import datetime
from typing import Any

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: Any) -> str:
    if value in (None, "", 0):
        return "-"

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value).strftime(DISPLAY_FORMAT)
        except (OverflowError, OSError, ValueError):
            return str(value)

    raw = str(value).strip()
    if not raw:
        return "-"

    normalized = raw.replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError:
        return raw

    if dt.tzinfo is not None:
        dt = dt.astimezone()

    return dt.strftime(DISPLAY_FORMAT)


def format_clock(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime(DISPLAY_FORMAT)
