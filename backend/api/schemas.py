from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


SUPPORTED_LANGUAGES = ("en", "zh", "ja")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DatabaseStatus(BaseModel):
    name: str
    load_balancer_ip: str = ""
    load_balancer_alive: bool = False
    load_balancer_port_1521: bool = False
    load_balancer_db_connect: bool = False
    connections: int | None = None
    production_ip: str = ""
    production_alive: bool = False
    production_port_1521: bool = False
    production_db_connect: bool = False
    production_status: str | None = None
    production_role: str | None = None
    production_dgdelay: int | None = None
    disaster_ip: str = ""
    disaster_alive: bool = False
    disaster_port_1521: bool = False
    disaster_db_connect: bool = False
    disaster_status: str | None = None
    disaster_role: str | None = None
    disaster_dgdelay: int | None = None

    @field_validator(
        "production_status",
        "production_role",
        "disaster_status",
        "disaster_role",
        mode="before",
    )
    @classmethod
    def normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)


class Titles(BaseModel):
    main_title: str = ""
    prod_data_center: str = ""
    dr_data_center: str = ""


class ApiResponse(BaseModel):
    code: int
    data: Any = None
    message: str = ""
    timestamp: int = 0


class MockApiResponse(ApiResponse):
    data: list[DatabaseStatus] = Field(default_factory=list)
    titles: Titles = Field(default_factory=Titles)


class SnapshotEnvelope(BaseModel):
    """Successful `/api/data` or `/api/mock-data` body as seen by the dashboard."""

    code: int
    data: list[DatabaseStatus] = Field(default_factory=list)
    message: str = ""
    timestamp: int = 0

    @field_validator("data", mode="before")
    @classmethod
    def null_data_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value
