from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from frontend.scheduler import DEFAULT_INTERVAL_MS, RefreshPolicy, RefreshSlot

LOGGER = logging.getLogger(__name__)

DEFAULT_LAYOUT_COLUMNS = 2
DEFAULT_ORACLE_PORT = 1521


class ServerConfig(BaseModel):
    public_base_path: str = "/"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    filename: str = ""
    max_size_mb: int = 10
    max_backups: int = 5


class DatabaseConfig(BaseModel):
    name: str
    lb_ip: str = ""
    prod_ip: str = ""
    dr_ip: str = ""
    port: int = DEFAULT_ORACLE_PORT
    service_name: str = ""
    username: str = ""
    password: str = ""


class TitlesConfig(BaseModel):
    main_title: str = ""
    prod_data_center: str = ""
    dr_data_center: str = ""


class LayoutConfig(BaseModel):
    columns: int = DEFAULT_LAYOUT_COLUMNS

    @field_validator("columns", mode="after")
    @classmethod
    def positive_columns(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_LAYOUT_COLUMNS


class RefreshSlotConfig(BaseModel):
    start_hour: int
    end_hour: int
    interval_ms: int


class FrontendSettings(BaseModel):
    load_balancer_ip: str = ""
    refresh_intervals: list[RefreshSlotConfig] = Field(default_factory=list)
    default_interval_ms: int = DEFAULT_INTERVAL_MS

    @field_validator("default_interval_ms", mode="after")
    @classmethod
    def positive_default_interval(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_INTERVAL_MS

    def to_refresh_policy(self) -> RefreshPolicy:
        return RefreshPolicy.from_slots(
            [RefreshSlot(slot.start_hour, slot.end_hour, slot.interval_ms) for slot in self.refresh_intervals],
            default_interval_ms=self.default_interval_ms,
        )


class DashboardConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    databases: list[DatabaseConfig] = Field(default_factory=list)
    titles: TitlesConfig = Field(default_factory=TitlesConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    frontend: FrontendSettings = Field(default_factory=FrontendSettings)

    @field_validator("server", "logging", "titles", "layout", "frontend", mode="before")
    @classmethod
    def null_section_is_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("databases", mode="before")
    @classmethod
    def null_databases_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def public_config(self) -> dict[str, Any]:
        """Subset of the config the dashboard page needs; never includes credentials."""
        return {
            "basePath": self.server.public_base_path,
            "layout": self.layout.model_dump(),
            "frontend": self.frontend.model_dump(),
            "titles": self.titles.model_dump(),
        }


def load_dashboard_config(path: str | Path) -> DashboardConfig:
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path} must contain a YAML mapping")
    return DashboardConfig.model_validate(raw)


def load_dashboard_config_or_default(path: str | Path) -> DashboardConfig:
    try:
        config = load_dashboard_config(path)
    except FileNotFoundError:
        LOGGER.warning("Config file %s not found, using defaults with no databases", path)
        return DashboardConfig()
    except (OSError, yaml.YAMLError, ValueError) as exc:
        # pydantic's ValidationError is a ValueError
        LOGGER.warning("Config file %s could not be loaded, using defaults with no databases: %s", path, exc)
        return DashboardConfig()
    LOGGER.info("Loaded %d databases from %s", len(config.databases), path)
    return config


class ConfigSource:
    """Serves the dashboard config, re-reading the YAML file when it changes on disk.

    The file's modification time is checked on every `current()` call. A new
    version replaces the served config only once it parses; otherwise the
    previous config stays in service.
    """

    def __init__(self, config: DashboardConfig, path: str | Path | None = None):
        self._config = config
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._mtime = self._stat()

    @classmethod
    def from_file(cls, path: str | Path) -> "ConfigSource":
        return cls(load_dashboard_config_or_default(path), path)

    @property
    def path(self) -> Path | None:
        return self._path

    def _stat(self) -> int | None:
        if self._path is None:
            return None
        try:
            return self._path.stat().st_mtime_ns
        except OSError:
            return None

    def current(self) -> DashboardConfig:
        mtime = self._stat()
        with self._lock:
            if mtime is None or mtime == self._mtime:
                return self._config
            self._mtime = mtime
            try:
                config = load_dashboard_config(self._path)
            except (OSError, yaml.YAMLError, ValueError) as exc:
                LOGGER.warning("Reloading %s failed, keeping previous config: %s", self._path, exc)
                return self._config
            self._config = config
            LOGGER.info("Reloaded %s: %d databases", self._path, len(config.databases))
            return config
