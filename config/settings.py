from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    config_file: str = os.getenv("DASHBOARD_CONFIG", "config.yaml")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    backend_host: str = os.getenv("BACKEND_HOST", "127.0.0.1")
    backend_port: int = int(os.getenv("BACKEND_PORT", "8080"))
    # must match server.public_base_path in the dashboard config
    backend_base_path: str = os.getenv("BACKEND_BASE_PATH", "/")

    frontend_host: str = os.getenv("FRONTEND_HOST", "127.0.0.1")
    frontend_port: int = int(os.getenv("FRONTEND_PORT", "8050"))

    default_lang: str = os.getenv("DASHBOARD_LANG", "zh")
    # true: serve and poll /api/mock-data (demo screenshots) instead of probing real databases
    use_mock_data: bool = _env_flag("DASHBOARD_MOCK", "false")
    api_timeout_seconds: float = float(os.getenv("API_TIMEOUT_SECONDS", "10"))


settings = Settings()
