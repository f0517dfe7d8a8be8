from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import dashboard
from backend.services.status_collector import StatusCollector
from config.dashboard_config import ConfigSource, DashboardConfig
from config.logging_config import configure_logging
from config.settings import settings


def _route_prefix(base_path: str) -> str:
    prefix = "/" + str(base_path or "").strip("/")
    return "" if prefix == "/" else prefix


def create_app(
    config: DashboardConfig | None = None,
    collector: StatusCollector | None = None,
    *,
    enable_mock: bool | None = None,
) -> FastAPI:
    if config is None:
        source = ConfigSource.from_file(settings.config_file)
        config = source.current()
        configure_logging(config.logging.level or settings.log_level, config.logging)
    else:
        source = ConfigSource(config)
    if enable_mock is None:
        enable_mock = settings.use_mock_data

    app = FastAPI(title="DR Dashboard", version="1.0.0")
    app.state.config_source = source
    app.state.status_collector = collector or StatusCollector()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # the base path is fixed at startup; a reload only changes databases, titles and frontend settings
    prefix = _route_prefix(config.server.public_base_path)
    app.include_router(dashboard.router, prefix=prefix)
    if enable_mock:
        app.include_router(dashboard.mock_router, prefix=prefix)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
