from __future__ import annotations

import logging
import os
import socket
import threading
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import dash
import uvicorn
from dash import Dash, Input, Output, State, html
from dash.exceptions import PreventUpdate

from config.dashboard_config import FrontendSettings, LayoutConfig, TitlesConfig
from config.logging_config import configure_logging
from config.settings import settings
from frontend.api_client import DashboardApiClient, DashboardFetchError
from frontend.components.db_card import db_card
from frontend.components.lb_item import lb_item
from frontend.controller import DashboardController
from frontend.i18n import TranslationCatalog, Translator
from frontend.pages import dashboard as dashboard_page
from frontend.render_state import DashboardRenderState, RenderedDashboard
from frontend.scheduler import RefreshScheduler
from frontend.time_utils import format_clock, format_timestamp

BACKEND_BASE = f"http://{settings.backend_host}:{settings.backend_port}"
LOGGER = logging.getLogger(__name__)
EMBED_BACKEND = os.getenv("EMBED_BACKEND", "true").lower() in {"1", "true", "yes", "on"}
EMBED_BACKEND_WAIT_SECONDS = float(os.getenv("EMBED_BACKEND_WAIT_SECONDS", "20"))
BACKEND_HEALTH_TIMEOUT_SECONDS = float(os.getenv("BACKEND_HEALTH_TIMEOUT_SECONDS", "1.2"))
_BACKEND_THREAD: threading.Thread | None = None
MOCK_SNAPSHOT_LANG = "en"

API_CLIENT = DashboardApiClient(
    BACKEND_BASE,
    settings.backend_base_path,
    timeout=settings.api_timeout_seconds,
    use_mock_data=settings.use_mock_data,
    # mock roles and statuses stay English so each tab translates them like live ones
    lang=MOCK_SNAPSHOT_LANG,
)
TRANSLATIONS = TranslationCatalog(API_CLIENT.fetch_translations)
MOCK_TITLES = TranslationCatalog(API_CLIENT.fetch_mock_titles) if settings.use_mock_data else None


@dataclass
class DashboardRuntime:
    frontend: FrontendSettings
    layout: LayoutConfig
    titles: TitlesConfig
    render_state: DashboardRenderState
    controller: DashboardController
    scheduler: RefreshScheduler


_RUNTIME: DashboardRuntime | None = None
_RUNTIME_LOCK = threading.Lock()


def _backend_health_url() -> str:
    return f"{BACKEND_BASE}/health"


def _backend_probe_host() -> str:
    host = str(settings.backend_host).strip()
    if host in {"", "0.0.0.0", "::"}:
        return "127.0.0.1"
    return host


def _backend_port_open(timeout_seconds: float = 1.0) -> bool:
    try:
        with socket.create_connection((_backend_probe_host(), int(settings.backend_port)), timeout=timeout_seconds):
            return True
    except OSError:
        return False


def _backend_ready(timeout_seconds: float = BACKEND_HEALTH_TIMEOUT_SECONDS) -> bool:
    try:
        response = API_CLIENT.session.get(_backend_health_url(), timeout=timeout_seconds)
        if response.status_code != 200:
            return _backend_port_open(timeout_seconds=min(timeout_seconds, 1.0))
        payload = response.json() if response.content else {}
        if not isinstance(payload, dict) or payload.get("status") == "ok":
            return True
        return _backend_port_open(timeout_seconds=min(timeout_seconds, 1.0))
    except Exception:
        return _backend_port_open(timeout_seconds=min(timeout_seconds, 1.0))


def _run_embedded_backend() -> None:
    uvicorn.run(
        "backend.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


def _start_embedded_backend() -> None:
    global _BACKEND_THREAD
    if _BACKEND_THREAD and _BACKEND_THREAD.is_alive():
        return
    _BACKEND_THREAD = threading.Thread(target=_run_embedded_backend, name="dashboard-backend", daemon=True)
    _BACKEND_THREAD.start()


def _wait_backend_ready(max_wait_seconds: float) -> bool:
    deadline = time.monotonic() + max_wait_seconds
    while time.monotonic() < deadline:
        if _backend_ready():
            return True
        time.sleep(0.2)
    return _backend_ready()


def _load_public_config() -> tuple[FrontendSettings, LayoutConfig, TitlesConfig]:
    try:
        payload = API_CLIENT.fetch_config()
    except DashboardFetchError as exc:
        LOGGER.warning("Failed to load dashboard config from backend, using defaults: %s", exc)
        return FrontendSettings(), LayoutConfig(), TitlesConfig()

    return (
        FrontendSettings.model_validate(payload.get("frontend") or {}),
        LayoutConfig.model_validate(payload.get("layout") or {}),
        TitlesConfig.model_validate(payload.get("titles") or {}),
    )


def build_runtime() -> DashboardRuntime:
    frontend, layout, titles = _load_public_config()
    render_state = DashboardRenderState()
    controller = DashboardController(
        API_CLIENT.fetch_snapshot,
        render_state,
        layout_columns=layout.columns,
    )
    scheduler = RefreshScheduler(controller.refresh, frontend.to_refresh_policy())
    controller.refresh()
    scheduler.start()
    return DashboardRuntime(
        frontend=frontend,
        layout=layout,
        titles=titles,
        render_state=render_state,
        controller=controller,
        scheduler=scheduler,
    )


def runtime() -> DashboardRuntime:
    global _RUNTIME
    with _RUNTIME_LOCK:
        if _RUNTIME is None:
            _RUNTIME = build_runtime()
        return _RUNTIME


def _lang_from_search(search: Any) -> str:
    query = parse_qs(str(search or "").lstrip("?"))
    values = query.get("lang") or []
    return values[0] if values and values[0] else settings.default_lang


def _translator(search: Any) -> Translator:
    return TRANSLATIONS.get(_lang_from_search(search))


def _title(reported: str | None, configured: str, t: Translator, key: str) -> str:
    return reported or configured or t(key)


app: Dash = Dash(__name__, suppress_callback_exceptions=True)
app.title = "DR Dashboard"
app.layout = html.Div(
    [dashboard_page.layout()],
    style={"margin": "0 auto", "padding": "16px"},
)

app.clientside_callback(
    """
    function(_n, previous) {
        const view = (previous && previous.view)
            || Math.random().toString(36).slice(2) + Date.now().toString(36);
        const current = {
            view: view,
            width: window.innerWidth,
            height: window.innerHeight,
            hidden: document.hidden
        };
        if (previous && previous.width === current.width
                && previous.height === current.height
                && previous.hidden === current.hidden) {
            return window.dash_clientside.no_update;
        }
        return current;
    }
    """,
    Output("dashboard-viewport-store", "data"),
    Input("dashboard-tick", "n_intervals"),
    State("dashboard-viewport-store", "data"),
)


def _viewport_size(viewport: Any) -> tuple[int, int] | None:
    if not isinstance(viewport, dict):
        return None
    try:
        width = int(viewport.get("width") or 0)
        height = int(viewport.get("height") or 0)
    except (TypeError, ValueError):
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


@app.callback(
    Output("dashboard-viewport-ack", "data"),
    Input("dashboard-viewport-store", "data"),
    prevent_initial_call=True,
)
def sync_visibility(viewport: Any):
    if not isinstance(viewport, dict) or not viewport.get("view"):
        raise PreventUpdate

    runtime().scheduler.on_visibility_change(bool(viewport.get("hidden")), str(viewport["view"]))
    return viewport


@app.callback(
    Output("production-container", "children"),
    Output("disaster-container", "children"),
    Output("lb-system-list", "children"),
    Output("production-container", "style"),
    Output("disaster-container", "style"),
    Output("dashboard-error", "children"),
    Output("dashboard-container", "className"),
    Output("dashboard-lb-ip-value", "children"),
    Output("dashboard-last-updated", "children"),
    Output("dashboard-render-version", "data"),
    Input("dashboard-tick", "n_intervals"),
    Input("dashboard-url", "search"),
    Input("dashboard-viewport-store", "data"),
    State("dashboard-render-version", "data"),
)
def render_dashboard(_n: int, search: Any, viewport: Any, painted_version: Any):
    state = runtime()
    frame: RenderedDashboard = state.render_state.current()

    ctx = dash.callback_context
    triggered_id = ctx.triggered[0]["prop_id"].split(".")[0] if ctx.triggered else ""
    if triggered_id == "dashboard-tick" and frame.version == painted_version:
        raise PreventUpdate

    # every tab fits the shared frame to its own window
    size = _viewport_size(viewport)
    if size is None:
        geometry = frame.grid
    else:
        geometry = state.controller.geometry_for_viewport(len(frame.views), *size)

    t = _translator(search)
    production_cards = [db_card(view, "production", t) for view in frame.views]
    disaster_cards = [db_card(view, "disaster", t) for view in frame.views]
    lb_items = [lb_item(view, t) for view in frame.views]

    error = ""
    if frame.error is not None:
        error = f"{t('dataLoadError')}: {frame.error}"

    lb_ip = (state.frontend.load_balancer_ip or "N/A") if frame.views else "N/A"
    last_updated = f"{t('lastUpdated')}: {format_timestamp(frame.timestamp)}"
    grid = dashboard_page.grid_style(geometry.columns)
    class_name = "dashboard wide-layout" if frame.wide_layout else "dashboard"

    return (
        production_cards,
        disaster_cards,
        lb_items,
        grid,
        grid,
        error,
        class_name,
        lb_ip,
        last_updated,
        frame.version,
    )


@app.callback(
    Output("dashboard-main-title", "children"),
    Output("dashboard-prod-title", "children"),
    Output("dashboard-dr-title", "children"),
    Output("dashboard-lb-title", "children"),
    Output("dashboard-lb-ip-label", "children"),
    Input("dashboard-url", "search"),
)
def apply_titles(search: Any):
    state = runtime()
    lang = _lang_from_search(search)
    t = TRANSLATIONS.get(lang)
    reported = MOCK_TITLES.get(lang) if MOCK_TITLES is not None else Translator(lang)
    return (
        _title(reported.label("main_title", ""), state.titles.main_title, t, "mainTitle"),
        _title(reported.label("prod_data_center", ""), state.titles.prod_data_center, t, "prodDataCenter"),
        _title(reported.label("dr_data_center", ""), state.titles.dr_data_center, t, "drDataCenter"),
        t("loadBalancer"),
        t.label("lbIpLabel", "IP"),
    )


@app.callback(
    Output("dashboard-current-time", "children"),
    Input("dashboard-tick", "n_intervals"),
)
def update_current_time(_n: int):
    return format_clock()


if __name__ == "__main__":
    configure_logging(settings.log_level)
    # When EMBED_BACKEND=true, `python app.py` starts backend and frontend together.
    if EMBED_BACKEND:
        if _backend_ready():
            LOGGER.info("Backend already reachable at %s", BACKEND_BASE)
        else:
            LOGGER.info("Starting embedded backend on %s", BACKEND_BASE)
            _start_embedded_backend()
            if _wait_backend_ready(EMBED_BACKEND_WAIT_SECONDS):
                LOGGER.info("Embedded backend is ready")
            else:
                backend_thread_alive = bool(_BACKEND_THREAD and _BACKEND_THREAD.is_alive())
                if not backend_thread_alive:
                    raise RuntimeError(
                        "Embedded backend exited before becoming ready at "
                        f"{BACKEND_BASE}. Please check backend startup logs."
                    )
                LOGGER.warning(
                    "Embedded backend health probe timed out after %.1fs, but backend thread is alive; "
                    "frontend will continue to start.",
                    EMBED_BACKEND_WAIT_SECONDS,
                )
        runtime()
        # Reloader would start a second backend and a second scheduler.
        app.run(
            host=settings.frontend_host,
            port=settings.frontend_port,
            debug=True,
            use_reloader=False,
        )
    else:
        if not _backend_ready():
            LOGGER.warning("Backend is not reachable at %s", BACKEND_BASE)
        runtime()
        app.run(host=settings.frontend_host, port=settings.frontend_port, debug=True, use_reloader=False)
