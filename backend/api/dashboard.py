from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from backend.api.schemas import SUPPORTED_LANGUAGES, ApiResponse, MockApiResponse
from backend.services.mock_data import DEFAULT_MOCK_LANG, generate_mock_statuses, mock_titles
from backend.services.status_collector import StatusCollector
from config.dashboard_config import DashboardConfig

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"

router = APIRouter(prefix="/api", tags=["dashboard"])
# registered only when DASHBOARD_MOCK is on
mock_router = APIRouter(prefix="/api", tags=["mock"])


def _config(request: Request) -> DashboardConfig:
    return request.app.state.config_source.current()


def _collector(request: Request) -> StatusCollector:
    return request.app.state.status_collector


@router.get("/data")
async def get_data(request: Request) -> dict[str, Any]:
    config = _config(request)
    try:
        statuses = await _collector(request).collect(config.databases)
    except Exception as exc:
        logger.exception("Status collection failed")
        return ApiResponse(code=500, message=f"status collection failed: {exc}", timestamp=int(time.time())).model_dump()

    return ApiResponse(
        code=200,
        data=[item.model_dump() for item in statuses],
        message="success",
        timestamp=int(time.time()),
    ).model_dump()


@mock_router.get("/mock-data")
def get_mock_data(lang: str = Query(default=DEFAULT_MOCK_LANG)) -> dict[str, Any]:
    return MockApiResponse(
        code=200,
        data=generate_mock_statuses(lang),
        titles=mock_titles(lang),
        message="Mock data generated successfully",
        timestamp=int(time.time()),
    ).model_dump()


@router.get("/i18n/{lang}")
def get_translations(lang: str) -> Any:
    if lang not in SUPPORTED_LANGUAGES:
        return JSONResponse(status_code=404, content={"error": "Language not supported"})

    path = LOCALES_DIR / f"{lang}.json"
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError:
        return JSONResponse(status_code=404, content={"error": "Translation file not found"})


@router.get("/config")
def get_public_config(request: Request) -> dict[str, Any]:
    return _config(request).public_config()
