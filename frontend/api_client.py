from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from backend.api.schemas import SnapshotEnvelope, Titles
from frontend.status import DashboardSnapshot, DatabaseNode

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class DashboardFetchError(Exception):
    """Base for every way a dashboard poll can fail."""


class TransportFailure(DashboardFetchError):
    pass


class DecodeFailure(DashboardFetchError):
    pass


class ApplicationFailure(DashboardFetchError):
    def __init__(self, code: int, message: str):
        super().__init__(message or f"backend returned code {code}")
        self.code = code


def join_api_path(base_path: str, endpoint: str) -> str:
    base = str(base_path or "/").strip() or "/"
    if not base.startswith("/"):
        base = f"/{base}"
    if not base.endswith("/"):
        base = f"{base}/"
    return base + str(endpoint).lstrip("/")


class DashboardApiClient:
    def __init__(
        self,
        backend_base: str,
        base_path: str = "/",
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        use_mock_data: bool = False,
        lang: str = "en",
    ):
        self.backend_base = backend_base.rstrip("/")
        self.base_path = base_path
        self.timeout = timeout
        self.use_mock_data = use_mock_data
        self.lang = lang
        if session is None:
            session = requests.Session()
            session.trust_env = False
        self.session = session

    def url(self, endpoint: str) -> str:
        return f"{self.backend_base}{join_api_path(self.base_path, endpoint)}"

    def get_json(self, endpoint: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request("GET", self.url(endpoint), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportFailure(f"request to {endpoint} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportFailure(f"{response.status_code} {response.text}")

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeFailure(f"response from {endpoint} is not JSON: {exc}") from exc

    def fetch_snapshot(self) -> DashboardSnapshot:
        if self.use_mock_data:
            payload = self.get_json("api/mock-data", params={"lang": self.lang})
        else:
            payload = self.get_json("api/data")

        if not isinstance(payload, dict):
            raise DecodeFailure("snapshot payload must be a JSON object")
        if payload.get("code") != 200:
            raise ApplicationFailure(_as_int(payload.get("code")), str(payload.get("message") or ""))

        try:
            envelope = SnapshotEnvelope.model_validate(payload)
        except ValidationError as exc:
            raise DecodeFailure(f"invalid snapshot payload: {exc}") from exc

        return DashboardSnapshot(
            nodes=tuple(DatabaseNode.from_status(item) for item in envelope.data),
            timestamp=envelope.timestamp,
        )

    def fetch_mock_titles(self, lang: str) -> dict[str, str]:
        payload = self.get_json("api/mock-data", params={"lang": lang})
        if not isinstance(payload, dict):
            raise DecodeFailure("mock payload must be a JSON object")
        if payload.get("code") != 200:
            raise ApplicationFailure(_as_int(payload.get("code")), str(payload.get("message") or ""))
        try:
            titles = Titles.model_validate(payload.get("titles") or {})
        except ValidationError as exc:
            raise DecodeFailure(f"invalid mock titles: {exc}") from exc
        return titles.model_dump()

    def fetch_translations(self, lang: str) -> dict[str, str]:
        payload = self.get_json(f"api/i18n/{lang}")
        if not isinstance(payload, dict):
            raise DecodeFailure("translation payload must be a JSON object")
        return {str(key): str(value) for key, value in payload.items()}

    def fetch_config(self) -> dict[str, Any]:
        payload = self.get_json("api/config")
        if not isinstance(payload, dict):
            raise DecodeFailure("config payload must be a JSON object")
        return payload


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
