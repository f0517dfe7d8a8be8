from __future__ import annotations

import asyncio
import os

import pytest
import yaml
from fastapi.testclient import TestClient

from backend.main import create_app
from backend.services.oracle_inspector import InstanceDetails
from backend.services.status_collector import StatusCollector
from config.dashboard_config import ConfigSource, DashboardConfig

CONFIG = {
    "server": {"public_base_path": "/dr"},
    "databases": [
        {"name": "ERP数据库", "lb_ip": "172.16.10.100", "prod_ip": "10.10.1.10", "dr_ip": "10.20.1.10"},
        {"name": "MES数据库", "lb_ip": "172.16.10.101", "prod_ip": "10.10.1.11", "dr_ip": "10.20.1.11"},
    ],
    "titles": {"main_title": "Core DR"},
    "layout": {"columns": 3},
    "frontend": {
        "load_balancer_ip": "172.16.10.1",
        "refresh_intervals": [{"start_hour": 0, "end_hour": 6, "interval_ms": 60000}],
        "default_interval_ms": 10000,
    },
}

ONLINE = {"172.16.10.100", "10.10.1.10", "10.20.1.10", "172.16.10.101", "10.10.1.11"}
PORT_CLOSED = {"10.10.1.11"}


async def fake_ping(ip: str) -> bool:
    return ip in ONLINE


async def fake_port(ip: str, port: int) -> bool:
    return ip not in PORT_CLOSED


def fake_inspect(host, db, instance_type) -> InstanceDetails:
    if instance_type == "Production":
        return InstanceDetails(db_connected=True, status="READ WRITE", role="PRIMARY", connections=17)
    return InstanceDetails(db_connected=True, status="READ ONLY WITH APPLY", role="PHYSICAL STANDBY", delay_seconds=4)


def fake_connect(host, db) -> bool:
    return True


def _collector() -> StatusCollector:
    return StatusCollector(ping=fake_ping, check_port=fake_port, inspect=fake_inspect, connect=fake_connect)


@pytest.fixture
def client() -> TestClient:
    app = create_app(config=DashboardConfig.model_validate(CONFIG), collector=_collector(), enable_mock=True)
    return TestClient(app)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_routes_mount_under_public_base_path(client: TestClient) -> None:
    assert client.get("/dr/api/config").status_code == 200
    assert client.get("/api/config").status_code == 404


def test_data_reports_collected_status(client: TestClient) -> None:
    body = client.get("/dr/api/data").json()

    assert body["code"] == 200
    assert body["timestamp"] > 0
    erp, mes = body["data"]

    assert erp["name"] == "ERP数据库"
    assert erp["load_balancer_db_connect"] is True
    assert erp["production_role"] == "PRIMARY"
    assert erp["connections"] == 17
    assert erp["disaster_dgdelay"] == 4

    assert mes["production_alive"] is True
    assert mes["production_port_1521"] is False
    assert mes["production_status"] == "PORT_ERROR"
    assert mes["connections"] == -1
    assert mes["disaster_alive"] is False
    assert mes["disaster_status"] == "OFFLINE"
    assert mes["disaster_role"] == "UNKNOWN"


def test_data_collection_failure_is_code_500() -> None:
    class BrokenCollector(StatusCollector):
        async def collect(self, databases):
            raise RuntimeError("event loop exploded")

    app = create_app(config=DashboardConfig.model_validate(CONFIG), collector=BrokenCollector())
    body = TestClient(app).get("/dr/api/data").json()

    assert body["code"] == 500
    assert "event loop exploded" in body["message"]


def test_mock_data_uses_requested_language(client: TestClient) -> None:
    body = client.get("/dr/api/mock-data", params={"lang": "zh"}).json()

    assert body["code"] == 200
    assert len(body["data"]) == 12
    assert body["titles"]["prod_data_center"] == "生产数据中心"
    assert body["data"][1]["production_role"] == "主数据库"


def test_translations(client: TestClient) -> None:
    body = client.get("/dr/api/i18n/en").json()
    assert body["mainTitle"]
    assert body["targetProd"]


def test_unsupported_language_is_404(client: TestClient) -> None:
    response = client.get("/dr/api/i18n/fr")
    assert response.status_code == 404
    assert response.json() == {"error": "Language not supported"}


def test_public_config_hides_credentials(client: TestClient) -> None:
    body = client.get("/dr/api/config").json()

    assert body["basePath"] == "/dr"
    assert body["layout"] == {"columns": 3}
    assert body["frontend"]["default_interval_ms"] == 10000
    assert body["titles"]["main_title"] == "Core DR"
    assert "databases" not in body


def test_collector_skips_inspection_when_offline() -> None:
    inspected = []

    def inspect(host, db, instance_type):
        inspected.append(host)
        return InstanceDetails()

    async def dead(ip: str) -> bool:
        return False

    collector = StatusCollector(ping=dead, check_port=fake_port, inspect=inspect, connect=fake_connect)
    config = DashboardConfig.model_validate(CONFIG)

    statuses = asyncio.run(collector.collect(config.databases))

    assert inspected == []
    assert all(not item.load_balancer_alive for item in statuses)
    assert all(item.production_status == "OFFLINE" for item in statuses)


def test_mock_route_absent_unless_enabled() -> None:
    app = create_app(config=DashboardConfig.model_validate(CONFIG), collector=_collector(), enable_mock=False)
    client = TestClient(app)

    assert client.get("/dr/api/mock-data").status_code == 404
    assert client.get("/dr/api/config").status_code == 200


def test_config_changes_are_served_without_restart(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(CONFIG, allow_unicode=True), encoding="utf-8")
    app = create_app(config=DashboardConfig.model_validate(CONFIG), collector=_collector())
    app.state.config_source = ConfigSource.from_file(path)
    client = TestClient(app)
    assert len(client.get("/dr/api/data").json()["data"]) == 2

    updated = dict(CONFIG, databases=CONFIG["databases"][:1], titles={"main_title": "Reloaded"})
    path.write_text(yaml.safe_dump(updated, allow_unicode=True), encoding="utf-8")
    os.utime(path, (1_000, 1_000))

    assert len(client.get("/dr/api/data").json()["data"]) == 1
    assert client.get("/dr/api/config").json()["titles"]["main_title"] == "Reloaded"
