from __future__ import annotations

import random
from dataclasses import dataclass

from backend.api.schemas import DatabaseStatus, Titles

DEFAULT_MOCK_LANG = "en"

MOCK_DATABASE_NAMES = (
    "MES_DB", "ERP_DB", "SCM_DB", "WMS_DB", "PLM_DB", "CRM_DB",
    "QMS_DB", "HRM_DB", "FIN_DB", "BI_DB", "OA_DB", "DCS_DB",
)


@dataclass(frozen=True)
class MockVocabulary:
    primary: str
    physical_standby: str
    open: str
    read_only: str
    mounted: str


VOCABULARY: dict[str, MockVocabulary] = {
    "en": MockVocabulary(
        primary="PRIMARY",
        physical_standby="PHYSICAL STANDBY",
        open="OPEN",
        read_only="READ ONLY WITH APPLY",
        mounted="MOUNTED",
    ),
    "zh": MockVocabulary(
        primary="主数据库",
        physical_standby="物理备库",
        open="读写打开",
        read_only="只读应用",
        mounted="已挂载",
    ),
    "ja": MockVocabulary(
        primary="プライマリ",
        physical_standby="フィジカル・スタンバイ",
        open="オープン",
        read_only="READ ONLY WITH APPLY",
        mounted="マウント済み",
    ),
}

TITLES: dict[str, Titles] = {
    "en": Titles(
        main_title="Tier-1 Business Oracle DR Monitoring Dashboard (Mock)",
        prod_data_center="Production Data Center",
        dr_data_center="Disaster Recovery Data Center",
    ),
    "zh": Titles(
        main_title="一级业务Oracle容灾监控大盘 (模拟)",
        prod_data_center="生产数据中心",
        dr_data_center="容灾数据中心",
    ),
    "ja": Titles(
        main_title="ティア1ビジネスOracle DR監視ダッシュボード (モック)",
        prod_data_center="本番データセンター",
        dr_data_center="災害復旧データセンター",
    ),
}


def mock_titles(lang: str) -> Titles:
    return TITLES.get(lang, TITLES[DEFAULT_MOCK_LANG])


def generate_mock_statuses(lang: str, rng: random.Random | None = None) -> list[DatabaseStatus]:
    """Twelve healthy-looking pairs; every fourth standby is mounted, lagging and unreachable over SQL."""
    rng = rng or random.Random()
    vocab = VOCABULARY.get(lang, VOCABULARY[DEFAULT_MOCK_LANG])

    statuses: list[DatabaseStatus] = []
    for index, name in enumerate(MOCK_DATABASE_NAMES):
        degraded = index % 4 == 0
        if degraded:
            disaster_status = vocab.mounted
            disaster_delay = rng.randrange(120) + 60
        else:
            disaster_status = vocab.read_only
            disaster_delay = rng.randrange(20)

        statuses.append(
            DatabaseStatus(
                name=name,
                load_balancer_ip=f"172.16.10.{100 + index}",
                load_balancer_alive=True,
                load_balancer_port_1521=True,
                load_balancer_db_connect=True,
                connections=rng.randrange(150) + 50,
                production_ip=f"10.10.1.{10 + index}",
                production_alive=True,
                production_port_1521=True,
                production_db_connect=True,
                production_status=vocab.open,
                production_role=vocab.primary,
                production_dgdelay=0,
                disaster_ip=f"10.20.1.{10 + index}",
                disaster_alive=True,
                disaster_port_1521=True,
                disaster_db_connect=not degraded,
                disaster_status=disaster_status,
                disaster_role=vocab.physical_standby,
                disaster_dgdelay=disaster_delay,
            )
        )
    return statuses
