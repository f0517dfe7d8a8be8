from __future__ import annotations

import itertools

import pytest

from conftest import make_node
from frontend.status import (
    TARGET_DR,
    TARGET_OFFLINE,
    TARGET_PROD,
    aggregate_node,
    aggregate_snapshot,
    connections_level,
    delay_level,
    derive_routing_target,
    derive_side,
    is_replicating,
    lb_display_name,
)


def _expected_target(lb_alive: bool, prod_alive: bool, prod_role: str, dr_alive: bool, dr_role: str) -> str:
    if not lb_alive:
        return TARGET_OFFLINE
    if prod_alive and prod_role == "PRIMARY":
        return TARGET_PROD
    if dr_alive and dr_role == "PRIMARY":
        return TARGET_DR
    return TARGET_OFFLINE


@pytest.mark.parametrize(
    "lb_alive,prod_alive,prod_role,dr_alive,dr_role",
    list(
        itertools.product(
            [True, False],
            [True, False],
            ["PRIMARY", "PHYSICAL STANDBY"],
            [True, False],
            ["PRIMARY", "PHYSICAL STANDBY"],
        )
    ),
)
def test_routing_target_follows_precedence_table(lb_alive, prod_alive, prod_role, dr_alive, dr_role) -> None:
    node = make_node(
        load_balancer_alive=lb_alive,
        production_alive=prod_alive,
        production_role=prod_role,
        disaster_alive=dr_alive,
        disaster_role=dr_role,
    )
    assert derive_routing_target(node) == _expected_target(lb_alive, prod_alive, prod_role, dr_alive, dr_role)


def test_routing_role_match_is_exact_and_case_sensitive() -> None:
    assert derive_routing_target(make_node(production_role="primary", disaster_role="Primary")) == TARGET_OFFLINE
    assert derive_routing_target(make_node(production_role=None, disaster_role=None)) == TARGET_OFFLINE


def test_routing_ignores_display_role_fallback() -> None:
    # "Primary" is the display default for production but never routes traffic
    node = make_node(production_role=None)
    assert derive_side(node, "production").role == "Primary"
    assert derive_routing_target(node) == TARGET_OFFLINE


@pytest.mark.parametrize(
    "alive,port_alive,db_connect,status,expected",
    [
        (True, True, False, None, "warning"),
        (False, False, False, None, "offline"),
        (True, True, True, "Warning", "warning"),
        (True, True, True, None, "online"),
        (True, True, True, "READ WRITE", "online"),
        (True, False, False, None, "warning"),
        (False, True, False, None, "warning"),
        (False, False, True, None, "offline"),
        (False, True, True, None, "warning"),
    ],
)
def test_overall_health_truth_table(alive, port_alive, db_connect, status, expected) -> None:
    node = make_node(
        production_alive=alive,
        production_port_1521=port_alive,
        production_db_connect=db_connect,
        production_status=status,
    )
    assert derive_side(node, "production").overall == expected


def test_side_label_and_role_fallbacks() -> None:
    node = make_node(
        production_status=None,
        production_role="",
        disaster_alive=False,
        disaster_status="",
        disaster_role=None,
    )
    production = derive_side(node, "production")
    disaster = derive_side(node, "disaster")

    assert production.label == "OK"
    assert production.role == "Primary"
    assert disaster.label == "Offline"
    assert disaster.role == "Standby"


def test_reported_label_and_role_win() -> None:
    side = derive_side(make_node(disaster_status="MOUNTED", disaster_role="PHYSICAL STANDBY"), "disaster")
    assert side.label == "MOUNTED"
    assert side.role == "PHYSICAL STANDBY"


def test_unknown_side_is_rejected() -> None:
    with pytest.raises(ValueError):
        derive_side(make_node(), "witness")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "seconds,expected",
    [(None, "nominal"), (0, "nominal"), (5, "nominal"), (6, "degraded"), (60, "degraded"), (61, "critical")],
)
def test_delay_levels(seconds, expected) -> None:
    assert delay_level(seconds) == expected


@pytest.mark.parametrize("count,expected", [(None, "critical"), (-1, "critical"), (0, "critical"), (1, "nominal")])
def test_connection_levels(count, expected) -> None:
    assert connections_level(count) == expected


def test_replication_requires_both_sides_alive() -> None:
    assert is_replicating(make_node())
    assert not is_replicating(make_node(disaster_alive=False))
    assert not is_replicating(make_node(production_alive=False))


def test_aggregate_node_gates_indicators() -> None:
    view = aggregate_node(make_node(connections=0, disaster_dgdelay=90))

    assert view.production.show_data_flow
    assert view.production.connections == 0
    assert view.production.connections_level == "critical"
    assert view.production.is_lb_target
    assert not view.disaster.is_lb_target
    assert view.disaster.delay_seconds == 90
    assert view.disaster.delay_level == "critical"
    assert view.load_balancer.target == TARGET_PROD
    assert view.load_balancer.name == "ERP"


def test_aggregate_node_hides_flow_and_delay_when_standby_down() -> None:
    view = aggregate_node(make_node(disaster_alive=False))

    assert not view.production.show_data_flow
    assert view.production.connections_level is None
    assert view.disaster.delay_level is None


def test_lb_display_name_strips_suffix() -> None:
    assert lb_display_name("MES数据库") == "MES"
    assert lb_display_name("MES_DB") == "MES_DB"


def test_aggregation_is_idempotent() -> None:
    nodes = (make_node(name="A"), make_node(name="B", load_balancer_alive=False))
    assert aggregate_snapshot(nodes) == aggregate_snapshot(nodes)
