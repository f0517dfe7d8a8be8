from __future__ import annotations

from typing import Callable

from dash import html

from frontend.components.indicators import indicator_row
from frontend.components.status_style import HEALTH_COLORS, LEVEL_COLORS
from frontend.status import NodeView, SideView


def _data_flow(view: SideView, t: Callable[[str], str]) -> html.Div | None:
    if not view.show_data_flow:
        return None
    color = LEVEL_COLORS[view.connections_level or "critical"]
    count = view.connections if view.connections is not None else "--"
    return html.Div(
        [
            html.Span("⇄", style={"marginRight": "6px"}),
            html.Span(f"{t('connectionsLabel')} "),
            html.Span(str(count), style={"color": color, "fontWeight": "600"}),
        ],
        className="data-flow-indicator",
        style={"fontSize": "12px", "marginTop": "6px"},
    )


def _delay(view: SideView, t: Callable[[str], str]) -> html.Div:
    if view.side != "disaster" or view.delay_level is None:
        return html.Div(" ", className="delay-item", style={"fontSize": "12px", "marginTop": "6px"})
    delay = f"{view.delay_seconds}s" if view.delay_seconds is not None else "--"
    return html.Div(
        [
            html.Span(f"{t('delayLabel')}: "),
            html.Span(delay, style={"color": LEVEL_COLORS[view.delay_level], "fontWeight": "600"}),
        ],
        className="delay-item",
        style={"fontSize": "12px", "marginTop": "6px"},
    )


def db_card(node: NodeView, side: str, t: Callable[[str], str]) -> html.Div:
    view = node.production if side == "production" else node.disaster
    status = view.status
    color = HEALTH_COLORS[status.overall]

    children = [
        html.Div(
            [
                html.Span(node.name, className="db-name-text"),
                html.Span(
                    t("loadDirection"),
                    className="load-direction",
                    style={
                        "display": "inline-block" if view.is_lb_target else "none",
                        "marginLeft": "8px",
                        "fontSize": "11px",
                        "padding": "1px 6px",
                        "borderRadius": "8px",
                        "background": "#e0f2fe",
                        "color": "#0369a1",
                    },
                ),
            ],
            style={"fontWeight": "700", "fontSize": "16px"},
        ),
        html.Div(view.ip or "-", className="ip", style={"fontSize": "12px", "color": "#666", "marginTop": "4px"}),
        html.Div(f"{t('roleLabel')}: {t(status.role)}", className="role-item", style={"marginTop": "6px"}),
        html.Div(
            [
                html.Span("●", style={"color": color, "marginRight": "8px"}),
                html.Span(t(status.label), className="overall-status-text"),
            ],
            className=f"overall-status status-{status.overall}",
            style={"marginTop": "6px", "fontSize": "15px"},
        ),
        indicator_row(view.indicators, t),
        _delay(view, t),
    ]
    flow = _data_flow(view, t)
    if flow is not None:
        children.append(flow)

    return html.Div(
        children,
        className="db-card",
        style={
            "border": f"1px solid {color if view.is_lb_target else '#e5e7eb'}",
            "borderRadius": "12px",
            "padding": "12px",
            "background": "#fff",
            "boxShadow": "0 4px 12px rgba(0,0,0,0.06)",
            "minHeight": "120px",
        },
    )
