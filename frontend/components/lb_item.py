from __future__ import annotations

from typing import Callable

from dash import html

from frontend.components.indicators import indicator_row
from frontend.components.status_style import TARGET_BACKGROUNDS
from frontend.status import TARGET_OFFLINE, NodeView


def lb_item(node: NodeView, t: Callable[[str], str]) -> html.Div:
    lb = node.load_balancer
    return html.Div(
        [
            html.Div(lb.name, className="lb-name", style={"fontWeight": "700"}),
            html.Div(t(lb.target), className="lb-target-env", style={"fontSize": "13px", "marginTop": "2px"}),
            html.Div(lb.ip or "-", className="lb-ip-text", style={"fontSize": "12px", "color": "#666"}),
            indicator_row(lb.indicators, t),
        ],
        className="lb-system",
        style={
            "backgroundColor": TARGET_BACKGROUNDS.get(lb.target, TARGET_BACKGROUNDS[TARGET_OFFLINE]),
            "borderRadius": "10px",
            "padding": "8px 10px",
            "marginBottom": "8px",
        },
    )
