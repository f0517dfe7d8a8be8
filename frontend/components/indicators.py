from __future__ import annotations

from typing import Callable

from dash import html

from frontend.components.status_style import INDICATOR_COLORS
from frontend.status import Indicators


def indicator_row(indicators: Indicators, t: Callable[[str], str]) -> html.Div:
    items = [
        ("pingLabel", indicators.ping),
        ("portLabel", indicators.port),
        ("dbConnectLabel", indicators.db_connect),
    ]
    return html.Div(
        [
            html.Span(
                [
                    html.Span("●", style={"color": INDICATOR_COLORS[bool(ok)], "marginRight": "4px"}),
                    html.Span(t(key)),
                ],
                className="status-online" if ok else "status-offline",
                style={"marginRight": "12px"},
            )
            for key, ok in items
        ],
        style={"fontSize": "12px", "color": "#475569"},
    )
