from __future__ import annotations

from dash import dcc, html

# Drives the clock, viewport sampling and repaint checks; the data poll itself
# runs on the server-side refresh scheduler.
TICK_INTERVAL_MS = 1000


def grid_style(columns: int) -> dict[str, str]:
    return {
        "display": "grid",
        "gridTemplateColumns": f"repeat({max(1, int(columns))}, minmax(0, 1fr))",
        "gap": "12px",
    }


def _panel(title_id: str, container_id: str, columns: int) -> html.Div:
    return html.Div(
        [
            html.H3(id=title_id, style={"margin": "0 0 8px 0"}),
            html.Div(id=container_id, style=grid_style(columns)),
        ],
        style={"flex": "1 1 0", "minWidth": "0"},
    )


def layout(columns: int = 2) -> html.Div:
    return html.Div(
        [
            dcc.Location(id="dashboard-url", refresh=False),
            dcc.Interval(id="dashboard-tick", interval=TICK_INTERVAL_MS, n_intervals=0),
            dcc.Store(id="dashboard-viewport-store", data=None),
            dcc.Store(id="dashboard-viewport-ack", data=None),
            dcc.Store(id="dashboard-render-version", data=-1),
            html.Div(
                [
                    html.H1(id="dashboard-main-title", style={"margin": "0"}),
                    html.Div(
                        [
                            html.Span(id="dashboard-current-time"),
                            html.Span(id="dashboard-last-updated", style={"marginLeft": "16px"}),
                        ],
                        style={"fontSize": "13px", "color": "#475569"},
                    ),
                ],
                style={"display": "flex", "justifyContent": "space-between", "alignItems": "baseline"},
            ),
            html.Div(id="dashboard-error", style={"color": "#c62828", "margin": "8px 0"}),
            html.Div(
                [
                    _panel("dashboard-prod-title", "production-container", columns),
                    html.Div(
                        [
                            html.H3(id="dashboard-lb-title", style={"margin": "0 0 4px 0"}),
                            html.Div(
                                [
                                    html.Span(id="dashboard-lb-ip-label", style={"marginRight": "4px"}),
                                    html.Span(id="dashboard-lb-ip-value"),
                                ],
                                style={"fontSize": "12px", "color": "#666", "marginBottom": "8px"},
                            ),
                            html.Div(id="lb-system-list"),
                        ],
                        style={"flex": "0 0 200px"},
                    ),
                    _panel("dashboard-dr-title", "disaster-container", columns),
                ],
                id="dashboard-container",
                className="dashboard",
                style={"display": "flex", "gap": "16px", "alignItems": "flex-start"},
            ),
        ]
    )
