from __future__ import annotations

HEALTH_COLORS = {"online": "#2e7d32", "warning": "#ed6c02", "offline": "#c62828"}
LEVEL_COLORS = {"nominal": "#2e7d32", "degraded": "#ed6c02", "critical": "#c62828"}
INDICATOR_COLORS = {True: "#2e7d32", False: "#c62828"}

TARGET_BACKGROUNDS = {
    "targetProd": "rgba(24, 144, 255, 0.3)",
    "targetDR": "rgba(230, 100, 60, 0.3)",
    "targetOffline": "rgba(100, 100, 100, 0.3)",
}
