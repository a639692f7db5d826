"""
Constants, intervals, the fixed category list, and theme colors.
"""

APP_VERSION = "1.0.0"
APP_TITLE = "Internship Time Tracker"

# ─── Categories ──────────────────────────────────────────────────
# Closed set, defined client-side. Display order is the tuple order.
CATEGORIES = (
    "Python",
    "SQL",
    "Datasetu",
    "Break",
    "TT",
)

# ─── Intervals ───────────────────────────────────────────────────
POLL_INTERVAL_SEC = 5          # Refresh today's snapshot every 5 seconds
TICK_INTERVAL_MS = 1000        # Elapsed-time display tick (only while running)
DRAIN_INTERVAL_MS = 100        # How often the main loop picks up worker results
STALE_SESSION_FAILURES = 3     # Recreate the HTTP session after this many failed refreshes

# ─── Network ─────────────────────────────────────────────────────
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_REQUEST_TIMEOUT_SEC = 30

# ─── API routes ──────────────────────────────────────────────────
ROUTE_TODAY = "/api/track/today"
ROUTE_START = "/api/track/start"
ROUTE_STOP = "/api/track/stop"

# ─── Theme Colors ────────────────────────────────────────────────
THEME = {
    "bg_dark":       "#0f172a",   # window background
    "bg_card":       "#1e293b",   # card background
    "bg_hover":      "#334155",   # hover
    "primary":       "#3b82f6",   # active category button
    "primary_hover": "#2563eb",   # button hover
    "text_primary":  "#f1f5f9",   # white text
    "text_muted":    "#94a3b8",   # muted text
    "border":        "#374151",   # borders / separators
    "outline":       "#1e293b",   # inactive category button
    "error":         "#ef4444",   # stop button
    "error_hover":   "#dc2626",
    "disabled":      "#475569",
}

FONT_FAMILY = "Segoe UI"
MONO_FAMILY = "Consolas"
