"""
timetrack_core — Internship Time Tracker dashboard
==================================================
Architecture: Tkinter main-thread event loop. Zero busy-wait.

  constants.py    → Version, categories, intervals, routes, theme
  config.py       → Environment config, logging, safe_print
  http_client.py  → HTTP session with pooling + CA bundle
  api.py          → Server API calls (today, start, stop)
  state.py        → TodaySnapshot / RunningEntry / ControllerState
  display.py      → HH:MM:SS formatting, DashboardView building
  controller.py   → ActivityController (polling, commands, elapsed tick)
  ui.py           → DashboardWindow (Tk widgets, render only)
  app.py          → DashboardApp (Tk main loop, wiring, teardown)
  runner.py       → main()
"""

from .constants import APP_VERSION as __version__
