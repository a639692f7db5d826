"""
Internship Time Tracker — Desktop Dashboard
===========================================
Start/stop a timer against one of five fixed categories and watch
today's totals. All tracking state lives on the server; this window
polls it every 5 seconds and sends start/stop commands.

Configuration (environment):
    TRACKER_API_URL               API base URL (default http://localhost:5000)
    TRACKER_REQUEST_TIMEOUT_SEC   per-request timeout in seconds (default 30)
    TRACKER_LOG_LEVEL             DEBUG / INFO / WARNING (default INFO)
    TRACKER_LOG_FILE              optional log file path

Usage:
    python dashboard.py
"""

from timetrack_core.runner import main


if __name__ == "__main__":
    main()
