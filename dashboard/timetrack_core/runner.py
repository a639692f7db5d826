"""
Entry point.
"""

import sys

from .constants import APP_VERSION, APP_TITLE
from .config import log, safe_print, load_config, log_settings, setup_logging
from .app import DashboardApp


def main():
    """Primary dashboard entry point."""
    safe_print(f"{APP_TITLE} v{APP_VERSION}")
    safe_print()

    # Handlers first: load_config logs the values it rejects
    setup_logging(*log_settings())

    try:
        config = load_config()
    except ValueError as e:
        log.error("Invalid configuration: %s", e)
        sys.exit(1)

    log.info("Using API at %s (timeout=%ss)", config["serverUrl"], config["requestTimeoutSec"])

    try:
        DashboardApp(config).run()
    except KeyboardInterrupt:
        safe_print("\nDashboard stopped by user.")
