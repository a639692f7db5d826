"""
Environment config, logging setup, safe_print.
"""

import os
import sys
import logging
from pathlib import Path

from .constants import DEFAULT_API_URL, DEFAULT_REQUEST_TIMEOUT_SEC, POLL_INTERVAL_SEC


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 1_000_000

log = logging.getLogger("timetrack")


# ─── Safe print (no crash when --noconsole) ──────────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

def setup_logging(level="INFO", log_file=None):
    """Attach console (and optional file) handlers to the app logger. Safe to call twice."""
    log.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    log.propagate = False
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    if not any(h.get_name() == "timetrack:console" for h in log.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(fmt)
        console_handler.set_name("timetrack:console")
        log.addHandler(console_handler)

    if log_file and not any(h.get_name() == "timetrack:file" for h in log.handlers):
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists() and path.stat().st_size > LOG_FILE_MAX_BYTES:
                path.write_text("")
        except OSError as e:
            log.warning("Could not prepare log file %s: %s", path, e)
            return log
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.setFormatter(fmt)
        file_handler.set_name("timetrack:file")
        log.addHandler(file_handler)

    return log


# ─── Config ──────────────────────────────────────────────────────

def _positive_number(environ, key, default):
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not a number) — using %s", key, raw, default)
        return default
    if value <= 0:
        log.warning("Ignoring %s=%r (must be > 0) — using %s", key, raw, default)
        return default
    return value


def log_settings(environ=None):
    """(level, file) from TRACKER_LOG_LEVEL / TRACKER_LOG_FILE, for setup_logging before load_config."""
    environ = os.environ if environ is None else environ
    return (environ.get("TRACKER_LOG_LEVEL") or "INFO").upper(), environ.get("TRACKER_LOG_FILE") or None


def load_config(environ=None):
    """
    Build the config dict from environment variables.
    Raises ValueError if the API URL is not http(s). Bad numbers are logged
    and replaced by defaults, so set up logging first.
    """
    environ = os.environ if environ is None else environ
    log_level, log_file = log_settings(environ)

    server_url = (environ.get("TRACKER_API_URL") or DEFAULT_API_URL).strip().rstrip("/")
    if not server_url.startswith(("http://", "https://")):
        raise ValueError(f"TRACKER_API_URL must start with http:// or https:// (got {server_url!r})")

    return {
        "serverUrl": server_url,
        "requestTimeoutSec": _positive_number(
            environ, "TRACKER_REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC),
        "pollIntervalSec": POLL_INTERVAL_SEC,
        "logLevel": log_level,
        "logFile": log_file,
    }
