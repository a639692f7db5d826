"""
Server API calls — today's snapshot, start, stop.

All functions are blocking (called from worker threads, never from the main thread).
None of them raise: transport errors, HTTP errors, malformed JSON and
success:false are logged and reported as None / False. No retries here;
the next periodic poll is the retry.
"""

import requests

from .config import log
from .constants import ROUTE_TODAY, ROUTE_START, ROUTE_STOP
from .state import TodaySnapshot
from . import http_client


def _url(config, route):
    return f"{config['serverUrl'].rstrip('/')}{route}"


def _failure_reason(data):
    if isinstance(data, dict):
        return data.get("error") or data.get("message") or "success=false"
    return "response is not a JSON object"


def _read_json(resp, what):
    """Decode a response body. Returns (data, None) or (None, reason)."""
    if resp.status_code >= 400:
        return None, f"HTTP {resp.status_code} — {resp.text[:200]}"
    try:
        return resp.json(), None
    except ValueError as e:
        log.debug("%s body was not JSON: %r", what, resp.text[:200])
        return None, f"malformed JSON ({e})"


# ─── Today's snapshot ────────────────────────────────────────────

def fetch_today(config):
    """GET today's totals + running entry. Returns TodaySnapshot or None."""
    url = _url(config, ROUTE_TODAY)
    try:
        resp = http_client.http.get(url, timeout=config["requestTimeoutSec"])
    except requests.RequestException as e:
        log.warning("Fetch today network error: %s", e)
        return None

    data, err = _read_json(resp, "Fetch today")
    if err:
        log.warning("Fetch today failed: %s", err)
        return None

    try:
        snapshot = TodaySnapshot.from_payload(data)
    except ValueError as e:
        log.warning("Fetch today rejected: %s", e)
        return None

    running = snapshot.running_entry
    log.debug(
        "Today OK | total=%ds | running=%s",
        snapshot.completed_total, running.category if running else "none",
    )
    return snapshot


# ─── Start / Stop ────────────────────────────────────────────────

def _post_command(config, route, what, payload=None):
    url = _url(config, route)
    kwargs = {"timeout": config["requestTimeoutSec"]}
    if payload is not None:
        kwargs["json"] = payload

    try:
        resp = http_client.http.post(url, **kwargs)
    except requests.RequestException as e:
        log.warning("%s network error: %s", what, e)
        return False

    data, err = _read_json(resp, what)
    if err:
        log.warning("%s failed: %s", what, err)
        return False

    if not isinstance(data, dict) or not data.get("success"):
        log.warning("%s rejected by server: %s", what, _failure_reason(data))
        return False
    return True


def send_start(config, category):
    """POST /api/track/start with {category}. Returns True on success."""
    ok = _post_command(config, ROUTE_START, "Start tracking", {"category": category})
    if ok:
        log.info("Tracking started | category=%s", category)
    return ok


def send_stop(config):
    """POST /api/track/stop (no body). Returns True on success."""
    ok = _post_command(config, ROUTE_STOP, "Stop tracking")
    if ok:
        log.info("Tracking stopped")
    return ok
