"""
ActivityController — polls today's snapshot and issues start/stop commands.

Everything here runs on the Tk main thread via scheduler.after(). Network
calls run in short-lived worker threads that only ever touch the result
queue; the main loop drains that queue and applies results.

  _poll()           — refresh today's snapshot                 (every 5s)
  _tick()           — recompute elapsed display                (every 1s, only while running)
  _drain()          — apply worker results on the main thread  (every 100ms)
"""

import queue
import threading
from datetime import datetime, timezone

from .constants import (
    CATEGORIES, POLL_INTERVAL_SEC, TICK_INTERVAL_MS, DRAIN_INTERVAL_MS,
    STALE_SESSION_FAILURES,
)
from .config import log
from .display import build_view, elapsed_seconds
from .state import ControllerState
from . import api
from . import http_client


def _spawn_thread(fn):
    threading.Thread(target=fn, daemon=True).start()


def _utcnow():
    return datetime.now(timezone.utc)


class ActivityController:
    """
    Owns the dashboard state. The snapshot is server truth and is replaced
    wholesale on every successful fetch; the elapsed counter is display-only
    and never sent back.

    Start/stop are serialised by state.busy: while one is outstanding (including
    its follow-up fetch) further start/stop calls are rejected, not queued.
    """

    def __init__(self, config, scheduler, on_change=None, dispatch=None, clock=None):
        self._config = config
        self._scheduler = scheduler
        self._on_change = on_change
        self._dispatch = dispatch or _spawn_thread
        self._clock = clock or _utcnow
        self.state = ControllerState()
        self._results = queue.Queue()
        self._poll_job = None
        self._tick_job = None
        self._drain_job = None
        self._closed = False
        # Fetch ordering: seq is taken when a GET is sent, from worker threads.
        # A result whose GET went out before the last applied one is dropped.
        self._seq_lock = threading.Lock()
        self._fetch_seq = 0
        self._applied_seq = 0

    # ─── Lifecycle ───────────────────────────────────────────

    def start_polling(self):
        """Initial fetch, then the 5s refresh loop and the result drain loop."""
        if self._closed:
            return
        self.refresh()
        interval_ms = int(self._config.get("pollIntervalSec", POLL_INTERVAL_SEC) * 1000)
        self._poll_job = self._scheduler.after(interval_ms, self._poll)
        self._drain_job = self._scheduler.after(DRAIN_INTERVAL_MS, self._drain)
        log.info("Polling %s every %ds", self._config["serverUrl"], interval_ms // 1000)

    def shutdown(self):
        """Cancel every scheduled callback. Late worker results are ignored."""
        if self._closed:
            return
        self._closed = True
        for attr in ("_poll_job", "_tick_job", "_drain_job"):
            self._cancel(attr)
        log.info("Controller shut down")

    @property
    def closed(self):
        return self._closed

    def view(self):
        return build_view(self.state.snapshot, self.state.elapsed, self.state.busy)

    # ─── Commands (main thread) ──────────────────────────────

    def refresh(self):
        """Dispatch a snapshot fetch. Returns False if one is already in flight."""
        if self._closed:
            return False
        if self.state.refresh_in_flight:
            log.debug("Refresh skipped — previous request still in flight")
            return False

        self.state.refresh_in_flight = True
        config = self._config

        def do_call():
            seq = 0
            snapshot = None
            try:
                seq = self._next_seq()
                snapshot = api.fetch_today(config)
            except Exception as e:
                log.warning("Refresh thread error: %s", e)
            finally:
                self._results.put(("today", seq, snapshot))

        try:
            self._dispatch(do_call)
        except Exception:
            self.state.refresh_in_flight = False
            raise
        return True

    def start(self, category):
        """Begin tracking `category`. Returns True if the request was dispatched."""
        if category not in CATEGORIES:
            log.warning("Start ignored — unknown category %r", category)
            return False
        return self._send_command("start", lambda cfg: api.send_start(cfg, category))

    def stop(self):
        """End the running entry (the server decides whether there is one)."""
        return self._send_command("stop", api.send_stop)

    def toggle(self, category):
        """Clicking the running category stops it; any other category starts."""
        if self.state.running_category == category:
            return self.stop()
        return self.start(category)

    def _send_command(self, name, call):
        if self._closed:
            return False
        if self.state.busy:
            log.info("%s ignored — another command is still in flight", name.capitalize())
            return False

        self.state.busy = True
        self._notify()

        config = self._config

        def do_call():
            seq = 0
            ok = False
            snapshot = None
            try:
                ok = call(config)
                if ok:
                    # Sequenced after the POST so a poll sent meanwhile counts as older
                    seq = self._next_seq()
                    snapshot = api.fetch_today(config)
            except Exception as e:
                log.warning("%s thread error: %s", name.capitalize(), e)
            finally:
                self._results.put(("command", seq, (name, ok, snapshot)))

        try:
            self._dispatch(do_call)
        except Exception:
            self.state.busy = False
            self._notify()
            raise
        return True

    # ─── Result handling (main thread) ───────────────────────

    def drain_results(self):
        """Apply every pending worker result. Returns how many were handled."""
        handled = 0
        while handled < 50:
            try:
                kind, seq, payload = self._results.get_nowait()
            except queue.Empty:
                break
            handled += 1
            if self._closed:
                continue
            if kind == "today":
                self._on_today(seq, payload)
            elif kind == "command":
                self._on_command(seq, *payload)
        if handled and not self._closed:
            self._notify()
        return handled

    def _on_today(self, seq, snapshot):
        self.state.refresh_in_flight = False
        if snapshot is None:
            self._record_failure("refresh failed")
            return
        self._apply(seq, snapshot)

    def _on_command(self, seq, name, ok, snapshot):
        self.state.busy = False
        if not ok:
            # Rejected or unreachable POST: reported, but not a fetch failure
            self.state.record_failure(f"{name} failed", fetch=False)
            return
        if snapshot is None:
            self._record_failure(f"refresh after {name} failed")
            return
        self._apply(seq, snapshot)

    def _apply(self, seq, snapshot):
        if seq < self._applied_seq:
            log.debug("Dropping out-of-order snapshot (seq %d < %d)", seq, self._applied_seq)
            return
        self._applied_seq = seq
        previous = self.state.snapshot.running_entry
        self.state.apply_snapshot(snapshot, self._clock())

        current = snapshot.running_entry
        if previous != current:
            if current is None:
                log.info("No activity running")
            else:
                log.info("Running: %s (since %s)", current.category, current.start_time.isoformat())
        self._sync_ticker()

    def _record_failure(self, message):
        """A failed GET. Every STALE_SESSION_FAILURES in a row recreates the HTTP session."""
        self.state.record_failure(message)
        failures = self.state.consecutive_failures
        if failures % STALE_SESSION_FAILURES == 0:
            log.warning("%d consecutive failures — resetting HTTP session", failures)
            http_client.http = http_client.reset_session(http_client.http)

    # ─── Scheduled callbacks ─────────────────────────────────

    def _poll(self):
        self._poll_job = None
        try:
            self.refresh()
        except Exception as e:
            log.error("_poll error: %s", e, exc_info=True)
        if not self._closed:
            interval_ms = int(self._config.get("pollIntervalSec", POLL_INTERVAL_SEC) * 1000)
            self._poll_job = self._scheduler.after(interval_ms, self._poll)

    def _drain(self):
        self._drain_job = None
        try:
            self.drain_results()
        except Exception as e:
            log.error("_drain error: %s", e, exc_info=True)
        if not self._closed:
            self._drain_job = self._scheduler.after(DRAIN_INTERVAL_MS, self._drain)

    def _tick(self):
        self._tick_job = None
        try:
            entry = self.state.snapshot.running_entry
            if entry is None:
                return
            self.state.elapsed = elapsed_seconds(entry, self._clock())
            self._notify()
        except Exception as e:
            log.error("_tick error: %s", e, exc_info=True)
        if not self._closed and self.state.snapshot.running_entry is not None:
            self._tick_job = self._scheduler.after(TICK_INTERVAL_MS, self._tick)

    def _sync_ticker(self):
        """Start the 1s display tick while something runs; stop it and zero elapsed otherwise."""
        entry = self.state.snapshot.running_entry
        if entry is None:
            self._cancel("_tick_job")
            self.state.elapsed = 0
            return
        self.state.elapsed = elapsed_seconds(entry, self._clock())
        if self._tick_job is None and not self._closed:
            self._tick_job = self._scheduler.after(TICK_INTERVAL_MS, self._tick)

    # ─── Helpers ─────────────────────────────────────────────

    def _next_seq(self):
        with self._seq_lock:
            self._fetch_seq += 1
            return self._fetch_seq

    def _cancel(self, attr):
        job = getattr(self, attr)
        setattr(self, attr, None)
        if job is None:
            return
        try:
            self._scheduler.after_cancel(job)
        except Exception:
            pass

    def _notify(self):
        if self._on_change is None:
            return
        try:
            self._on_change(self.view())
        except Exception as e:
            log.error("on_change callback error: %s", e, exc_info=True)
