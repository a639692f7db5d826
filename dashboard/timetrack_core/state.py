"""
Snapshot types + ControllerState — single source of truth for the dashboard.

TodaySnapshot is a frozen copy of what the server last reported. It is
never patched in place: every successful poll builds a new one and the
controller swaps it in. ControllerState mutations happen on the Tk main
thread only, so no locks are needed beyond the busy flag.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from .constants import CATEGORIES


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp from the server. Naive values are taken as UTC."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"startTime must be an ISO-8601 string (got {value!r})")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid startTime {value!r}: {e}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RunningEntry:
    id: str
    category: str
    start_time: datetime

    @classmethod
    def from_payload(cls, payload) -> "RunningEntry":
        if not isinstance(payload, dict):
            raise ValueError(f"runningEntry must be an object (got {type(payload).__name__})")
        entry_id = payload.get("_id")
        category = payload.get("category")
        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError("runningEntry._id missing")
        if not isinstance(category, str) or not category:
            raise ValueError("runningEntry.category missing")
        return cls(
            id=entry_id,
            category=category,
            start_time=parse_timestamp(payload.get("startTime")),
        )


def _parse_totals(raw) -> Dict[str, int]:
    if not isinstance(raw, dict):
        raise ValueError(f"totals must be an object (got {type(raw).__name__})")

    totals = {category: 0 for category in CATEGORIES}
    for category, seconds in raw.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ValueError(f"totals[{category!r}] is not a number: {seconds!r}")
        if not math.isfinite(seconds):
            raise ValueError(f"totals[{category!r}] is not finite")
        totals[str(category)] = max(0, int(math.floor(seconds)))
    return totals


@dataclass(frozen=True)
class TodaySnapshot:
    totals: Dict[str, int]
    running_entry: Optional[RunningEntry] = None

    @classmethod
    def empty(cls) -> "TodaySnapshot":
        return cls(totals={category: 0 for category in CATEGORIES}, running_entry=None)

    @classmethod
    def from_payload(cls, payload) -> "TodaySnapshot":
        """
        Build a snapshot from the /api/track/today JSON body.
        Raises ValueError on success:false or any shape problem.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Response must be a JSON object (got {type(payload).__name__})")
        if not payload.get("success"):
            reason = payload.get("error") or payload.get("message") or "success=false"
            raise ValueError(f"Server reported failure: {reason}")

        running_raw = payload.get("runningEntry")
        running = RunningEntry.from_payload(running_raw) if running_raw is not None else None
        return cls(totals=_parse_totals(payload.get("totals")), running_entry=running)

    def total_for(self, category: str) -> int:
        return self.totals.get(category, 0)

    @property
    def completed_total(self) -> int:
        """Sum of every category total the server sent (completed entries only)."""
        return sum(self.totals.values())

    @property
    def is_running(self) -> bool:
        return self.running_entry is not None


@dataclass
class ControllerState:
    # ── Server truth (replaced wholesale) ─────────────────────
    snapshot: TodaySnapshot = field(default_factory=TodaySnapshot.empty)
    last_refresh_at: Optional[datetime] = None

    # ── Display ───────────────────────────────────────────────
    elapsed: int = 0

    # ── In-flight flags ───────────────────────────────────────
    busy: bool = False                # start/stop outstanding, buttons disabled
    refresh_in_flight: bool = False

    # ── Diagnostics ───────────────────────────────────────────
    last_error: Optional[str] = None
    consecutive_failures: int = 0     # failed snapshot fetches in a row

    @property
    def running_category(self) -> Optional[str]:
        entry = self.snapshot.running_entry
        return entry.category if entry is not None else None

    def apply_snapshot(self, snapshot: TodaySnapshot, when: datetime):
        """Swap in a freshly fetched snapshot."""
        self.snapshot = snapshot
        self.last_refresh_at = when
        self.last_error = None
        self.consecutive_failures = 0
        if snapshot.running_entry is None:
            self.elapsed = 0

    def record_failure(self, message: str, fetch: bool = True):
        """
        Keep the last-known-good snapshot; remember what went wrong.
        Only failed fetches count toward consecutive_failures.
        """
        self.last_error = message
        if fetch:
            self.consecutive_failures += 1
