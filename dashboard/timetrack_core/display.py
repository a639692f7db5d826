"""
Presentation maths — turns a snapshot + elapsed seconds into what the window shows.

No Tk imports here; everything is plain data so it can be checked without a display.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .constants import CATEGORIES
from .state import RunningEntry, TodaySnapshot


def format_hms(seconds) -> str:
    """Seconds → "HH:MM:SS". Hours keep counting past 24."""
    total = max(0, int(math.floor(seconds)))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def elapsed_seconds(entry: Optional[RunningEntry], now: datetime) -> int:
    if entry is None:
        return 0
    delta = (now - entry.start_time).total_seconds()
    # Server clock may be slightly ahead of ours
    return max(0, int(math.floor(delta)))


@dataclass(frozen=True)
class CategoryRow:
    category: str
    seconds: int
    text: str
    active: bool


@dataclass(frozen=True)
class DashboardView:
    running_category: Optional[str]
    elapsed: int
    elapsed_text: str
    rows: Tuple[CategoryRow, ...]
    total_seconds: int
    total_text: str
    buttons_enabled: bool

    def row(self, category: str) -> CategoryRow:
        for row in self.rows:
            if row.category == category:
                return row
        raise KeyError(category)


def build_view(snapshot: TodaySnapshot, elapsed: int, busy: bool = False) -> DashboardView:
    """
    Active category row = its total + elapsed.
    Grand total = every server total + elapsed (only while something is running).
    """
    running = snapshot.running_entry
    running_category = running.category if running is not None else None
    live = elapsed if running is not None else 0

    rows = []
    for category in CATEGORIES:
        active = category == running_category
        seconds = snapshot.total_for(category) + (live if active else 0)
        rows.append(CategoryRow(category, seconds, format_hms(seconds), active))

    total = snapshot.completed_total + live
    return DashboardView(
        running_category=running_category,
        elapsed=live,
        elapsed_text=format_hms(live),
        rows=tuple(rows),
        total_seconds=total,
        total_text=format_hms(total),
        buttons_enabled=not busy,
    )
