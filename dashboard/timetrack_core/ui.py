"""
DashboardWindow — the single tracker window.

Created and managed EXCLUSIVELY on the Tkinter main thread.
Holds no tracking state: render(view) is the only way it changes,
and button clicks are forwarded to the callbacks it was given.
Hardened against widget-destroyed crashes with TclError guards.
"""

import tkinter as tk

from .constants import APP_TITLE, CATEGORIES, THEME, FONT_FAMILY, MONO_FAMILY
from .config import log


_BUTTON_COLUMNS = 3


class DashboardWindow:
    """
    Three cards, top to bottom:
      Current Activity — running category + elapsed, Stop button
      Start Tracking   — one toggle button per category
      Today's Totals   — per-category rows + Total
    """

    def __init__(self, root, on_toggle, on_stop):
        self._root = root
        self._on_toggle = on_toggle
        self._on_stop = on_stop
        self._category_buttons = {}
        self._total_labels = {}
        self._build_ui()

    # ─── UI construction ─────────────────────────────────────

    def _build_ui(self):
        root = self._root
        root.title(APP_TITLE)
        root.configure(bg=THEME["bg_dark"])
        root.minsize(520, 640)

        outer = tk.Frame(root, bg=THEME["bg_dark"], padx=28, pady=24)
        outer.pack(fill="both", expand=True)

        tk.Label(outer, text=APP_TITLE,
                 font=(FONT_FAMILY, 22, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg_dark"]).pack(pady=(0, 18))

        # ── Current activity ──────────────────────────────
        current = self._card(outer, "Current Activity")
        self._idle_label = tk.Label(
            current, text="No activity running. Click a category to start.",
            font=(FONT_FAMILY, 12), fg=THEME["text_muted"], bg=THEME["bg_card"],
        )
        self._running_frame = tk.Frame(current, bg=THEME["bg_card"])
        info = tk.Frame(self._running_frame, bg=THEME["bg_card"])
        info.pack(side="left", fill="x", expand=True)
        self._running_label = tk.Label(info, text="", font=(FONT_FAMILY, 16, "bold"),
                                       fg=THEME["text_primary"], bg=THEME["bg_card"])
        self._running_label.pack(anchor="w")
        self._elapsed_label = tk.Label(info, text="00:00:00", font=(MONO_FAMILY, 26),
                                       fg=THEME["text_primary"], bg=THEME["bg_card"])
        self._elapsed_label.pack(anchor="w", pady=(4, 0))
        self._stop_btn = tk.Button(
            self._running_frame, text="Stop",
            font=(FONT_FAMILY, 13, "bold"),
            bg=THEME["error"], fg="white",
            activebackground=THEME["error_hover"], activeforeground="white",
            disabledforeground=THEME["text_muted"],
            relief="flat", padx=26, pady=12, cursor="hand2",
            command=self._on_stop,
        )
        self._stop_btn.pack(side="right")
        self._idle_label.pack(anchor="w")

        # ── Category buttons ──────────────────────────────
        buttons = self._card(outer, "Start Tracking")
        grid = tk.Frame(buttons, bg=THEME["bg_card"])
        grid.pack(fill="x")
        for col in range(_BUTTON_COLUMNS):
            grid.grid_columnconfigure(col, weight=1, uniform="cat")
        for i, category in enumerate(CATEGORIES):
            btn = tk.Button(
                grid, text=category,
                font=(FONT_FAMILY, 13, "bold"),
                bg=THEME["outline"], fg=THEME["text_primary"],
                activebackground=THEME["bg_hover"], activeforeground=THEME["text_primary"],
                disabledforeground=THEME["text_muted"],
                highlightbackground=THEME["border"], highlightthickness=1,
                relief="flat", pady=18, cursor="hand2",
                command=lambda c=category: self._on_toggle(c),
            )
            btn.grid(row=i // _BUTTON_COLUMNS, column=i % _BUTTON_COLUMNS,
                     sticky="nsew", padx=6, pady=6)
            self._category_buttons[category] = btn

        # ── Totals ────────────────────────────────────────
        totals = self._card(outer, "Today's Totals")
        for category in CATEGORIES:
            row = tk.Frame(totals, bg=THEME["bg_card"])
            row.pack(fill="x", pady=3)
            tk.Label(row, text=category, font=(FONT_FAMILY, 12),
                     fg=THEME["text_primary"], bg=THEME["bg_card"]).pack(side="left")
            value = tk.Label(row, text="00:00:00", font=(MONO_FAMILY, 13),
                             fg=THEME["text_primary"], bg=THEME["bg_card"])
            value.pack(side="right")
            self._total_labels[category] = value

        tk.Frame(totals, bg=THEME["border"], height=1).pack(fill="x", pady=(8, 8))
        total_row = tk.Frame(totals, bg=THEME["bg_card"])
        total_row.pack(fill="x")
        tk.Label(total_row, text="Total", font=(FONT_FAMILY, 14, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg_card"]).pack(side="left")
        self._grand_total_label = tk.Label(total_row, text="00:00:00",
                                           font=(MONO_FAMILY, 15, "bold"),
                                           fg=THEME["text_primary"], bg=THEME["bg_card"])
        self._grand_total_label.pack(side="right")

        log.debug("Dashboard window built")

    def _card(self, parent, title):
        border = tk.Frame(parent, bg=THEME["border"], padx=1, pady=1)
        border.pack(fill="x", pady=(0, 16))
        card = tk.Frame(border, bg=THEME["bg_card"], padx=20, pady=16)
        card.pack(fill="x")
        tk.Label(card, text=title, font=(FONT_FAMILY, 14, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg_card"]).pack(anchor="w", pady=(0, 10))
        return card

    # ─── Safe widget helpers ─────────────────────────────────

    def _safe_widget_config(self, widget, **kwargs):
        """Configure a widget, silently ignoring TclError if destroyed."""
        try:
            widget.config(**kwargs)
        except (tk.TclError, AttributeError):
            pass

    # ─── Rendering ───────────────────────────────────────────

    def render(self, view):
        """Push a DashboardView into the widgets. Main thread only."""
        button_state = "normal" if view.buttons_enabled else "disabled"

        try:
            if view.running_category is not None:
                self._idle_label.pack_forget()
                if not self._running_frame.winfo_ismapped():
                    self._running_frame.pack(fill="x")
            else:
                self._running_frame.pack_forget()
                if not self._idle_label.winfo_ismapped():
                    self._idle_label.pack(anchor="w")
        except tk.TclError:
            return

        self._safe_widget_config(self._running_label, text=view.running_category or "")
        self._safe_widget_config(self._elapsed_label, text=view.elapsed_text)
        self._safe_widget_config(self._stop_btn, state=button_state)

        for row in view.rows:
            btn = self._category_buttons.get(row.category)
            if btn is not None:
                self._safe_widget_config(
                    btn, state=button_state,
                    bg=THEME["primary"] if row.active else THEME["outline"],
                )
            label = self._total_labels.get(row.category)
            if label is not None:
                self._safe_widget_config(label, text=row.text)

        self._safe_widget_config(self._grand_total_label, text=view.total_text)
