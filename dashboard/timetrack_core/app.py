"""
DashboardApp — the main Tkinter application.

The controller's refresh loop, elapsed tick and result drain all run
inside Tkinter's event loop via root.after(). Zero busy-wait loops.

Background threads: ONLY short-lived API call threads.
None of them touch Tkinter directly.
"""

import tkinter as tk

from .constants import APP_VERSION, POLL_INTERVAL_SEC
from .config import log, safe_print
from .controller import ActivityController
from .ui import DashboardWindow


class DashboardApp:
    """Owns the Tk main loop, the window and the controller. Teardown cancels every timer."""

    def __init__(self, config):
        self._config = config
        self._root = None
        self._window = None
        self.controller = None

    def run(self):
        """Start the dashboard. Blocks on Tk mainloop. Call from main thread."""
        self._root = tk.Tk()
        self._root.protocol("WM_DELETE_WINDOW", self.stop)

        self.controller = ActivityController(self._config, self._root, on_change=self._render)
        self._window = DashboardWindow(
            self._root,
            on_toggle=self.controller.toggle,
            on_stop=self.controller.stop,
        )
        self._render(self.controller.view())
        self.controller.start_polling()

        log.info(
            "v%s started (api=%s, poll=%ds)",
            APP_VERSION, self._config["serverUrl"],
            self._config.get("pollIntervalSec", POLL_INTERVAL_SEC),
        )
        safe_print("Dashboard running.\n")

        try:
            self._root.mainloop()
        finally:
            self.controller.shutdown()
            try:
                self._root.destroy()
            except tk.TclError:
                pass
            log.info("DashboardApp shut down.")

    def stop(self):
        try:
            self._root.quit()
        except Exception:
            pass

    def _render(self, view):
        if self._window is not None:
            self._window.render(view)
