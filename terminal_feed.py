"""
Terminal feed for control tower status messages.

Every event is printed as a single ``PREFIX | text`` line and optionally kept
in memory so a run can be inspected afterwards.
"""

from typing import List


class TerminalFeed:
    """Manages terminal output for status messages only."""

    def __init__(self, echo: bool = True, keep_history: bool = False):
        self.echo = echo
        self.keep_history = keep_history
        self.history: List[str] = []

    def _emit(self, prefix: str, text: str):
        line = f"{prefix} | {text}"
        if self.echo:
            print(line, flush=True)
        if self.keep_history:
            self.history.append(line)

    def announce_clearance(self, text: str):
        self._emit("ATC", text)

    def gate_event(self, text: str):
        self._emit("GATE", text)

    def loading_event(self, text: str):
        self._emit("LOAD", text)

    def status_update(self, text: str):
        """General status updates for terminal."""
        self._emit("STATUS", text)
