"""Step progress for the multi-query fetches, rendered in a collapsible status box."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Status box + bar; ``callback`` has the IssueService progress signature.

    Each message is appended to the box's log so the individual query steps
    stay visible after the fetch finishes.
    """

    def __init__(self, title: str, total: int | None = None):
        self._status = st.status(title, expanded=False)
        self._bar = self._status.progress(0.0)
        self._total = total
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        if total:
            self._total = total
        self._status.write(message)
        if current is not None and self._total:
            self._bar.progress(min(current / self._total, 1.0))

    def complete(self, message: str) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._status.update(label=message, state="complete")
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._status.update(label=message, state="error", expanded=True)
        self._done = True
