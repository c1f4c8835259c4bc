"""
Session window arithmetic.

Both trackers keep one entry per (session, stash) and evict the entry that
falls out of a seven-session retention horizon. Queries read the six
sessions preceding the current one::

    session:  c-7    c-6  c-5  c-4  c-3  c-2  c-1    c
              evict  |<------- rolling window ------>|  current

Session indices are unsigned. An offset that would go below session 0
names a session that never existed: it yields `None` and callers skip it.
"""

from __future__ import annotations

from typing import Final

from .types import SessionIndex

RETENTION_SESSIONS: Final = 7
"""Distance behind the current session at which entries are evicted."""

ROLLING_WINDOW_SESSIONS: Final = 6
"""Number of completed sessions covered by rolling totals."""


def sessions_back(current: SessionIndex, n: int) -> SessionIndex | None:
    """
    Return the session `n` sessions before `current`.

    Returns:
        The session index, or `None` when it would be negative.
    """
    value = int(current) - n
    return SessionIndex(value) if value >= 0 else None


def rolling_window(current: SessionIndex) -> list[SessionIndex]:
    """Sessions `current - 1` down to `current - 6` that exist."""
    window = []
    for n in range(1, ROLLING_WINDOW_SESSIONS + 1):
        session = sessions_back(current, n)
        if session is None:
            break
        window.append(session)
    return window
