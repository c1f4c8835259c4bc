"""
Parachain validator records.

Once per session the chain publishes the authority indices of the
validators assigned to parachain validation. The tracker remembers, for
each watched stash, whether its authority index was among them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .types import AuthorityIndex, RecordKey, SessionIndex, StashAddress
from .window import RETENTION_SESSIONS, rolling_window, sessions_back

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParaRecords:
    """
    Parachain validator membership per (session, stash).

    Eviction uses the session index from before the update, so it trails
    `AuthorityRecords` by one session. Both settle on the same window.
    """

    stashes: tuple[StashAddress, ...]
    """Configured stashes, in configuration order."""

    current_session_index: SessionIndex = field(default_factory=lambda: SessionIndex(0))
    """Session the latest membership was recorded for."""

    watchlist: list[tuple[StashAddress, int]] = field(default_factory=list)
    """(stash, authority index) of configured stashes in the active set."""

    records: dict[RecordKey, bool] = field(default_factory=dict)
    """Whether the stash was a parachain validator in the session."""

    def __post_init__(self) -> None:
        self.stashes = tuple(self.stashes)

    @classmethod
    def watching(cls, stashes: Iterable[StashAddress]) -> ParaRecords:
        """Create an empty tracker for the given stashes."""
        return cls(stashes=tuple(stashes))

    def set_session(self, session_index: SessionIndex | int) -> None:
        self.current_session_index = SessionIndex(session_index)

    def reset_watchlist(self, active_validators: Iterable[StashAddress]) -> None:
        """
        Resolve each configured stash to its position in the active set.

        Stashes that are not active validators are left out. Called once per era.
        """
        positions: dict[StashAddress, int] = {}
        for position, stash in enumerate(active_validators):
            positions.setdefault(stash, position)

        self.watchlist = [
            (stash, positions[stash]) for stash in self.stashes if stash in positions
        ]

    def insert_record(
        self,
        session_index: SessionIndex | int,
        para_validator_indices: Iterable[AuthorityIndex | int],
    ) -> bool:
        """
        Record parachain validator membership for a new session.

        A repeated call for the current session changes nothing.

        Args:
            session_index: The session the indices belong to.
            para_validator_indices: Authority indices of the session's parachain validators.

        Returns:
            Whether membership was recorded.
        """
        session_index = SessionIndex(session_index)
        if session_index == self.current_session_index:
            return False

        indices = {int(index) for index in para_validator_indices}
        oldest = None
        if int(self.current_session_index) != 0:
            oldest = sessions_back(self.current_session_index, RETENTION_SESSIONS)

        for stash, position in self.watchlist:
            self.records[(session_index, stash)] = position in indices
            if oldest is not None:
                self.records.pop((oldest, stash), None)

        self.current_session_index = session_index
        logger.debug("records %s", self.records)
        return True

    def is_para_validator(self, stash: StashAddress) -> bool:
        """Whether `stash` is a parachain validator in the current session."""
        return self.records.get((self.current_session_index, stash), False)

    def previous_six_sessions_total(self, stash: StashAddress) -> int:
        """Sessions out of the previous six in which `stash` was a parachain validator."""
        return sum(
            1
            for session in rolling_window(self.current_session_index)
            if self.records.get((session, stash), False)
        )
