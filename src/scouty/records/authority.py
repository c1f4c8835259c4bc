"""
Authored-block records.

Counts blocks authored by watched validators per session. Each finalized
block names its author by position in the authority set (see
`scouty.consensus.decode_authority_index`). The tracker resolves that
position against the authority list it was last given, and counts the
block under the current session when the author is watched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .types import AuthorityIndex, BlockNumber, RecordKey, SessionIndex, StashAddress
from .window import RETENTION_SESSIONS, rolling_window, sessions_back

logger = logging.getLogger(__name__)


class RecordOutcome(Enum):
    """What `AuthorityRecords.insert_record` did with a block."""

    RECORDED = "recorded"
    """A watched author's count was incremented."""

    DUPLICATE = "duplicate"
    """The block number was already processed."""

    NO_AUTHORITY = "no_authority"
    """The block carried no decodable authority index."""

    UNKNOWN_AUTHORITY = "unknown_authority"
    """The index is outside the known authority list."""

    NOT_WATCHED = "not_watched"
    """The author is not a watched stash."""


@dataclass(slots=True)
class AuthorityRecords:
    """
    Authored-block counts per (session, stash).

    State is in memory only. Entries are evicted one at a time: every
    increment for a stash removes that stash's entry from seven sessions ago.
    """

    watched: frozenset[StashAddress]
    """Stashes whose blocks are counted."""

    last_block: BlockNumber = field(default_factory=lambda: BlockNumber(0))
    """Most recently processed block; a block is counted at most once."""

    current_session_index: SessionIndex = field(default_factory=lambda: SessionIndex(0))
    """Session new blocks are counted under."""

    authorities: list[StashAddress] = field(default_factory=list)
    """Authority set, addressable by authority index."""

    records: dict[RecordKey, int] = field(default_factory=dict)
    """Authored block count per (session, stash)."""

    def __post_init__(self) -> None:
        self.watched = frozenset(self.watched)

    @classmethod
    def watching(cls, stashes: Iterable[StashAddress]) -> AuthorityRecords:
        """Create an empty tracker for the given stashes."""
        return cls(watched=frozenset(stashes))

    def set_block(self, block_number: BlockNumber | int) -> None:
        self.last_block = BlockNumber(block_number)

    def set_session(self, session_index: SessionIndex | int) -> None:
        self.current_session_index = SessionIndex(session_index)

    def set_authorities(self, authorities: Iterable[StashAddress]) -> None:
        """Replace the authority set. Called once per era."""
        self.authorities = list(authorities)

    def seed(self, stash: StashAddress, count: int) -> None:
        """
        Set the current session's count for a stash.

        Used once at start-up from the chain's own authored-blocks counter so
        the current session is not under-reported after a restart.
        """
        if stash not in self.watched:
            return
        self.records[(self.current_session_index, stash)] = count

    def insert_record(
        self, block_number: BlockNumber | int, authority_index: AuthorityIndex | int | None
    ) -> RecordOutcome:
        """
        Count a finalized block for its author.

        Args:
            block_number: Number of the block being processed.
            authority_index: Author position from the pre-runtime digest, if any.

        Returns:
            What happened to the block. Only `RECORDED` mutates the counts.
        """
        block_number = BlockNumber(block_number)
        if block_number == self.last_block:
            return RecordOutcome.DUPLICATE

        outcome = self._count_author(authority_index)
        self.last_block = block_number
        logger.debug("records %s", self.records)
        return outcome

    def _count_author(self, authority_index: AuthorityIndex | int | None) -> RecordOutcome:
        if authority_index is None:
            return RecordOutcome.NO_AUTHORITY

        position = int(authority_index)
        if not 0 <= position < len(self.authorities):
            return RecordOutcome.UNKNOWN_AUTHORITY

        author = self.authorities[position]
        if author not in self.watched:
            return RecordOutcome.NOT_WATCHED

        key = (self.current_session_index, author)
        self.records[key] = self.records.get(key, 0) + 1
        self._evict(author)
        return RecordOutcome.RECORDED

    def _evict(self, stash: StashAddress) -> None:
        oldest = sessions_back(self.current_session_index, RETENTION_SESSIONS)
        if oldest is not None:
            self.records.pop((oldest, stash), None)

    def current_session_total(self, stash: StashAddress) -> int:
        """Blocks authored by `stash` in the current session."""
        return self.records.get((self.current_session_index, stash), 0)

    def previous_session_total(self, stash: StashAddress) -> int:
        """Blocks authored by `stash` in the session before the current one."""
        previous = sessions_back(self.current_session_index, 1)
        if previous is None:
            return 0
        return self.records.get((previous, stash), 0)

    def previous_six_sessions_total(self, stash: StashAddress) -> int:
        """Blocks authored by `stash` over the six sessions before the current one."""
        return sum(
            self.records.get((session, stash), 0)
            for session in rolling_window(self.current_session_index)
        )
