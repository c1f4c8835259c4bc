"""Index types shared by the record trackers."""

from typing import TypeAlias

from scouty.consensus import AuthorityIndex
from scouty.types import Uint32


class SessionIndex(Uint32):
    """Index of a session, the period during which an authority set is fixed."""


class EraIndex(Uint32):
    """Index of a staking era, a fixed number of sessions."""


class BlockNumber(Uint32):
    """Height of a block."""


StashAddress: TypeAlias = str
"""SS58 address of a validator stash account."""

RecordKey: TypeAlias = tuple[SessionIndex, StashAddress]
"""Composite key of both trackers."""

__all__ = [
    "AuthorityIndex",
    "BlockNumber",
    "EraIndex",
    "RecordKey",
    "SessionIndex",
    "StashAddress",
]
