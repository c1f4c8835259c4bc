"""Rolling per-session records of watched validators."""

from .authority import AuthorityRecords, RecordOutcome
from .para import ParaRecords
from .types import AuthorityIndex, BlockNumber, EraIndex, RecordKey, SessionIndex, StashAddress
from .window import RETENTION_SESSIONS, ROLLING_WINDOW_SESSIONS, rolling_window, sessions_back

__all__ = [
    "AuthorityIndex",
    "AuthorityRecords",
    "BlockNumber",
    "EraIndex",
    "ParaRecords",
    "RETENTION_SESSIONS",
    "ROLLING_WINDOW_SESSIONS",
    "RecordKey",
    "RecordOutcome",
    "SessionIndex",
    "StashAddress",
    "rolling_window",
    "sessions_back",
]
