"""Chat reports."""

from .data import Network, Referendum, Session, Slash, Validator
from .report import Report
from .sections import (
    chill_report,
    init_report,
    offline_report,
    on_hold_report,
    referendum_report,
    session_flag,
    session_ordinal_number,
    session_report,
    slash_report,
)

__all__ = [
    "Network",
    "Referendum",
    "Report",
    "Session",
    "Slash",
    "Validator",
    "chill_report",
    "init_report",
    "offline_report",
    "on_hold_report",
    "referendum_report",
    "session_flag",
    "session_ordinal_number",
    "session_report",
    "slash_report",
]
