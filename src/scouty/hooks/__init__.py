"""Hook scripts run on validator events."""

from .hook import HIGHLIGHT_PREFIX, Hook
from .names import (
    HOOK_DEMOCRACY_STARTED,
    HOOK_INIT,
    HOOK_NEW_ERA,
    HOOK_NEW_SESSION,
    HOOK_VALIDATOR_CHILLED,
    HOOK_VALIDATOR_OFFLINE,
    HOOK_VALIDATOR_SLASHED,
    HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA,
    HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA,
)

__all__ = [
    "HIGHLIGHT_PREFIX",
    "HOOK_DEMOCRACY_STARTED",
    "HOOK_INIT",
    "HOOK_NEW_ERA",
    "HOOK_NEW_SESSION",
    "HOOK_VALIDATOR_CHILLED",
    "HOOK_VALIDATOR_OFFLINE",
    "HOOK_VALIDATOR_SLASHED",
    "HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA",
    "HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA",
    "Hook",
]
