"""Hook names, as shown in logs and reports."""

from typing import Final

HOOK_INIT: Final = "Scouty initialized"
HOOK_NEW_SESSION: Final = "New session"
HOOK_NEW_ERA: Final = "New era"
HOOK_VALIDATOR_STARTS_ACTIVE_NEXT_ERA: Final = "Validator starts active next era"
HOOK_VALIDATOR_STARTS_INACTIVE_NEXT_ERA: Final = "Validator starts inactive next era"
HOOK_VALIDATOR_SLASHED: Final = "Validator has been slashed"
HOOK_VALIDATOR_CHILLED: Final = "Validator has been chilled"
HOOK_VALIDATOR_OFFLINE: Final = "Validator has been offline"
HOOK_DEMOCRACY_STARTED: Final = "Democracy started"
