"""Chain data rendered by reports."""

from __future__ import annotations

from dataclasses import dataclass, field

from scouty.hooks import Hook
from scouty.records import EraIndex, SessionIndex
from scouty.types import CamelModel


class Network(CamelModel):
    """Chain name and native token."""

    model_config = CamelModel.model_config | {"frozen": True}

    name: str
    """Chain name, e.g. "Polkadot"."""

    token_symbol: str = "ND"
    token_decimals: int = 12

    @property
    def slug(self) -> str:
        """Lower-case chain name used in explorer URLs."""
        return self.name.lower()

    def format_amount(self, planck: int) -> str:
        """Render an amount in the smallest unit as `1.2345 DOT`."""
        return f"{planck / 10**self.token_decimals:.4f} {self.token_symbol}"


class Session(CamelModel):
    """Session position within its era."""

    model_config = CamelModel.model_config | {"frozen": True}

    active_era_index: EraIndex
    current_session_index: SessionIndex
    era_start_session_index: SessionIndex
    """First session of the active era."""

    queued_session_keys_changed: bool = False
    """Whether the session keys queued for the next session differ."""

    @property
    def eras_session_index(self) -> int:
        """One-based position of the current session within the era."""
        return 1 + int(self.current_session_index) - int(self.era_start_session_index)


@dataclass(slots=True)
class Validator:
    """A watched stash and what happened to it in a report."""

    stash: str
    name: str = ""
    is_active: bool = False
    is_queued: bool = False
    queued_session_keys: str = "0x"
    """Hex of the session keys queued for the next session."""

    is_slashed: bool = False
    is_chilled: bool = False
    is_offline: bool = False
    hooks: list[Hook] = field(default_factory=list)


@dataclass(slots=True)
class Slash:
    who: str
    amount: int
    """Slashed amount in the smallest token unit."""

    hook: Hook | None = None


@dataclass(slots=True)
class Referendum:
    index: int
    track: str
    hook: Hook | None = None
