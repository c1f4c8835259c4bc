"""Consensus index types."""

from scouty.types import Uint32, Uint64


class AuthorityIndex(Uint32):
    """Position of a validator in the current authority set."""


class Slot(Uint64):
    """A BABE slot number."""
