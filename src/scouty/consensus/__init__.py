"""Consensus digest decoding."""

from .digest import (
    BABE_ENGINE_ID,
    DigestItem,
    EngineMessage,
    PreDigest,
    PrimaryPreDigest,
    SecondaryPlainPreDigest,
    SecondaryVRFPreDigest,
    VrfSignature,
    decode_authority_index,
    decode_digest_logs,
)
from .types import AuthorityIndex, Slot

__all__ = [
    "AuthorityIndex",
    "BABE_ENGINE_ID",
    "DigestItem",
    "EngineMessage",
    "PreDigest",
    "PrimaryPreDigest",
    "SecondaryPlainPreDigest",
    "SecondaryVRFPreDigest",
    "Slot",
    "VrfSignature",
    "decode_authority_index",
    "decode_digest_logs",
]
