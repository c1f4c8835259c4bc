"""
Header digest items and the BABE pre-runtime digest.

Every block header carries a digest: an ordered list of log items that the
runtime and the consensus engines attach to it. The block author writes a
`PreRuntime` item tagged with its engine id, whose payload is a BABE
`PreDigest` naming the authority that produced the block.

Wire formats (SCALE):

    DigestItem   = u8 variant index ++ payload
        0  Other                      Vec<u8>
        4  Consensus                  [u8; 4] engine id ++ Vec<u8>
        5  Seal                       [u8; 4] engine id ++ Vec<u8>
        6  PreRuntime                 [u8; 4] engine id ++ Vec<u8>
        8  RuntimeEnvironmentUpdated  (no payload)

    PreDigest    = u8 variant index ++ payload
        1  Primary         authority_index u32 ++ slot u64 ++ vrf (32 + 64 bytes)
        2  SecondaryPlain  authority_index u32 ++ slot u64
        3  SecondaryVRF    authority_index u32 ++ slot u64 ++ vrf (32 + 64 bytes)
"""

from __future__ import annotations

import logging
from typing import ClassVar, Final, Iterable

from scouty.types import Bytes4, Bytes32, Bytes64, ByteVec, Container, ScaleEnum, ScaleError

from .types import AuthorityIndex, Slot

logger = logging.getLogger(__name__)

BABE_ENGINE_ID: Final = Bytes4(b"BABE")
"""Engine id BABE writes into its digest items."""


class EngineMessage(Container):
    """A payload tagged with the id of the consensus engine that owns it."""

    engine: Bytes4
    """Four-byte consensus engine id, e.g. `BABE`."""

    data: ByteVec
    """Opaque engine-specific payload."""


class DigestItem(ScaleEnum):
    """One log item of a block header digest."""

    OTHER: ClassVar[int] = 0
    CONSENSUS: ClassVar[int] = 4
    SEAL: ClassVar[int] = 5
    PRE_RUNTIME: ClassVar[int] = 6
    RUNTIME_ENVIRONMENT_UPDATED: ClassVar[int] = 8

    VARIANTS = {
        OTHER: ByteVec,
        CONSENSUS: EngineMessage,
        SEAL: EngineMessage,
        PRE_RUNTIME: EngineMessage,
        RUNTIME_ENVIRONMENT_UPDATED: None,
    }

    @classmethod
    def pre_runtime(cls, engine: bytes, data: bytes) -> DigestItem:
        """Build a `PreRuntime` item."""
        return cls(
            selector=cls.PRE_RUNTIME,
            value=EngineMessage(engine=Bytes4(engine), data=ByteVec(data)),
        )

    @property
    def is_pre_runtime(self) -> bool:
        return self.selector == self.PRE_RUNTIME


class VrfSignature(Container):
    """VRF output attached to primary and secondary-VRF claims."""

    pre_output: Bytes32
    proof: Bytes64


class PrimaryPreDigest(Container):
    """Slot claimed by winning the VRF lottery."""

    authority_index: AuthorityIndex
    slot: Slot
    vrf_signature: VrfSignature


class SecondaryPlainPreDigest(Container):
    """Slot claimed as the deterministic secondary author."""

    authority_index: AuthorityIndex
    slot: Slot


class SecondaryVRFPreDigest(Container):
    """Secondary slot claim carrying a VRF output."""

    authority_index: AuthorityIndex
    slot: Slot
    vrf_signature: VrfSignature


class PreDigest(ScaleEnum):
    """The BABE pre-runtime digest naming the block author."""

    VARIANTS = {
        1: PrimaryPreDigest,
        2: SecondaryPlainPreDigest,
        3: SecondaryVRFPreDigest,
    }

    @property
    def authority_index(self) -> AuthorityIndex:
        """Authority index of the claim, whatever its variant."""
        return self.value.authority_index

    @property
    def slot(self) -> Slot:
        return self.value.slot


def decode_authority_index(logs: Iterable[DigestItem]) -> AuthorityIndex | None:
    """
    Extract the block author's authority index from a header digest.

    Only the first `PreRuntime` item is considered, whatever its engine id.
    Bytes following a decoded pre-digest are ignored.

    Args:
        logs: Digest items in header order.

    Returns:
        The authority index, or `None` when there is no `PreRuntime` item or
        its payload is not a valid pre-digest.
    """
    for item in logs:
        if not item.is_pre_runtime:
            continue
        try:
            pre_digest = PreDigest.decode_bytes(bytes(item.value.data), allow_trailing=True)
        except ScaleError as e:
            logger.debug("Undecodable pre-runtime digest: %s", e)
            return None
        return pre_digest.authority_index
    return None


def decode_digest_logs(raw_logs: Iterable[str | bytes]) -> list[DigestItem]:
    """
    Decode raw digest log items as returned by a node's RPC.

    Items that fail to decode are skipped with a debug log.

    Args:
        raw_logs: SCALE-encoded `DigestItem` values, as bytes or hex strings.

    Returns:
        The decoded items in their original order.
    """
    items = []
    for position, raw in enumerate(raw_logs):
        try:
            data = bytes.fromhex(raw.removeprefix("0x")) if isinstance(raw, str) else raw
            items.append(DigestItem.decode_bytes(data))
        except (ScaleError, ValueError) as e:
            logger.debug("Skipping digest log %d: %s", position, e)
    return items
