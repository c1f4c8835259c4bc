"""
Chain Event Feed Types and Source Protocol.

The monitor does not talk to a node itself. A companion process follows
finalized blocks and writes one JSON object per line:

::

    {"type": "snapshot", "network": {...}, "blockNumber": 100, "session": {...}, ...}
    {"type": "block", "blockNumber": 101, "logs": ["0x0642414245..."]}
    {"type": "block", "blockNumber": 102, "logs": [...], "session": {...}}
    {"type": "block", "blockNumber": 103, "logs": [...], "chilled": [{"stash": "..."}]}

A snapshot carries the chain state the trackers are seeded from. Every
block carries its raw header digest logs, and optionally the session
change and chain events found in it.
"""

from __future__ import annotations

from typing import Annotated, Literal, Protocol, runtime_checkable

from pydantic import Field, TypeAdapter

from scouty.identity import IdentityRecord
from scouty.records import AuthorityIndex, BlockNumber
from scouty.report import Network, Session
from scouty.types import CamelModel


class FeedModel(CamelModel):
    """Immutable feed payload that rejects unknown keys."""

    model_config = CamelModel.model_config | {"extra": "forbid", "frozen": True}


class ValidatorSets(FeedModel):
    """Validator sets in effect for a session."""

    session: Session

    active_validators: list[str]
    """Session validators, in authority index order."""

    queued_keys: dict[str, str] = Field(default_factory=dict)
    """Hex session keys by stash, for validators queued for the next session."""

    para_validator_indices: list[AuthorityIndex] = Field(default_factory=list)
    """Authority indices of the session's parachain validators."""


class Slashed(FeedModel):
    """`staking.Slashed`."""

    staker: str
    amount: int
    """Amount in the smallest token unit."""


class Chilled(FeedModel):
    """`staking.Chilled`."""

    stash: str


class SomeOffline(FeedModel):
    """`im_online.SomeOffline`."""

    offline: list[str]


class ReferendumSubmitted(FeedModel):
    """`referenda.Submitted`."""

    index: int
    track: str


class SnapshotEvent(ValidatorSets):
    """
    Chain state at the block monitoring starts from.

    Always the first event of a feed, and sent again after a feed error.
    """

    type: Literal["snapshot"]

    network: Network

    block_number: BlockNumber

    authored_blocks: dict[str, int] = Field(default_factory=dict)
    """Blocks authored in the current session so far, by stash."""

    identities: dict[str, IdentityRecord] = Field(default_factory=dict)


class BlockEvent(FeedModel):
    """A finalized block."""

    type: Literal["block"]

    block_number: BlockNumber

    logs: list[str] = Field(default_factory=list)
    """SCALE encoded header digest items, hex."""

    session: ValidatorSets | None = None
    """Present on the first block of a session."""

    slashed: list[Slashed] = Field(default_factory=list)
    chilled: list[Chilled] = Field(default_factory=list)
    some_offline: SomeOffline | None = None
    referendum_submitted: list[ReferendumSubmitted] = Field(default_factory=list)


FeedEvent = Annotated[SnapshotEvent | BlockEvent, Field(discriminator="type")]
"""Union of all feed event types for pattern matching dispatch."""

FEED_EVENT_ADAPTER: TypeAdapter[SnapshotEvent | BlockEvent] = TypeAdapter(FeedEvent)


@runtime_checkable
class ChainEventSource(Protocol):
    """
    Abstract source of feed events.

    ::

        async for event in source:
            await monitor.handle(event)
    """

    def __aiter__(self) -> ChainEventSource:
        """Return self as async iterator."""
        ...

    async def __anext__(self) -> SnapshotEvent | BlockEvent:
        """
        Yield the next event.

        Raises:
            StopAsyncIteration: When no more events will arrive.
            FeedError: When a malformed event is read.
        """
        ...
