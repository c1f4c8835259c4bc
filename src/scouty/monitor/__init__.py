"""Chain event feed and the monitor service."""

from .events import (
    FEED_EVENT_ADAPTER,
    BlockEvent,
    ChainEventSource,
    Chilled,
    FeedEvent,
    ReferendumSubmitted,
    Slashed,
    SnapshotEvent,
    SomeOffline,
    ValidatorSets,
)
from .feed import JsonLinesFeed
from .service import ChainView, Monitor, check_hooks, configured_hooks, supervise

__all__ = [
    "BlockEvent",
    "ChainEventSource",
    "ChainView",
    "Chilled",
    "FEED_EVENT_ADAPTER",
    "FeedEvent",
    "JsonLinesFeed",
    "Monitor",
    "ReferendumSubmitted",
    "Slashed",
    "SnapshotEvent",
    "SomeOffline",
    "ValidatorSets",
    "check_hooks",
    "configured_hooks",
    "supervise",
]
