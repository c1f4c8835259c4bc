"""JSON lines chain event feed."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import IO

from pydantic import ValidationError

from scouty.errors import FeedError

from .events import FEED_EVENT_ADAPTER, BlockEvent, SnapshotEvent

logger = logging.getLogger(__name__)


class JsonLinesFeed:
    """
    Read feed events from a text stream, one JSON object per line.

    Blank lines are skipped. A line that is not a valid event raises
    `FeedError`; iteration can continue with the next line afterwards.
    """

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._line_number = 0

    @classmethod
    def open(cls, path: str) -> JsonLinesFeed:
        """Open a feed file, or stdin for `-`."""
        if path == "-":
            return cls(sys.stdin)
        return cls(Path(path).open(encoding="utf-8", errors="replace"))

    def close(self) -> None:
        if self._stream is not sys.stdin:
            self._stream.close()

    def __aiter__(self) -> JsonLinesFeed:
        return self

    async def __anext__(self) -> SnapshotEvent | BlockEvent:
        while True:
            # Reads block, keep them off the event loop.
            try:
                line = await asyncio.to_thread(self._stream.readline)
            except UnicodeDecodeError as e:
                self._line_number += 1
                raise FeedError(f"Undecodable feed line {self._line_number}: {e}") from e
            if not line:
                raise StopAsyncIteration
            self._line_number += 1
            if line.strip():
                break

        try:
            return FEED_EVENT_ADAPTER.validate_json(line)
        except ValidationError as e:
            raise FeedError(f"Invalid feed event on line {self._line_number}: {e}") from e
