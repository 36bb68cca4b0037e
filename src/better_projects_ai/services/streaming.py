"""Incremental word-boundary reveal of a finished summary."""

import asyncio
import logging
import random
from enum import Enum
from typing import AsyncIterator, Callable, Optional

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETE = "complete"


class StreamingPresenter:
    """Reveals a growing prefix of a text, never cutting a word in half.

    States: idle -> streaming -> complete. `skip_to_end` jumps straight to
    complete. `start` with new text resets the session.

    Args:
        chunk_size: Minimum characters revealed per tick (default: 15)
        interval: Seconds between ticks when streaming (default: 0.015)
        jitter: Up to jitter-1 extra characters per tick (default: 3)
    """

    def __init__(
        self,
        chunk_size: int = 15,
        interval: float = 0.015,
        jitter: int = 3,
        rng: Optional[Callable[[int, int], int]] = None,
    ):
        self.chunk_size = chunk_size
        self.interval = interval
        self.jitter = max(1, jitter)
        self._randint = rng or random.randint
        self.full_text = ""
        self.streamed_text = ""
        self.state = StreamState.IDLE

    @property
    def is_complete(self) -> bool:
        return self.state == StreamState.COMPLETE

    def start(self, text: str, active: bool = True) -> None:
        self.full_text = text
        if active and text:
            self.streamed_text = ""
            self.state = StreamState.STREAMING
        else:
            self.streamed_text = text
            self.state = StreamState.COMPLETE

    def tick(self) -> str:
        """Reveal the next chunk and return the newly revealed delta."""
        if self.state != StreamState.STREAMING:
            return ""

        current = len(self.streamed_text)
        boundary = current + self.chunk_size + self._randint(0, self.jitter - 1)
        while boundary < len(self.full_text) and self.full_text[boundary] not in (" ", "\n"):
            boundary += 1

        self.streamed_text = self.full_text[:boundary]
        if len(self.streamed_text) >= len(self.full_text):
            self.state = StreamState.COMPLETE
        return self.streamed_text[current:]

    def skip_to_end(self) -> None:
        self.streamed_text = self.full_text
        self.state = StreamState.COMPLETE

    async def stream(self) -> AsyncIterator[str]:
        """Yield deltas on the timer until the whole text is revealed."""
        while self.state == StreamState.STREAMING:
            delta = self.tick()
            if delta:
                yield delta
            if self.state == StreamState.STREAMING:
                await asyncio.sleep(self.interval)
