"""
Rolling Series

Bounded, chronological history of bars. Pushing past capacity silently
evicts the oldest bar; nothing is ever queued.
"""

from collections import deque
from typing import Iterator, Optional

from candleserver.schemas.market import Bar
from candleserver.services.indicators.calculations import PriceVectors


class RollingSeries:
    """FIFO buffer of bars with a fixed capacity."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._bars: deque[Bar] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._bars.maxlen

    @property
    def latest(self) -> Optional[Bar]:
        return self._bars[-1] if self._bars else None

    def push(self, bar: Bar) -> Optional[Bar]:
        """Append a bar. Returns the evicted bar when the buffer was full."""
        evicted = self._bars[0] if len(self._bars) == self.capacity else None
        self._bars.append(bar)
        return evicted

    def vectors(self) -> PriceVectors:
        """Close/high/low arrays aligned with the current bars."""
        return PriceVectors.from_bars(self._bars)

    def to_list(self) -> list[Bar]:
        return list(self._bars)

    def __len__(self) -> int:
        return len(self._bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self._bars)
