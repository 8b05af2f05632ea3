"""
Tick-to-bar aggregation for the live price feed.

The browser feed forwards raw WebSocket frames; each price frame is a single
nested row with the price at index 2, e.g. ``[[1707042005, "EURUSD", 1.0848]]``.
Ticks are folded into one OHLC bar per fixed bucket and handed to the engine.
"""

import json
import logging
from datetime import datetime
from typing import Optional, Union

from candleserver.schemas.market import Bar
from candleserver.services.indicators.ingest import is_price

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PRICE_INDEX = 2


def parse_tick_frame(raw: Union[str, bytes]) -> Optional[float]:
    """
    Extract the price from a raw feed frame.

    Returns None for frames that are not price frames or cannot be decoded.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Dropping undecodable frame")
            return None

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.debug(f"Error parsing feed frame: {e}")
        return None

    if not (isinstance(data, list) and len(data) == 1 and isinstance(data[0], list)):
        return None
    row = data[0]
    if len(row) <= PRICE_INDEX:
        return None

    try:
        price = float(row[PRICE_INDEX])
    except (TypeError, ValueError, OverflowError):
        return None
    return price if is_price(price) else None


class TickAggregator:
    """
    Folds ticks into OHLC buckets.

    Usage:
        aggregator = TickAggregator(bucket_seconds=5)
        aggregator.add(1.0848)
        ...
        bar = aggregator.flush()  # every bucket_seconds
    """

    def __init__(self, bucket_seconds: float = 5.0):
        if bucket_seconds <= 0:
            raise ValueError("bucket_seconds must be positive")
        self.bucket_seconds = bucket_seconds
        self._reset()

    def _reset(self) -> None:
        self._open: Optional[float] = None
        self._high: Optional[float] = None
        self._low: Optional[float] = None
        self._close: Optional[float] = None
        self.ticks = 0

    @property
    def is_empty(self) -> bool:
        return self._open is None

    def add(self, price: float) -> None:
        """Record one tick in the forming bucket."""
        if self._open is None:
            self._open = self._high = self._low = price
        if price > self._high:
            self._high = price
        if price < self._low:
            self._low = price
        self._close = price
        self.ticks += 1

    def flush(self, now: Optional[datetime] = None) -> Optional[Bar]:
        """Close the forming bucket. None when no tick arrived in it."""
        if self.is_empty:
            return None

        stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        bar = Bar(
            open=self._open,
            high=self._high,
            low=self._low,
            close=self._close,
            timestamp=stamp,
        )
        logger.debug(f"Bucket closed after {self.ticks} ticks: {bar.model_dump()}")
        self._reset()
        return bar
