"""
Feed adapter: raw price ticks in, OHLC bars out.
"""

from candleserver.services.feed.aggregator import TickAggregator, parse_tick_frame

__all__ = ["TickAggregator", "parse_tick_frame"]
