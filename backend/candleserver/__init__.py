"""
Candle Indicator Server

Streaming OHLC bars in, rolling technical-indicator snapshots out.
"""

__version__ = "0.1.0"
