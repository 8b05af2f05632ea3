"""
Indicator Engine Service

CONTRACT:
    Input:  candidate OHLC bar
    Output: SnapshotResponse

RESPONSIBILITIES:
    - Validate bars and keep a bounded rolling history
    - Calculate RSI, Bollinger Bands, CCI, MACD, SMA, PSAR, ADX, Stochastic
    - Hold the latest snapshot for the transport layer

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from candleserver.services.indicators.interface import IndicatorEngineInterface
from candleserver.services.indicators.service import IndicatorEngine, build_indicator_engine

__all__ = [
    "IndicatorEngineInterface",
    "IndicatorEngine",
    "build_indicator_engine",
]
