"""
Candle Server Schema Contracts

JSON contracts between the bar ingestor, the indicator engine and the
transport layer.
"""

from candleserver.schemas.market import Bar, SubmitResult
from candleserver.schemas.indicators import (
    ADXData,
    BollingerBandsData,
    IndicatorSnapshot,
    MACDData,
    SnapshotResponse,
    StochasticData,
)

__all__ = [
    # Market
    "Bar",
    "SubmitResult",
    # Indicators
    "ADXData",
    "BollingerBandsData",
    "IndicatorSnapshot",
    "MACDData",
    "SnapshotResponse",
    "StochasticData",
]
