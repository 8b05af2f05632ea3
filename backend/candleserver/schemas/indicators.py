"""
CONTRACT 2: Indicator Engine

Input: Rolling series of Bars
Output: IndicatorSnapshot / SnapshotResponse

Every indicator slot is either a finite value or None ("unavailable" -
insufficient history or a degenerate window). NaN and Infinity never
reach these models.
"""

from typing import Optional
from pydantic import BaseModel, Field

from candleserver.schemas.market import Bar


# =============================================================================
# OUTPUT: Indicator Components
# =============================================================================


class BollingerBandsData(BaseModel):
    """Bollinger Bands values."""

    upper: float
    middle: float
    lower: float


class MACDData(BaseModel):
    """MACD indicator values. histogram == macd_line - signal_line."""

    macd_line: float
    signal_line: float
    histogram: float


class StochasticData(BaseModel):
    """Stochastic oscillator values."""

    k: float
    d: Optional[float] = Field(default=None, description="None until enough %K values exist")


class ADXData(BaseModel):
    """Average Directional Index with its directional components."""

    adx: float
    plus_di: float
    minus_di: float


# =============================================================================
# OUTPUT: IndicatorSnapshot
# =============================================================================


class IndicatorSnapshot(BaseModel):
    """
    Latest value of every configured indicator.
    Overwritten wholesale on each recomputation.
    """

    rsi: dict[str, Optional[float]] = Field(
        default_factory=dict,
        description="Keyed rsi_<period>, rounded to 2 decimals",
    )
    bollinger_bands: Optional[BollingerBandsData] = None
    cci: Optional[float] = None
    macd: Optional[MACDData] = None
    sma: Optional[list[float]] = Field(default=None, description="Trailing SMA values, oldest first")
    psar: Optional[list[float]] = Field(default=None, description="Trailing PSAR values, oldest first")
    adx: Optional[ADXData] = None
    stochastic: Optional[StochasticData] = None

    def available(self) -> list[str]:
        """Names of the indicators holding a value."""
        names = [name for name, value in self.rsi.items() if value is not None]
        for name in ("bollinger_bands", "cci", "macd", "sma", "psar", "adx", "stochastic"):
            if getattr(self, name) is not None:
                names.append(name)
        return names


class SnapshotResponse(BaseModel):
    """
    What the transport reads on demand.
    ready is False while the series is shorter than the largest period.
    """

    ready: bool
    bars: int = Field(..., ge=0, description="Bars currently held")
    required_history: int = Field(..., ge=1)
    latest_bar: Optional[Bar] = None
    latest_price: Optional[float] = None
    indicators: IndicatorSnapshot

    class Config:
        json_schema_extra = {
            "example": {
                "ready": True,
                "bars": 100,
                "required_history": 26,
                "latest_bar": {
                    "open": 101.2,
                    "high": 101.9,
                    "low": 100.8,
                    "close": 101.5,
                    "timestamp": "2024-02-04 10:30:05",
                },
                "latest_price": 101.5,
                "indicators": {
                    "rsi": {"rsi_14": 61.35, "rsi_10": 58.2, "rsi_4": 72.9},
                    "bollinger_bands": {"upper": 101.9, "middle": 101.3, "lower": 100.7},
                    "cci": 84.12,
                    "macd": {"macd_line": 0.21, "signal_line": 0.17, "histogram": 0.04},
                    "sma": [101.1, 101.2, 101.3, 101.35, 101.4],
                    "psar": [100.2, 100.4, 100.6, 100.7, 100.8],
                    "adx": {"adx": 24.6, "plus_di": 27.1, "minus_di": 15.3},
                    "stochastic": {"k": 78.4, "d": 71.2},
                },
            }
        }
