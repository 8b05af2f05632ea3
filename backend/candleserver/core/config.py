"""
Application Configuration

All settings loaded from environment variables (and an optional .env file).
Indicator parameters are compile-time style constants: they are read once at
startup and never mutated while the process runs.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class IndicatorSettings(BaseModel):
    """
    Indicator configuration table.

    Override from the environment with the nested delimiter, e.g.
    ``INDICATORS__MACD_FAST=8``.
    """

    # RSI (one entry per reported period)
    rsi_periods: tuple[int, ...] = (14, 10, 4)

    # Bollinger Bands
    bollinger_period: int = Field(default=5, ge=1)
    bollinger_deviation: float = Field(default=1.0, ge=0)

    # CCI
    cci_period: int = Field(default=4, ge=1)

    # MACD
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=1)
    macd_signal: int = Field(default=9, ge=1)

    # SMA
    sma_period: int = Field(default=3, ge=1)

    # PSAR (acceleration step / cap)
    psar_step: float = Field(default=0.25, gt=0)
    psar_max: float = Field(default=1.0, gt=0)

    # ADX
    adx_period: int = Field(default=14, ge=1)

    # Stochastic
    stochastic_period: int = Field(default=14, ge=1)
    stochastic_signal: int = Field(default=3, ge=1)

    # Trailing histories kept for SMA / PSAR
    trail_retain: int = Field(default=10, ge=1)
    trail_display: int = Field(default=5, ge=1)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_periods(self) -> "IndicatorSettings":
        if not self.rsi_periods or any(p < 1 for p in self.rsi_periods):
            raise ValueError("rsi_periods must hold at least one positive period")
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be smaller than macd_slow ({self.macd_slow})"
            )
        if self.psar_step > self.psar_max:
            raise ValueError("psar_step must not exceed psar_max")
        if self.trail_display > self.trail_retain:
            raise ValueError("trail_display must not exceed trail_retain")
        return self

    @property
    def max_period(self) -> int:
        """Largest configured period; the snapshot is not ready below it."""
        return max(
            *self.rsi_periods,
            self.bollinger_period,
            self.cci_period,
            self.macd_fast,
            self.macd_slow,
            self.sma_period,
            self.adx_period,
            self.stochastic_period,
        )

    @property
    def min_history(self) -> int:
        """
        Smallest buffer in which every indicator can produce a value.

        Wilder ADX needs two periods of bars; Stochastic %D needs
        signal - 1 bars on top of the %K window.
        """
        return max(
            self.max_period,
            2 * self.adx_period,
            self.stochastic_period + self.stochastic_signal - 1,
        )


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Candle Indicator Server"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS (the feed adapter posts from the browser)
    allowed_origins: list[str] = ["*"]

    # Rolling history. None sizes the buffer to the minimum indicator history.
    history_capacity: Optional[int] = Field(default=100, ge=1)

    # Feed adapter bucket width (seconds per OHLC bar)
    bar_interval_seconds: float = Field(default=5.0, gt=0)

    # SSE snapshot stream poll interval
    stream_interval_ms: int = Field(default=1000, ge=50, le=60000)

    indicators: IndicatorSettings = IndicatorSettings()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        case_sensitive = False

    @model_validator(mode="after")
    def _check_capacity(self) -> "Settings":
        required = self.indicators.min_history
        if self.history_capacity is not None and self.history_capacity < required:
            raise ValueError(
                f"history_capacity ({self.history_capacity}) is below the minimum "
                f"indicator history ({required})"
            )
        return self

    def effective_capacity(self) -> int:
        """Rolling series capacity after resolving the auto-sized buffer."""
        if self.history_capacity is None:
            return self.indicators.min_history
        return self.history_capacity


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
