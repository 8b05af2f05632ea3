"""
Pytest configuration and fixtures for the candle indicator server tests.
"""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from candleserver.core.config import IndicatorSettings, Settings
from candleserver.main import create_app
from candleserver.services.indicators import IndicatorEngine


def make_bar(close: float, /, spread: float = 0.5, timestamp: str = "2024-02-04 10:30:00", **kwargs) -> dict:
    """Helper to create a raw bar payload around a close price."""
    bar = {
        "open": close,
        "high": close + spread,
        "low": close - spread,
        "close": close,
        "timestamp": timestamp,
    }
    bar.update(kwargs)
    return bar


def random_walk(n: int, seed: int = 7, start: float = 100.0) -> list[dict]:
    """Reproducible random-walk bars."""
    rng = np.random.default_rng(seed)
    closes = start + np.cumsum(rng.normal(0, 1, n))
    spreads = rng.uniform(0.1, 1.5, n)
    return [
        make_bar(float(c), spread=float(s), timestamp=f"t{i}")
        for i, (c, s) in enumerate(zip(closes, spreads))
    ]


@pytest.fixture
def bar_factory():
    return make_bar


@pytest.fixture
def walk_factory():
    return random_walk


@pytest.fixture
def rsi14_config() -> IndicatorSettings:
    """Small periods; the largest configured period is 14 (RSI)."""
    return IndicatorSettings(
        rsi_periods=(14,),
        bollinger_period=5,
        cci_period=4,
        macd_fast=5,
        macd_slow=10,
        macd_signal=3,
        sma_period=3,
        adx_period=5,
        stochastic_period=5,
        stochastic_signal=3,
    )


@pytest.fixture
def five_bar_config() -> IndicatorSettings:
    """Every period fits in five bars."""
    return IndicatorSettings(
        rsi_periods=(4,),
        bollinger_period=5,
        bollinger_deviation=1.0,
        cci_period=4,
        macd_fast=2,
        macd_slow=5,
        macd_signal=2,
        sma_period=3,
        adx_period=2,
        stochastic_period=5,
        stochastic_signal=3,
    )


@pytest.fixture
def engine() -> IndicatorEngine:
    """Default configuration, long 100-bar buffer."""
    return IndicatorEngine(IndicatorSettings(), capacity=100)


@pytest.fixture
def rsi14_engine(rsi14_config) -> IndicatorEngine:
    return IndicatorEngine(rsi14_config, capacity=20)


@pytest.fixture
def test_settings(rsi14_config) -> Settings:
    return Settings(
        indicators=rsi14_config,
        history_capacity=20,
        bar_interval_seconds=0.05,
        log_level="DEBUG",
    )


@pytest.fixture
def client(test_settings) -> TestClient:
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client
