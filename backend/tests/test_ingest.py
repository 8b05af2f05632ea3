"""
Tests for bar validation and the bounded rolling series.
"""

import math

import pydantic
import pytest

from candleserver.schemas.market import Bar
from candleserver.services.base import ValidationError
from candleserver.services.indicators.history import RollingSeries
from candleserver.services.indicators.ingest import is_price, parse_bar


# ============================================================================
# BAR VALIDATION
# ============================================================================

class TestParseBar:
    def test_valid_bar(self, bar_factory):
        bar = parse_bar(bar_factory(101.5))

        assert isinstance(bar, Bar)
        assert bar.close == 101.5
        assert bar.high == 102.0
        assert bar.timestamp == "2024-02-04 10:30:00"

    def test_zero_close_is_valid(self, bar_factory):
        bar = parse_bar(bar_factory(1.0, close=0))
        assert bar.close == 0.0

    def test_all_zero_prices_are_valid(self):
        bar = parse_bar({"open": 0, "high": 0, "low": 0, "close": 0, "timestamp": "t0"})
        assert (bar.open, bar.high, bar.low, bar.close) == (0.0, 0.0, 0.0, 0.0)

    def test_ints_become_floats(self):
        bar = parse_bar({"open": 1, "high": 2, "low": 1, "close": 2, "timestamp": "t"})
        assert isinstance(bar.close, float)

    def test_bar_instance_passes_through(self, bar_factory):
        bar = parse_bar(bar_factory(10.0))
        assert parse_bar(bar) is bar

    @pytest.mark.parametrize("field", ["open", "high", "low", "close", "timestamp"])
    def test_missing_field(self, bar_factory, field):
        candidate = bar_factory(10.0)
        del candidate[field]

        with pytest.raises(ValidationError) as exc_info:
            parse_bar(candidate)
        assert field in exc_info.value.details["missing"]

    @pytest.mark.parametrize("field", ["open", "high", "low", "close"])
    def test_null_price(self, bar_factory, field):
        with pytest.raises(ValidationError):
            parse_bar(bar_factory(10.0, **{field: None}))

    @pytest.mark.parametrize(
        "value", ["10.5", True, False, float("nan"), float("inf"), -math.inf, [1.0], {}]
    )
    def test_non_numeric_price(self, bar_factory, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_bar(bar_factory(10.0, close=value))
        assert exc_info.value.details["invalid"] == ["close"]

    @pytest.mark.parametrize("timestamp", ["", "   ", 1707042005])
    def test_bad_timestamp(self, bar_factory, timestamp):
        with pytest.raises(ValidationError) as exc_info:
            parse_bar(bar_factory(10.0, timestamp=timestamp))
        assert "timestamp" in exc_info.value.details["invalid"]

    @pytest.mark.parametrize("candidate", [None, [], "bar", 42])
    def test_non_mapping(self, candidate):
        with pytest.raises(ValidationError):
            parse_bar(candidate)

    def test_error_names_service(self, bar_factory):
        with pytest.raises(ValidationError) as exc_info:
            parse_bar({"timestamp": "t"})
        assert exc_info.value.service_name == "BarIngestor"
        assert str(exc_info.value).startswith("[BarIngestor]")

    def test_bar_is_immutable(self, bar_factory):
        bar = parse_bar(bar_factory(10.0))
        with pytest.raises(pydantic.ValidationError):
            bar.close = 11.0

    def test_oversized_integer_rejected(self, bar_factory):
        with pytest.raises(ValidationError) as exc_info:
            parse_bar(bar_factory(10.0, close=10**400))
        assert exc_info.value.details["invalid"] == ["close"]

    def test_is_price(self):
        assert is_price(0)
        assert not is_price(10**400)
        assert is_price(10**20)
        assert is_price(-1.5)
        assert not is_price(True)
        assert not is_price(None)
        assert not is_price(float("nan"))


# ============================================================================
# ROLLING SERIES
# ============================================================================

class TestRollingSeries:
    def make(self, close: float) -> Bar:
        return Bar(open=close, high=close, low=close, close=close, timestamp=f"t{close}")

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            RollingSeries(0)

    def test_grows_until_capacity(self):
        series = RollingSeries(3)
        evicted = [series.push(self.make(c)) for c in (1.0, 2.0, 3.0)]

        assert evicted == [None, None, None]
        assert len(series) == 3
        assert series.latest.close == 3.0

    def test_fifo_eviction(self):
        series = RollingSeries(3)
        for c in (1.0, 2.0, 3.0):
            series.push(self.make(c))

        for c in (4.0, 5.0, 6.0, 7.0):
            evicted = series.push(self.make(c))
            assert evicted.close == c - 3
            assert len(series) == 3

        assert [b.close for b in series] == [5.0, 6.0, 7.0]

    def test_length_never_exceeds_capacity(self):
        series = RollingSeries(100)
        for i in range(250):
            series.push(self.make(float(i)))
            assert len(series) <= 100

        assert series.to_list()[0].close == 150.0

    def test_vectors_are_aligned(self):
        series = RollingSeries(5)
        series.push(Bar(open=1, high=3, low=0, close=2, timestamp="a"))
        series.push(Bar(open=2, high=4, low=1, close=3, timestamp="b"))
        vectors = series.vectors()

        assert len(vectors) == len(series) == 2
        assert list(vectors.closes) == [2.0, 3.0]
        assert list(vectors.highs) == [3.0, 4.0]
        assert list(vectors.lows) == [0.0, 1.0]

    def test_empty(self):
        series = RollingSeries(5)
        assert series.latest is None
        assert len(series.vectors()) == 0
