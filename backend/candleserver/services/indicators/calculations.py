"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
Every function takes aligned price arrays and returns arrays of the same
length, NaN where the indicator is not defined yet. All math is
deterministic.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from candleserver.schemas.market import Bar


@dataclass
class PriceVectors:
    """Close/high/low arrays derived from the rolling series."""

    closes: np.ndarray
    highs: np.ndarray
    lows: np.ndarray

    @classmethod
    def from_bars(cls, bars: Iterable[Bar]) -> "PriceVectors":
        bars = list(bars)
        return cls(
            closes=np.array([b.close for b in bars], dtype=float),
            highs=np.array([b.high for b in bars], dtype=float),
            lows=np.array([b.low for b in bars], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.closes)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the first data point, then
    ema = value * alpha + prev * (1 - alpha), alpha = 2 / (period + 1).
    """
    result = np.full(len(data), np.nan)
    if len(data) == 0:
        return result

    alpha = 2 / (period + 1)
    result[0] = data[0]
    for i in range(1, len(data)):
        result[i] = data[i] * alpha + result[i - 1] * (1 - alpha)

    return result


def wilder_smooth(data: np.ndarray, period: int) -> np.ndarray:
    """Wilder running sum: seeded with the first `period` values."""
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    result[period - 1] = np.sum(data[:period])
    for i in range(period, len(data)):
        result[i] = result[i - 1] - (result[i - 1] / period) + data[i]
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index over a trailing window of `period` closes.

    Average gain and loss are taken over the deltas inside the window.
    A window with no losses scores 100.
    """
    result = np.full(len(closes), np.nan)
    if len(closes) < period:
        return result

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    for i in range(period - 1, len(closes)):
        # deltas[j] is closes[j + 1] - closes[j]
        start = i - period + 1
        avg_gain = np.sum(gains[start:i]) / period
        avg_loss = np.sum(losses[start:i]) / period

        if avg_loss == 0:
            result[i] = 100.0
        else:
            rs = avg_gain / avg_loss
            result[i] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)
    """
    if len(closes) < max(fast_period, slow_period):
        nan_arr = np.full(len(closes), np.nan)
        return nan_arr, nan_arr.copy(), nan_arr.copy()

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    # Histogram
    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


def stochastic(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    k_period: int = 14,
    d_period: int = 3,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Stochastic Oscillator.

    Returns: (k, d)
    """
    if len(closes) < k_period:
        return np.full(len(closes), np.nan), np.full(len(closes), np.nan)

    k = np.full(len(closes), np.nan)

    for i in range(k_period - 1, len(closes)):
        highest_high = np.max(highs[i - k_period + 1 : i + 1])
        lowest_low = np.min(lows[i - k_period + 1 : i + 1])

        if highest_high == lowest_low:
            k[i] = 50
        else:
            k[i] = ((closes[i] - lowest_low) / (highest_high - lowest_low)) * 100

    d = sma(k, d_period)

    return k, d


def cci(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 20
) -> np.ndarray:
    """
    Commodity Channel Index.

    NaN wherever the window's mean deviation is zero.
    """
    result = np.full(len(closes), np.nan)
    if len(closes) < period:
        return result

    typical_price = (highs + lows + closes) / 3

    for i in range(period - 1, len(closes)):
        window = typical_price[i - period + 1 : i + 1]
        if np.ptp(window) == 0:
            continue

        avg_tp = np.mean(window)
        mean_dev = np.mean(np.abs(window - avg_tp))
        if mean_dev == 0:
            continue

        result[i] = (window[-1] - avg_tp) / (0.015 * mean_dev)

    return result


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands with population standard deviation.

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)

    std = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        window = closes[i - period + 1 : i + 1]
        # flat window: keep the bands exactly on the mean
        std[i] = 0.0 if np.ptp(window) == 0 else np.std(window)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower


# =============================================================================
# TREND INDICATORS
# =============================================================================


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Average Directional Index (Wilder).

    The first ADX value needs 2 * period bars.

    Returns: (adx, plus_di, minus_di)
    """
    n = len(closes)
    if n < 2:
        nan_arr = np.full(n, np.nan)
        return nan_arr, nan_arr.copy(), nan_arr.copy()

    # Directional movement and true range, index j describes bar j + 1
    up_move = highs[1:] - highs[:-1]
    down_move = lows[:-1] - lows[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)
    tr = np.maximum.reduce(
        [
            highs[1:] - lows[1:],
            np.abs(highs[1:] - closes[:-1]),
            np.abs(lows[1:] - closes[:-1]),
        ]
    )

    smoothed_tr = wilder_smooth(tr, period)
    smoothed_plus_dm = wilder_smooth(plus_dm, period)
    smoothed_minus_dm = wilder_smooth(minus_dm, period)

    undefined = np.isnan(smoothed_tr)
    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = np.where(smoothed_tr > 0, 100 * smoothed_plus_dm / smoothed_tr, 0.0)
        minus_di = np.where(smoothed_tr > 0, 100 * smoothed_minus_dm / smoothed_tr, 0.0)
        di_sum = plus_di + minus_di
        dx = np.where(di_sum > 0, 100 * np.abs(plus_di - minus_di) / di_sum, 0.0)
    plus_di[undefined] = np.nan
    minus_di[undefined] = np.nan
    dx[undefined] = np.nan

    # ADX: mean of the first `period` DX values, then Wilder average
    adx_result = np.full(n - 1, np.nan)
    first = 2 * period - 2
    if len(dx) > first:
        adx_result[first] = np.mean(dx[period - 1 : first + 1])
        for j in range(first + 1, len(dx)):
            adx_result[j] = (adx_result[j - 1] * (period - 1) + dx[j]) / period

    pad = np.array([np.nan])
    return (
        np.concatenate([pad, adx_result]),
        np.concatenate([pad, plus_di]),
        np.concatenate([pad, minus_di]),
    )


def psar(
    highs: np.ndarray,
    lows: np.ndarray,
    step: float = 0.02,
    max_step: float = 0.2,
) -> np.ndarray:
    """
    Parabolic Stop-and-Reverse.

    The first bar seeds an uptrend (SAR at its low, extreme point at its
    high); values start at the second bar.
    """
    result = np.full(len(highs), np.nan)
    if len(highs) < 2:
        return result

    uptrend = True
    sar = lows[0]
    extreme = highs[0]
    accel = step

    for i in range(1, len(highs)):
        sar = sar + accel * (extreme - sar)
        prior = max(i - 2, 0)

        if uptrend:
            # SAR may not rise above the two prior lows
            sar = min(sar, lows[i - 1], lows[prior])
            if highs[i] > extreme:
                extreme = highs[i]
                accel = min(accel + step, max_step)
        else:
            sar = max(sar, highs[i - 1], highs[prior])
            if lows[i] < extreme:
                extreme = lows[i]
                accel = min(accel + step, max_step)

        if (uptrend and lows[i] < sar) or (not uptrend and highs[i] > sar):
            uptrend = not uptrend
            sar = extreme
            extreme = highs[i] if uptrend else lows[i]
            accel = step

        result[i] = sar

    return result


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_latest(arr: np.ndarray) -> Optional[float]:
    """Last element of an indicator array, None if it is not finite."""
    if len(arr) == 0:
        return None
    value = float(arr[-1])
    return value if math.isfinite(value) else None


def finite_or_none(value: Optional[float], ndigits: Optional[int] = None) -> Optional[float]:
    """Drop NaN/Infinity, optionally rounding what is left."""
    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return round(value, ndigits) if ndigits is not None else value
