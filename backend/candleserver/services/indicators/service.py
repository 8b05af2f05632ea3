"""
Indicator Engine Service Implementation

Owns the rolling series and the snapshot store, and recomputes every
configured indicator after each accepted bar.
NO I/O - Pure Python/NumPy calculations.
"""

import logging
from collections import deque
from typing import Any, Callable, Optional

from candleserver.core.config import IndicatorSettings, Settings
from candleserver.schemas.market import Bar, SubmitResult
from candleserver.schemas.indicators import (
    ADXData,
    BollingerBandsData,
    IndicatorSnapshot,
    MACDData,
    SnapshotResponse,
    StochasticData,
)
from candleserver.services.base import ValidationError
from candleserver.services.indicators.interface import IndicatorEngineInterface
from candleserver.services.indicators.history import RollingSeries
from candleserver.services.indicators.ingest import parse_bar
from candleserver.services.indicators.store import SnapshotStore
from candleserver.services.indicators.calculations import (
    PriceVectors,
    adx,
    bollinger_bands,
    cci,
    finite_or_none,
    get_latest,
    macd,
    psar,
    rsi,
    sma,
    stochastic,
)

logger = logging.getLogger(__name__)


class IndicatorEngine(IndicatorEngineInterface):
    """
    Indicator Engine Service.

    One instance per process (or per feed). Constructed at startup and
    handed to the transport layer by reference.
    """

    def __init__(self, config: Optional[IndicatorSettings] = None, capacity: Optional[int] = None):
        self._config = config or IndicatorSettings()
        capacity = capacity or self._config.min_history
        if capacity < self._config.min_history:
            raise ValueError(
                f"capacity {capacity} cannot hold the minimum indicator history "
                f"{self._config.min_history}"
            )
        self._series = RollingSeries(capacity)
        self._sma_history: deque[float] = deque(maxlen=self._config.trail_retain)
        self._psar_history: deque[float] = deque(maxlen=self._config.trail_retain)
        self._store = SnapshotStore(self.recompute())

    @property
    def config(self) -> IndicatorSettings:
        return self._config

    @property
    def series(self) -> RollingSeries:
        return self._series

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def required_history(self) -> int:
        return self._config.max_period

    def ingest(self, candidate: Any) -> Bar:
        """Validate, append, evict, recompute."""
        bar = parse_bar(candidate)

        evicted = self._series.push(bar)
        if evicted is not None:
            logger.debug(f"Evicted bar {evicted.timestamp}")

        ready = len(self._series) >= self.required_history
        if ready:
            self._advance_trails()
        snapshot = self.recompute()
        self._store.write(bar, snapshot, ready=ready)

        logger.debug(f"Received OHLC: {bar.model_dump()}")
        return bar

    def submit_bar(self, candidate: Any) -> SubmitResult:
        try:
            self.ingest(candidate)
        except ValidationError as e:
            logger.warning(f"Invalid OHLC data: {e} {e.details}")
            return SubmitResult.rejected()
        return SubmitResult.accepted()

    def recompute(self) -> IndicatorSnapshot:
        """
        Calculate all indicators from the rolling series.

        Below the largest configured period every slot stays unavailable.
        Repeated calls on the same series return the same snapshot.
        """
        cfg = self._config

        if len(self._series) < self.required_history:
            return IndicatorSnapshot(rsi={f"rsi_{p}": None for p in cfg.rsi_periods})

        prices = self._series.vectors()

        return IndicatorSnapshot(
            rsi={
                f"rsi_{p}": self._safe(f"rsi_{p}", self._calculate_rsi, prices, p)
                for p in cfg.rsi_periods
            },
            bollinger_bands=self._safe("bollinger_bands", self._calculate_bollinger, prices),
            cci=self._safe("cci", self._calculate_cci, prices),
            macd=self._safe("macd", self._calculate_macd, prices),
            sma=self._trail(self._sma_history),
            psar=self._trail(self._psar_history),
            adx=self._safe("adx", self._calculate_adx, prices),
            stochastic=self._safe("stochastic", self._calculate_stochastic, prices),
        )

    def get_snapshot(self) -> SnapshotResponse:
        latest = self._store.latest_bar
        return SnapshotResponse(
            ready=self._store.ready,
            bars=len(self._series),
            required_history=self.required_history,
            latest_bar=latest,
            latest_price=latest.close if latest else None,
            indicators=self._store.snapshot,
        )

    def _advance_trails(self) -> None:
        """Append the latest SMA and PSAR once per accepted bar."""
        prices = self._series.vectors()

        sma_val = self._safe("sma", self._calculate_sma, prices)
        if sma_val is not None:
            self._sma_history.append(sma_val)
        psar_val = self._safe("psar", self._calculate_psar, prices)
        if psar_val is not None:
            self._psar_history.append(psar_val)

    def _safe(self, label: str, calculate: Callable, *args):
        """Run one indicator; a failure there must not block the others."""
        try:
            return calculate(*args)
        except (ArithmeticError, ValueError):
            logger.exception(f"Indicator {label} failed, reporting unavailable")
            return None

    def _trail(self, history: deque) -> Optional[list[float]]:
        if not history:
            return None
        return list(history)[-self._config.trail_display:]

    def _calculate_rsi(self, prices: PriceVectors, period: int) -> Optional[float]:
        return finite_or_none(get_latest(rsi(prices.closes, period)), 2)

    def _calculate_bollinger(self, prices: PriceVectors) -> Optional[BollingerBandsData]:
        upper, middle, lower = bollinger_bands(
            prices.closes, self._config.bollinger_period, self._config.bollinger_deviation
        )
        values = (get_latest(upper), get_latest(middle), get_latest(lower))
        if None in values:
            return None
        return BollingerBandsData(upper=values[0], middle=values[1], lower=values[2])

    def _calculate_cci(self, prices: PriceVectors) -> Optional[float]:
        cci_arr = cci(prices.highs, prices.lows, prices.closes, self._config.cci_period)
        return finite_or_none(get_latest(cci_arr), 2)

    def _calculate_macd(self, prices: PriceVectors) -> Optional[MACDData]:
        macd_line, signal_line, _ = macd(
            prices.closes,
            self._config.macd_fast,
            self._config.macd_slow,
            self._config.macd_signal,
        )
        line = get_latest(macd_line)
        signal = get_latest(signal_line)
        if line is None or signal is None:
            return None
        return MACDData(macd_line=line, signal_line=signal, histogram=line - signal)

    def _calculate_sma(self, prices: PriceVectors) -> Optional[float]:
        return get_latest(sma(prices.closes, self._config.sma_period))

    def _calculate_psar(self, prices: PriceVectors) -> Optional[float]:
        return get_latest(
            psar(prices.highs, prices.lows, self._config.psar_step, self._config.psar_max)
        )

    def _calculate_adx(self, prices: PriceVectors) -> Optional[ADXData]:
        adx_arr, plus_di_arr, minus_di_arr = adx(
            prices.highs, prices.lows, prices.closes, self._config.adx_period
        )
        adx_val = get_latest(adx_arr)
        plus_di = get_latest(plus_di_arr)
        minus_di = get_latest(minus_di_arr)
        if adx_val is None or plus_di is None or minus_di is None:
            return None
        return ADXData(adx=adx_val, plus_di=plus_di, minus_di=minus_di)

    def _calculate_stochastic(self, prices: PriceVectors) -> Optional[StochasticData]:
        k_arr, d_arr = stochastic(
            prices.highs,
            prices.lows,
            prices.closes,
            self._config.stochastic_period,
            self._config.stochastic_signal,
        )
        k_val = get_latest(k_arr)
        if k_val is None:
            return None
        return StochasticData(k=k_val, d=get_latest(d_arr))


def build_indicator_engine(settings: Settings) -> IndicatorEngine:
    """Create the process-wide engine from application settings."""
    engine = IndicatorEngine(settings.indicators, capacity=settings.effective_capacity())
    logger.info(
        f"Indicator engine ready: capacity={engine.series.capacity}, "
        f"required_history={engine.required_history}"
    )
    return engine
