"""
Indicator API Endpoints

Read the latest indicator snapshot, or submit a bar and get the
refreshed snapshot back in one round trip.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from candleserver.api.deps import get_engine, read_json_body
from candleserver.schemas.indicators import SnapshotResponse
from candleserver.services.indicators import IndicatorEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SnapshotResponse)
async def get_indicators(engine: IndicatorEngine = Depends(get_engine)):
    """
    Get the latest indicator snapshot.

    Returns:
        - ready: False while fewer bars than the largest indicator period are held
        - latest_bar / latest_price
        - indicators: RSI, Bollinger Bands, CCI, MACD, SMA, PSAR, ADX, Stochastic
          (null = unavailable)
    """
    return engine.get_snapshot()


@router.post("", response_model=SnapshotResponse)
async def submit_and_get_indicators(
    payload: Any = Depends(read_json_body),
    engine: IndicatorEngine = Depends(get_engine),
):
    """
    Submit one OHLC bar and return the recomputed snapshot.
    """
    result = engine.submit_bar(payload)
    if not result.ok:
        return JSONResponse(status_code=400, content=result.model_dump())

    snapshot = engine.get_snapshot()
    logger.info(
        f"Updated OHLC and indicators: bars={snapshot.bars} ready={snapshot.ready} "
        f"available={snapshot.indicators.available()}"
    )
    return snapshot
