"""
Bar API Endpoints

Entry point for OHLC bars produced by the feed adapter.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from candleserver.api.deps import get_engine, read_json_body
from candleserver.schemas.market import Bar, SubmitResult
from candleserver.services.indicators import IndicatorEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SubmitResult)
async def submit_bar(
    payload: Any = Depends(read_json_body),
    engine: IndicatorEngine = Depends(get_engine),
):
    """
    Submit one OHLC bar.

    Returns `{"ok": true}` or, with status 400,
    `{"ok": false, "reason": "invalid-input"}`.
    """
    result = engine.submit_bar(payload)
    if not result.ok:
        return JSONResponse(status_code=400, content=result.model_dump())
    return result


@router.get("", response_model=list[Bar])
async def get_bars(engine: IndicatorEngine = Depends(get_engine)):
    """Bars currently held in the rolling series, oldest first."""
    return engine.series.to_list()
