"""
Real-time streaming endpoints.

- SSE: push indicator snapshots to dashboards without polling.
- WebSocket: receive raw price ticks from the browser feed, fold them into
  one OHLC bar per bucket and submit each bar to the engine.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import StreamingResponse

from candleserver.api.deps import get_app_settings, get_engine
from candleserver.core.config import Settings
from candleserver.services.feed import TickAggregator, parse_tick_frame
from candleserver.services.indicators import IndicatorEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/indicators")
async def stream_indicators(
    interval: Optional[int] = Query(default=None, ge=50, le=60000, description="Poll interval in ms"),
    engine: IndicatorEngine = Depends(get_engine),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Stream indicator snapshots via SSE.

    A snapshot is sent whenever a new bar has been processed; otherwise a
    heartbeat comment keeps the connection alive.

    Usage (JavaScript):
    ```js
    const eventSource = new EventSource('/api/v1/stream/indicators');
    eventSource.onmessage = (event) => {
      const data = JSON.parse(event.data);
      console.log('RSI:', data.indicators.rsi);
    };
    ```
    """
    interval_seconds = (interval or app_settings.stream_interval_ms) / 1000.0

    async def event_generator():
        last_bar = None
        first = True

        try:
            while True:
                latest = engine.store.latest_bar
                if first or latest is not last_bar:
                    snapshot = engine.get_snapshot()
                    yield f"data: {snapshot.model_dump_json()}\n\n"
                    last_bar = latest
                    first = False
                else:
                    # Send heartbeat to keep connection alive
                    yield ": heartbeat\n\n"

                await asyncio.sleep(interval_seconds)

        except asyncio.CancelledError:
            pass

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        },
    )


async def _flush_loop(aggregator: TickAggregator, engine: IndicatorEngine) -> None:
    """Close one bucket every bucket_seconds and submit the resulting bar."""
    while True:
        await asyncio.sleep(aggregator.bucket_seconds)
        try:
            bar = aggregator.flush()
            if bar is None:
                continue
            result = engine.submit_bar(bar)
            logger.info(f"Feed bar {bar.timestamp} close={bar.close} ok={result.ok}")
        except Exception:
            logger.exception("Feed bucket flush failed, continuing with the next bucket")


@router.websocket("/ticks")
async def ingest_ticks(websocket: WebSocket):
    """
    Receive raw feed frames (text or binary) and aggregate them into bars.

    Frames that carry no price are ignored. The forming bucket is dropped
    when the feed disconnects.
    """
    engine: IndicatorEngine = websocket.app.state.engine
    bucket_seconds = websocket.app.state.settings.bar_interval_seconds

    await websocket.accept()
    aggregator = TickAggregator(bucket_seconds=bucket_seconds)
    flush_task = asyncio.create_task(_flush_loop(aggregator, engine))
    logger.info(f"Feed connected, bucket={bucket_seconds}s")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            price = parse_tick_frame(raw) if raw is not None else None
            if price is not None:
                aggregator.add(price)

    except WebSocketDisconnect:
        pass
    finally:
        flush_task.cancel()
        try:
            await flush_task
        except asyncio.CancelledError:
            pass
        logger.info("Feed disconnected")
