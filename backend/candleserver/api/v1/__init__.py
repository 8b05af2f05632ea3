"""
API v1 Router

All endpoints used by the feed adapter and the dashboard.
"""

from fastapi import APIRouter

from candleserver.api.v1.endpoints import bars, indicators, stream

router = APIRouter()

# Include all endpoint routers
router.include_router(bars.router, prefix="/bars", tags=["Bars"])
router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(stream.router, prefix="/stream", tags=["Real-Time Streaming"])
