"""
Candle Indicator Server - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from candleserver.core.config import Settings, get_settings
from candleserver.api.v1 import router as api_v1_router
from candleserver.services.indicators import build_indicator_engine

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Process-wide logging format; safe to call more than once."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("candleserver").setLevel(level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Bar bucket: {settings.bar_interval_seconds}s")

    yield

    # Shutdown
    logger.info(f"Shutting down with {len(app.state.engine.series)} bars in memory")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its single indicator engine."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        Candle Indicator Server API

        ## Architecture
        - **Feed Adapter**: folds live price ticks into fixed-width OHLC bars
        - **Bar Ingestor**: validates bars into a bounded rolling history
        - **Indicator Engine**: RSI, Bollinger Bands, CCI, MACD, SMA, PSAR, ADX,
          Stochastic (pure Python/NumPy)
        - **Snapshot Store**: latest values, served on demand or over SSE
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # One engine per process, handed to handlers through app.state
    app.state.settings = settings
    app.state.engine = build_indicator_engine(settings)

    # CORS middleware - the feed posts from the browser page it instruments
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy" if app.state.engine.health_check() else "degraded",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "bars": len(app.state.engine.series),
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Candle Indicator Server API",
            "docs": "/docs",
            "health": "/health",
            "indicators": "/api/v1/indicators",
        }

    return app


app = create_app()
