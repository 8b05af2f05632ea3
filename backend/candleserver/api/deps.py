"""
Shared FastAPI dependencies.
"""

from typing import Any

from fastapi import Request

from candleserver.core.config import Settings
from candleserver.services.indicators import IndicatorEngine


def get_engine(request: Request) -> IndicatorEngine:
    """The process-wide engine created by the application factory."""
    return request.app.state.engine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def read_json_body(request: Request) -> Any:
    """Raw JSON body; None when the body is not JSON so the engine rejects it."""
    try:
        return await request.json()
    except ValueError:
        return None
