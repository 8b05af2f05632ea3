"""
CONTRACT 1: Bar Ingestion

Input: raw candidate mapping (JSON body or feed adapter output)
Output: Bar

A Bar is the OHLC summary of one fixed time bucket. The timestamp is opaque
to the engine; bars are trusted to arrive in chronological order.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class Bar(BaseModel):
    """Single immutable OHLC bar."""

    open: float
    high: float
    low: float
    close: float
    timestamp: str = Field(..., min_length=1, description="Opaque bucket label")

    class Config:
        frozen = True
        allow_inf_nan = False
        json_schema_extra = {
            "example": {
                "open": 1.0842,
                "high": 1.0851,
                "low": 1.0839,
                "close": 1.0848,
                "timestamp": "2024-02-04 10:30:05",
            }
        }


class SubmitResult(BaseModel):
    """
    Outcome of submitting a bar.
    Returned by: Indicator Engine
    Consumed by: HTTP transport / feed adapter
    """

    ok: bool
    reason: Optional[Literal["invalid-input"]] = None

    @classmethod
    def accepted(cls) -> "SubmitResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls) -> "SubmitResult":
        return cls(ok=False, reason="invalid-input")
