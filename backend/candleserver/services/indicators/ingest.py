"""
Bar Ingestor

Turns a raw candidate (JSON body, feed adapter output) into a Bar.
Checks are explicit presence/type checks: a price of 0 is a valid price.
"""

import math
from collections.abc import Mapping
from typing import Any

from candleserver.schemas.market import Bar
from candleserver.services.base import ValidationError

PRICE_FIELDS = ("open", "high", "low", "close")


def is_price(value: Any) -> bool:
    """True for finite int/float values (bool is not a number here)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def parse_bar(candidate: Any) -> Bar:
    """
    Validate a candidate bar.

    Raises:
        ValidationError: missing or non-numeric prices, missing timestamp
    """
    if isinstance(candidate, Bar):
        return candidate

    if not isinstance(candidate, Mapping):
        raise ValidationError(
            "BarIngestor",
            "Bar must be an object",
            details={"type": type(candidate).__name__},
        )

    missing = [field for field in PRICE_FIELDS if candidate.get(field) is None]
    invalid = [
        field
        for field in PRICE_FIELDS
        if field not in missing and not is_price(candidate[field])
    ]

    timestamp = candidate.get("timestamp")
    if timestamp is None:
        missing.append("timestamp")
    elif not isinstance(timestamp, str) or not timestamp.strip():
        invalid.append("timestamp")

    if missing or invalid:
        raise ValidationError(
            "BarIngestor",
            "Invalid OHLC data",
            details={"missing": missing, "invalid": invalid},
        )

    return Bar(
        open=float(candidate["open"]),
        high=float(candidate["high"]),
        low=float(candidate["low"]),
        close=float(candidate["close"]),
        timestamp=timestamp,
    )
