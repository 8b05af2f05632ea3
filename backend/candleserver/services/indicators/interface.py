"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Any

from candleserver.services.base import BaseService
from candleserver.schemas.market import Bar, SubmitResult
from candleserver.schemas.indicators import IndicatorSnapshot, SnapshotResponse


class IndicatorEngineInterface(BaseService):
    """
    Indicator Engine Service Contract.

    INPUT: candidate bar (mapping with open/high/low/close/timestamp)
        - validated, appended to the rolling series, oldest evicted

    OUTPUT: SnapshotResponse
        - latest bar, readiness, one slot per configured indicator
    """

    @property
    def name(self) -> str:
        return "IndicatorEngine"

    @abstractmethod
    def ingest(self, candidate: Any) -> Bar:
        """
        Validate and append a bar, then recompute.

        Raises:
            ValidationError: malformed candidate; no state is mutated
        """
        pass

    @abstractmethod
    def submit_bar(self, candidate: Any) -> SubmitResult:
        """Boundary form of ingest: never raises, reports ok / invalid-input."""
        pass

    @abstractmethod
    def recompute(self) -> IndicatorSnapshot:
        """Recompute every indicator from the current rolling series."""
        pass

    @abstractmethod
    def get_snapshot(self) -> SnapshotResponse:
        """Read the last written snapshot without computing anything."""
        pass

    def health_check(self) -> bool:
        """Indicator engine is always healthy (pure computation)."""
        return True
