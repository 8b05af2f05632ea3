"""
Snapshot Store

Single mutable slot holding the latest snapshot and the latest valid bar.
Reads never trigger computation.
"""

from typing import Optional

from candleserver.schemas.indicators import IndicatorSnapshot
from candleserver.schemas.market import Bar


class SnapshotStore:
    """Latest engine output. Written only by the post-ingest step."""

    def __init__(self, snapshot: Optional[IndicatorSnapshot] = None):
        self._snapshot = snapshot or IndicatorSnapshot()
        self._latest_bar: Optional[Bar] = None
        self._ready = False

    @property
    def snapshot(self) -> IndicatorSnapshot:
        return self._snapshot

    @property
    def latest_bar(self) -> Optional[Bar]:
        return self._latest_bar

    @property
    def ready(self) -> bool:
        return self._ready

    def write(self, bar: Bar, snapshot: IndicatorSnapshot, ready: bool) -> None:
        self._latest_bar = bar
        self._snapshot = snapshot
        self._ready = ready
