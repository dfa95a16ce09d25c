"""Throttled, point-in-time views of the accumulated step metrics."""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import structlog

from .metrics import Accumulators, IntervalRecord

logger = structlog.get_logger(__name__)

SnapshotListener = Callable[["Snapshot"], None]


@dataclass(frozen=True)
class Snapshot:
    """Consumer-facing copy of the session metrics."""

    timestamp: float
    steps: int
    distance_meters: float  # 2 decimals
    calories: int
    active_time_units: int
    interval_history: Tuple[IntervalRecord, ...]  # Oldest first
    goal: int
    goal_progress: float  # 0.0 - 1.0
    goal_achieved: bool


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def build_snapshot(
    totals: Accumulators,
    history: List[IntervalRecord],
    timestamp: float,
    goal: int,
) -> Snapshot:
    """
    Copy accumulator totals and interval history into a Snapshot.

    Args:
        totals: Live accumulator values
        history: Interval records, oldest first
        timestamp: Time the snapshot is taken (ms)
        goal: Daily step goal

    Returns:
        Immutable Snapshot
    """
    progress = min(totals.steps / goal, 1.0) if goal > 0 else 0.0
    return Snapshot(
        timestamp=timestamp,
        steps=totals.steps,
        distance_meters=round(totals.distance_meters, 2),
        calories=round_half_up(totals.calories),
        active_time_units=round_half_up(totals.active_time_units),
        interval_history=tuple(history),
        goal=goal,
        goal_progress=progress,
        goal_achieved=goal > 0 and totals.steps >= goal,
    )


class SnapshotPublisher:
    """Holds the latest published snapshot and notifies subscribers."""

    def __init__(self, initial: Optional[Snapshot] = None):
        self.latest = initial
        self.published_count = 0
        self._listeners: List[SnapshotListener] = []

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a listener for future snapshots.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, snapshot: Snapshot):
        """Make `snapshot` the latest and hand it to every listener."""
        self.latest = snapshot
        self.published_count += 1
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # Remaining listeners still receive the snapshot
                logger.exception("snapshot_listener_failed", listener=repr(listener))
