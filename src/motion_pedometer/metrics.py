"""Step metric accumulation and interval history."""

from collections import deque
from dataclasses import dataclass
from typing import List, Optional

import structlog

from .config import PedometerConfig

logger = structlog.get_logger(__name__)


@dataclass
class Accumulators:
    """Cumulative session totals. Only ever increase."""

    steps: int = 0
    distance_meters: float = 0.0
    calories: float = 0.0
    active_time_units: float = 0.0


@dataclass(frozen=True)
class IntervalRecord:
    """Step activity accrued during one interval (a delta, not a running total)."""

    timestamp: float
    steps: int
    distance_meters: float
    calories: float


class MetricsAccumulator:
    """Converts confirmed steps into distance, calories and active time."""

    def __init__(self, config: Optional[PedometerConfig] = None):
        self.config = config or PedometerConfig()
        self.totals = Accumulators()

    def record_step(self) -> Accumulators:
        """Add one step to every running total."""
        self.totals.steps += 1
        self.totals.distance_meters += self.config.STEP_LENGTH_M
        self.totals.calories += self.config.CALORIES_PER_STEP
        self.totals.active_time_units += self.config.ACTIVE_TIME_PER_STEP
        return self.totals

    def reset(self):
        self.totals = Accumulators()


class IntervalHistoryRecorder:
    """
    Buckets steps into fixed-duration interval records.

    The interval boundary is only checked when a step arrives, so an
    interval without steps never produces a record. The history is a
    bounded FIFO: once at capacity, each append evicts the oldest record.
    """

    def __init__(self, config: Optional[PedometerConfig] = None, start_time: Optional[float] = None):
        """
        Initialize the recorder.

        Args:
            config: Pedometer configuration
            start_time: Opening time of the first interval (ms). If None, the
                        interval opens at the first call to ensure_started().
        """
        self.config = config or PedometerConfig()
        self.history = deque(maxlen=self.config.HISTORY_CAPACITY)
        self.interval_step_count = 0
        self.interval_start_time = start_time

    def ensure_started(self, timestamp: float):
        """Open the first interval at `timestamp` if none is open yet."""
        if self.interval_start_time is None:
            self.interval_start_time = timestamp

    def record_step(self, timestamp: float) -> Optional[IntervalRecord]:
        """
        Count a step and close the interval if its duration has elapsed.

        Args:
            timestamp: Step time (ms)

        Returns:
            The newly appended IntervalRecord, or None if the interval is still open
        """
        self.ensure_started(timestamp)
        self.interval_step_count += 1

        if timestamp - self.interval_start_time < self.config.INTERVAL_DURATION_MS:
            return None

        count = self.interval_step_count
        record = IntervalRecord(
            timestamp=timestamp,
            steps=count,
            distance_meters=count * self.config.STEP_LENGTH_M,
            calories=count * self.config.CALORIES_PER_STEP,
        )
        self.history.append(record)
        logger.debug("interval_recorded", timestamp=timestamp, steps=count, history_length=len(self.history))

        self.interval_step_count = 0
        self.interval_start_time = timestamp
        return record

    def get_history(self) -> List[IntervalRecord]:
        """Return the interval records, oldest first."""
        return list(self.history)

    def reset(self, start_time: Optional[float] = None):
        self.history.clear()
        self.interval_step_count = 0
        self.interval_start_time = start_time
