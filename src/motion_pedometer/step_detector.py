"""Real-time step detection from gravity-relative motion magnitudes."""

from dataclasses import dataclass
from typing import Optional

from .config import PedometerConfig
from .motion import MotionComponents
from .signal_filters import MovingAverageFilter


@dataclass
class ThresholdState:
    """Adaptive detection threshold, kept within [minimum, maximum]."""

    value: float
    minimum: float
    maximum: float

    def __post_init__(self):
        self.value = min(max(self.value, self.minimum), self.maximum)

    def rise(self, factor: float):
        self.value = min(self.value * factor, self.maximum)

    def decay(self, factor: float):
        self.value = max(self.value * factor, self.minimum)


@dataclass(frozen=True)
class StepEvent:
    """A confirmed step."""

    timestamp: float
    magnitude: float  # Smoothed total magnitude that crossed the threshold
    threshold: float  # Threshold value in force when the step fired


class StepDetector:
    """
    Detects steps with an adaptive-threshold peak detector.

    A sample registers as a step when the smoothed linear-acceleration
    magnitude exceeds the threshold, the motion is mostly horizontal, and
    the previous step is older than the debounce interval. The threshold
    rises slightly after each step and decays during inactivity.
    """

    def __init__(self, config: Optional[PedometerConfig] = None):
        """
        Initialize the step detector.

        Args:
            config: Pedometer configuration, defaults to PedometerConfig()
        """
        self.config = config or PedometerConfig()
        self.window = MovingAverageFilter(self.config.SMOOTHING_WINDOW)
        self.threshold = self._init_threshold()
        self.last_step_time: Optional[float] = None
        self.smoothed: float = 0.0

    def _init_threshold(self) -> ThresholdState:
        return ThresholdState(
            value=self.config.INITIAL_THRESHOLD,
            minimum=self.config.MIN_THRESHOLD,
            maximum=self.config.MAX_THRESHOLD,
        )

    def reset(self):
        """Reset all internal state."""
        self.window.reset()
        self.threshold = self._init_threshold()
        self.last_step_time = None
        self.smoothed = 0.0

    def process(self, components: MotionComponents, timestamp: float) -> Optional[StepEvent]:
        """
        Process one decomposed sample and return a StepEvent if a step fired.

        Args:
            components: Motion magnitudes for the sample
            timestamp: Sample time (ms)

        Returns:
            StepEvent, or None when no step was detected
        """
        cfg = self.config

        # Shake rejection: leave window and threshold untouched
        if components.total > cfg.MAX_TOTAL_ACCEL:
            return None

        self.smoothed = self.window.filter_sample(components.total)

        is_mostly_horizontal = (
            components.horizontal > cfg.MIN_HORIZONTAL_ACCEL
            and components.horizontal > components.vertical * cfg.HORIZONTAL_RATIO_THRESHOLD
        )

        debounced = (
            self.last_step_time is None
            or timestamp - self.last_step_time > cfg.MIN_STEP_INTERVAL_MS
        )

        if is_mostly_horizontal and self.smoothed > self.threshold.value and debounced:
            event = StepEvent(
                timestamp=timestamp,
                magnitude=self.smoothed,
                threshold=self.threshold.value,
            )
            self.last_step_time = timestamp
            self.threshold.rise(cfg.THRESHOLD_RISE)
            return event

        self.threshold.decay(cfg.THRESHOLD_DECAY)
        return None
