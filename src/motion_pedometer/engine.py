"""Step counting engine: raw accelerometer samples in, metrics out."""

import time
from typing import Optional

import structlog

from .config import PedometerConfig
from .metrics import IntervalHistoryRecorder, MetricsAccumulator
from .motion import MotionComponents, RawSample, decompose_motion, is_finite_sample
from .signal_filters import GravityEstimator
from .snapshot import Snapshot, build_snapshot
from .step_detector import StepDetector, StepEvent

logger = structlog.get_logger(__name__)


class PedometerEngine:
    """
    Owns all per-session state of the step counting pipeline.

    Samples flow gravity estimator -> motion decomposition -> step detector
    -> metrics accumulator -> interval history. All processing is
    synchronous and O(1) per sample.
    """

    def __init__(self, config: Optional[PedometerConfig] = None, start_time: Optional[float] = None):
        """
        Initialize the engine.

        Args:
            config: Pedometer configuration, defaults to PedometerConfig()
            start_time: Session start (ms). If None, the first accepted sample opens the session.
        """
        self.config = config or PedometerConfig()
        self.gravity_estimator = GravityEstimator(self.config.GRAVITY_ALPHA)
        self.detector = StepDetector(self.config)
        self.accumulator = MetricsAccumulator(self.config)
        self.recorder = IntervalHistoryRecorder(self.config, start_time)
        self.goal = self.config.DEFAULT_STEP_GOAL

        self.last_components: Optional[MotionComponents] = None
        self.samples_processed = 0
        self.dropped_samples = 0
        self.rejected_samples = 0

    def reset(self, start_time: Optional[float] = None):
        """Discard all session state and start over."""
        self.gravity_estimator.reset()
        self.detector.reset()
        self.accumulator.reset()
        self.recorder.reset(start_time)
        self.last_components = None
        self.samples_processed = 0
        self.dropped_samples = 0
        self.rejected_samples = 0
        logger.info("engine_reset", start_time=start_time)

    def set_goal(self, goal: int):
        if goal <= 0:
            raise ValueError(f"Step goal must be positive, got {goal}")
        self.goal = goal

    def ingest(self, sample: RawSample) -> Optional[StepEvent]:
        """
        Process one raw sample.

        Non-finite samples are dropped before any state is touched.

        Args:
            sample: Raw accelerometer reading

        Returns:
            StepEvent if the sample completed a step, otherwise None
        """
        if not is_finite_sample(sample):
            self.dropped_samples += 1
            logger.debug("sample_dropped", timestamp=sample.timestamp, dropped=self.dropped_samples)
            return None

        self.recorder.ensure_started(sample.timestamp)
        self.samples_processed += 1

        raw = sample.as_array()
        # Gravity follows every finite sample, including ones rejected below
        # as too violent. After one absurd reading (e.g. 1e308) the estimate
        # stays huge and later samples are rejected until it decays.
        gravity = self.gravity_estimator.update(raw)
        components = decompose_motion(raw, gravity)
        self.last_components = components

        if components.total > self.config.MAX_TOTAL_ACCEL:
            self.rejected_samples += 1

        event = self.detector.process(components, sample.timestamp)
        if event is None:
            return None

        totals = self.accumulator.record_step()
        self.recorder.record_step(event.timestamp)
        logger.debug(
            "step_detected",
            timestamp=event.timestamp,
            magnitude=round(event.magnitude, 3),
            threshold=round(event.threshold, 3),
            steps=totals.steps,
        )
        return event

    @property
    def threshold(self) -> float:
        return self.detector.threshold.value

    @property
    def gravity(self):
        return self.gravity_estimator.gravity.copy()

    def snapshot(self, timestamp: Optional[float] = None) -> Snapshot:
        """
        Take a consistent copy of the accumulated metrics.

        Args:
            timestamp: Snapshot time (ms), defaults to the current wall clock
        """
        if timestamp is None:
            timestamp = time.time() * 1000.0
        return build_snapshot(
            self.accumulator.totals,
            self.recorder.get_history(),
            timestamp,
            self.goal,
        )
