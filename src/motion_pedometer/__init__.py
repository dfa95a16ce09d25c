"""Real-time step counting from 3-axis accelerometer streams."""

from .config import PedometerConfig, StreamConfig, UIConfig
from .signal_filters import GravityEstimator, MovingAverageFilter
from .motion import RawSample, MotionComponents, decompose_motion, is_finite_sample
from .step_detector import ThresholdState, StepEvent, StepDetector
from .metrics import Accumulators, IntervalRecord, MetricsAccumulator, IntervalHistoryRecorder
from .snapshot import Snapshot, SnapshotPublisher, build_snapshot
from .engine import PedometerEngine
from .service import PedometerService
from .data_loader import AccelRecordingLoader
from .log_setup import configure_logging, get_logger


__all__ = [
    'PedometerConfig',
    'StreamConfig',
    'UIConfig',
    'GravityEstimator',
    'MovingAverageFilter',
    'RawSample',
    'MotionComponents',
    'decompose_motion',
    'is_finite_sample',
    'ThresholdState',
    'StepEvent',
    'StepDetector',
    'Accumulators',
    'IntervalRecord',
    'MetricsAccumulator',
    'IntervalHistoryRecorder',
    'Snapshot',
    'SnapshotPublisher',
    'build_snapshot',
    'PedometerEngine',
    'PedometerService',
    'AccelRecordingLoader',
    'configure_logging',
    'get_logger',
]
