"""Configuration settings for the motion pedometer."""

from pathlib import Path
from dataclasses import dataclass, field


@dataclass
class PedometerConfig:
    """Configuration for step detection and metric accumulation."""

    # Gravity separation
    GRAVITY_ALPHA: float = 0.88  # Low-pass coefficient per axis

    # Step detection parameters
    SMOOTHING_WINDOW: int = 8  # Samples averaged for the magnitude signal
    MAX_TOTAL_ACCEL: float = 3.5  # Shake rejection (g)
    MIN_HORIZONTAL_ACCEL: float = 0.35  # Absolute horizontal gate (g)
    HORIZONTAL_RATIO_THRESHOLD: float = 1.2  # Horizontal must exceed vertical by this factor
    MIN_STEP_INTERVAL_MS: float = 2500.0  # Debounce between steps
    INITIAL_THRESHOLD: float = 0.95
    MIN_THRESHOLD: float = 0.85
    MAX_THRESHOLD: float = 1.15
    THRESHOLD_RISE: float = 1.008  # Applied after each step
    THRESHOLD_DECAY: float = 0.998  # Applied on every non-step sample

    # Metric conversion
    STEP_LENGTH_M: float = 0.5
    CALORIES_PER_STEP: float = 0.04
    ACTIVE_TIME_PER_STEP: float = 0.3  # Opaque activity score units

    # Interval history
    INTERVAL_DURATION_MS: float = 5000.0
    HISTORY_CAPACITY: int = 720  # One hour at 5 s granularity

    DEFAULT_STEP_GOAL: int = 10000


@dataclass
class StreamConfig:
    """Configuration for sensor streaming and snapshot publication."""

    DATA_DIR: Path = Path("data/raw/accel")
    SAMPLING_RATE: int = 50  # Hz
    SNAPSHOT_INTERVAL_MS: float = 5000.0
    INBOX_SIZE: int = 1024  # Pending events before the sensor pump waits
    DEFAULT_SPEED: float = 1  # Replay speed multiplier (1 = real-time)
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # 'console' or 'json'


@dataclass
class UIConfig:
    """Configuration for dashboard elements and styling."""

    CHART_HEIGHT: int = 320
    CHART_MARGIN: dict = field(default_factory=lambda: dict(l=50, r=20, t=40, b=50))
    CHART_COLORS: dict = field(default_factory=lambda: {
        'steps': '#2a9d8f',     # Teal
        'calories': '#d68032',  # Orange
    })
    HISTORY_WINDOW: int = 120  # Interval records shown on the chart (10 minutes)
    DEFAULT_START_TIME: float = 0.0  # Default replay start in seconds
    TIME_STEP: float = 10.0  # Time step for number input
