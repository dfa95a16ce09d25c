"""Loading, validation and replay of accelerometer recordings."""

import asyncio
import time
from pathlib import Path
from typing import AsyncIterator, Iterator, List, Optional, Tuple

import polars as pl
import structlog

from .config import PedometerConfig
from .engine import PedometerEngine
from .motion import RawSample

logger = structlog.get_logger(__name__)

TIME_COLUMN = 'Time'
ACCEL_COLUMNS = ['Accel X', 'Accel Y', 'Accel Z']


class AccelRecordingLoader:
    """Handles loading and validation of accelerometer recordings."""

    def __init__(self, data_dir: Path):
        """
        Initialize the data loader.

        Args:
            data_dir: Directory containing parquet or CSV recordings
        """
        self.data_dir = Path(data_dir)

    def get_available_recordings(self) -> list[str]:
        """
        List recording names (file stems) found in the data directory.

        Returns:
            Sorted list of recording names
        """
        files = list(self.data_dir.glob("*.parquet")) + list(self.data_dir.glob("*.csv"))
        return sorted({f.stem for f in files})

    def get_file_path(self, name: str) -> Path:
        """
        Resolve a recording name to a file, preferring parquet over CSV.

        Raises:
            FileNotFoundError: If no recording with that name exists
        """
        for suffix in ('.parquet', '.csv'):
            path = self.data_dir / f"{name}{suffix}"
            if path.exists():
                return path
        raise FileNotFoundError(f"Recording not found: {name}")

    def load_recording(self, name: str) -> pl.DataFrame:
        """
        Load and validate a recording.

        Args:
            name: Recording name

        Returns:
            DataFrame sorted by time

        Raises:
            FileNotFoundError: If the recording doesn't exist
            ValueError: If required columns are missing
        """
        path = self.get_file_path(name)
        if path.suffix == '.parquet':
            df = pl.read_parquet(path)
        else:
            df = pl.read_csv(path, infer_schema_length=10000)

        self.validate_columns(df)
        logger.info("recording_loaded", name=name, rows=len(df))
        return df.sort(TIME_COLUMN)

    @staticmethod
    def validate_columns(df: pl.DataFrame):
        """
        Check that a recording carries the time and acceleration columns.

        Raises:
            ValueError: Listing the missing columns
        """
        missing = [c for c in [TIME_COLUMN, *ACCEL_COLUMNS] if c not in df.columns]
        if missing:
            raise ValueError(f"Recording is missing columns: {', '.join(missing)}")

    def time_to_sample_index(self, df: pl.DataFrame, start_time: float) -> int:
        """
        Convert time in seconds to sample index.

        Args:
            df: DataFrame with 'Time' column
            start_time: Time in seconds

        Returns:
            Index of the first sample at or after start_time (len(df) if none)
        """
        indices = df.with_row_index('idx').filter(pl.col(TIME_COLUMN) >= start_time)['idx']
        return int(indices[0]) if len(indices) > 0 else len(df)

    def validate_start_position(self, df: pl.DataFrame, start_index: int) -> Tuple[bool, Optional[str]]:
        """
        Validate that start position is within data bounds.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if start_index >= len(df):
            if len(df) == 0:
                return False, "Recording contains no samples"
            max_time = df[TIME_COLUMN][-1]
            return False, f"Start time is beyond available data (max time: {max_time:.2f}s)"
        return True, None

    @staticmethod
    def iter_samples(df: pl.DataFrame, start_index: int = 0) -> Iterator[RawSample]:
        """
        Yield recording rows as RawSamples with millisecond timestamps.

        Args:
            df: Validated recording
            start_index: First row to yield
        """
        for row in df.slice(start_index).iter_rows(named=True):
            yield RawSample(
                timestamp=row[TIME_COLUMN] * 1000.0,
                ax=row['Accel X'],
                ay=row['Accel Y'],
                az=row['Accel Z'],
            )

    async def replay(
        self,
        df: pl.DataFrame,
        start_index: int = 0,
        speed: float = 1.0,
    ) -> AsyncIterator[RawSample]:
        """
        Replay a recording as a live sample stream.

        Samples are paced by their recorded timestamps (divided by `speed`)
        and re-stamped onto the wall clock, keeping the recorded spacing.

        Args:
            df: Validated recording
            start_index: First row to replay
            speed: Playback speed multiplier (1 = real-time)
        """
        wall_start = time.monotonic()
        stamp_base = time.time() * 1000.0
        first_ms = None

        for sample in self.iter_samples(df, start_index):
            if first_ms is None:
                first_ms = sample.timestamp
            offset_ms = sample.timestamp - first_ms

            # Sleep until this sample is due; yield control even when behind
            due = wall_start + offset_ms / 1000.0 / speed
            await asyncio.sleep(max(0.0, due - time.monotonic()))

            yield RawSample(
                timestamp=stamp_base + offset_ms,
                ax=sample.ax,
                ay=sample.ay,
                az=sample.az,
            )

    def detect_steps(self, df: pl.DataFrame, config: Optional[PedometerConfig] = None) -> pl.DataFrame:
        """
        Run a fresh engine over a whole recording (offline analysis).

        Args:
            df: Validated recording
            config: Pedometer configuration

        Returns:
            DataFrame with one row per step: Time (s), Magnitude, Threshold, Step
        """
        engine = PedometerEngine(config)
        times: List[float] = []
        magnitudes: List[float] = []
        thresholds: List[float] = []

        for sample in self.iter_samples(df):
            event = engine.ingest(sample)
            if event is not None:
                times.append(event.timestamp / 1000.0)
                magnitudes.append(event.magnitude)
                thresholds.append(event.threshold)

        return pl.DataFrame(
            {
                'Time': times,
                'Magnitude': magnitudes,
                'Threshold': thresholds,
                'Step': list(range(1, len(times) + 1)),
            },
            schema={'Time': pl.Float64, 'Magnitude': pl.Float64, 'Threshold': pl.Float64, 'Step': pl.Int64},
        )
