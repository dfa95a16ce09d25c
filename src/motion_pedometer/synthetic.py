"""Synthetic accelerometer signals for tests and the demo dashboard."""

from typing import List
import numpy as np
import polars as pl

from .motion import RawSample


def _sample_times(duration_s: float, fs: int) -> np.ndarray:
    """Sample times in seconds on an exact 1/fs grid."""
    return np.arange(int(round(duration_s * fs))) / fs


def samples_from_arrays(times_ms: np.ndarray, ax: np.ndarray, ay: np.ndarray, az: np.ndarray) -> List[RawSample]:
    """Zip per-axis arrays into RawSample objects."""
    return [
        RawSample(timestamp=float(t), ax=float(x), ay=float(y), az=float(z))
        for t, x, y, z in zip(times_ms, ax, ay, az)
    ]


def walking_samples(
    duration_s: float = 30.0,
    fs: int = 50,
    step_freq: float = 2.0,
    amplitude: float = 2.5,
    start_ms: float = 0.0,
) -> List[RawSample]:
    """
    Simulate a device carried while walking.

    Gravity points along +z; gait shows up as a forward/backward
    oscillation on the x axis.

    Args:
        duration_s: Signal length in seconds
        fs: Sampling rate in Hz
        step_freq: Oscillation frequency in Hz
        amplitude: Peak horizontal acceleration in g
        start_ms: Timestamp of the first sample
    """
    t = _sample_times(duration_s, fs)
    ax = amplitude * np.sin(2 * np.pi * step_freq * t)
    zeros = np.zeros_like(t)
    return samples_from_arrays(start_ms + t * 1000.0, ax, zeros, np.ones_like(t))


def vertical_bounce_samples(
    duration_s: float = 30.0,
    fs: int = 50,
    freq: float = 2.0,
    amplitude: float = 1.0,
    start_ms: float = 0.0,
) -> List[RawSample]:
    """Pure vertical oscillation along the gravity axis (no horizontal motion)."""
    t = _sample_times(duration_s, fs)
    az = 1.0 + amplitude * np.sin(2 * np.pi * freq * t)
    zeros = np.zeros_like(t)
    return samples_from_arrays(start_ms + t * 1000.0, zeros, zeros, az)


def stride_samples(
    duration_s: float = 30.0,
    fs: int = 64,
    amplitude: float = 1.5,
    start_ms: float = 0.0,
) -> List[RawSample]:
    """
    Brisk strides: the horizontal push reverses direction every sample.

    Once the gravity estimate settles, every sample is step-eligible, so
    steps land on the first sample after each debounce window. At the
    default 64 Hz every timestamp is exact in binary floating point.
    """
    t = _sample_times(duration_s, fs)
    ax = amplitude * np.where(np.arange(len(t)) % 2 == 0, 1.0, -1.0)
    zeros = np.zeros_like(t)
    return samples_from_arrays(start_ms + t * 1000.0, ax, zeros, np.ones_like(t))


def shake_samples(
    duration_s: float = 10.0,
    fs: int = 50,
    amplitude: float = 5.0,
    start_ms: float = 0.0,
) -> List[RawSample]:
    """Violent shaking: the x axis flips sign every sample."""
    t = _sample_times(duration_s, fs)
    ax = amplitude * np.where(np.arange(len(t)) % 2 == 0, 1.0, -1.0)
    zeros = np.zeros_like(t)
    return samples_from_arrays(start_ms + t * 1000.0, ax, zeros, np.ones_like(t))


def to_dataframe(samples: List[RawSample]) -> pl.DataFrame:
    """Convert samples to the recording layout (Time in seconds, Accel X/Y/Z in g)."""
    return pl.DataFrame({
        'Time': [s.timestamp / 1000.0 for s in samples],
        'Accel X': [s.ax for s in samples],
        'Accel Y': [s.ay for s in samples],
        'Accel Z': [s.az for s in samples],
    }, schema={'Time': pl.Float64, 'Accel X': pl.Float64, 'Accel Y': pl.Float64, 'Accel Z': pl.Float64})
