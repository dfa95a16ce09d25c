"""Gravity-relative decomposition of accelerometer samples."""

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class RawSample:
    """One gravity-inclusive accelerometer reading (timestamp in ms, axes in g)."""

    timestamp: float
    ax: float
    ay: float
    az: float

    def as_array(self) -> np.ndarray:
        return np.array([self.ax, self.ay, self.az], dtype=float)


@dataclass(frozen=True)
class MotionComponents:
    """Magnitudes of the linear (gravity-removed) acceleration."""

    total: float
    horizontal: float
    vertical: float


def is_finite_sample(sample: RawSample) -> bool:
    """Check that the timestamp and all three axes are finite numbers."""
    try:
        values = np.array([sample.timestamp, sample.ax, sample.ay, sample.az], dtype=float)
    except (TypeError, ValueError):
        return False
    return bool(np.all(np.isfinite(values)))


def decompose_motion(raw: np.ndarray, gravity: np.ndarray) -> MotionComponents:
    """
    Split linear acceleration into components relative to gravity.

    The vertical part is the projection of the linear acceleration onto the
    unit gravity vector; the horizontal part is what remains, so the split
    holds for any device orientation.

    Args:
        raw: Raw acceleration [ax, ay, az]
        gravity: Current gravity estimate [gx, gy, gz]

    Returns:
        MotionComponents with total, horizontal and vertical magnitudes
    """
    linear = np.asarray(raw, dtype=float) - gravity
    total = float(np.linalg.norm(linear))

    # A zero gravity estimate has no direction; divide by 1 instead
    gravity_norm = float(np.linalg.norm(gravity)) or 1.0
    unit_gravity = gravity / gravity_norm

    parallel = float(np.dot(linear, unit_gravity))
    vertical = abs(parallel)

    # Clamp: rounding can push the difference slightly below zero
    horizontal = float(np.sqrt(max(total * total - parallel * parallel, 0.0)))

    return MotionComponents(total=total, horizontal=horizontal, vertical=vertical)
