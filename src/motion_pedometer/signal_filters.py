"""
Streaming filters for accelerometer processing.

Both filters work sample-by-sample so they can sit directly on a live
sensor subscription:
1. Gravity estimator (single-pole IIR low-pass per axis, causal)
2. Moving average filter (fixed-capacity smoothing window)
"""

from collections import deque
import numpy as np
from scipy.signal import lfilter


class GravityEstimator:
    """
    Real-time gravity estimate using a first-order low-pass filter.

    Each axis follows g <- alpha * g + (1 - alpha) * raw. The filter is
    run through lfilter with its internal state (zi) carried between
    calls, the same way the Butterworth stage streams samples.
    """

    def __init__(self, alpha: float = 0.88):
        """
        Initialize the gravity estimator.

        Args:
            alpha: Smoothing coefficient in [0, 1); higher tracks gravity more slowly
        """
        self.alpha = alpha
        self.b = np.array([1.0 - alpha])
        self.a = np.array([1.0, -alpha])

        self.zi = None
        self.gravity = None
        self._reset_state()

    def _reset_state(self):
        """Reset the estimate to the zero vector."""
        # zi holds alpha * g for the next update, one row per filter delay
        self.zi = np.zeros((1, 3))
        self.gravity = np.zeros(3)

    def update(self, sample: np.ndarray) -> np.ndarray:
        """
        Fold one raw acceleration vector into the estimate.

        Args:
            sample: Raw acceleration [ax, ay, az]

        Returns:
            Current gravity estimate [gx, gy, gz]
        """
        filtered, self.zi = lfilter(
            self.b, self.a, np.asarray(sample, dtype=float).reshape(1, 3), axis=0, zi=self.zi
        )
        self.gravity = filtered[0]
        return self.gravity

    def reset(self):
        """Reset filter state (used when the engine restarts)."""
        self._reset_state()


class MovingAverageFilter:
    """
    Simple moving average over a fixed-capacity FIFO window.

    The oldest sample is evicted once the window is full.
    """

    def __init__(self, window_size: int):
        """
        Initialize moving average filter.

        Args:
            window_size: Number of samples to average
        """
        self.window_size = window_size
        self.buffer = deque(maxlen=window_size)
        self.sum = 0.0

    def filter_sample(self, sample: float) -> float:
        """
        Filter a single sample.

        Args:
            sample: Input sample value

        Returns:
            Filtered sample value (moving average)
        """
        # Remove oldest value from sum if buffer is full
        if len(self.buffer) == self.window_size:
            self.sum -= self.buffer[0]

        self.buffer.append(sample)
        self.sum += sample

        return self.sum / len(self.buffer)

    def reset(self):
        """Reset filter state."""
        self.buffer.clear()
        self.sum = 0.0
