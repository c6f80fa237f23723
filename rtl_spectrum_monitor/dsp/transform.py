"""Fixed-size forward FFT plan.

The plan owns the FFT input buffer for the process lifetime and is released
exactly once at shutdown. This module must not import UI or SDR classes.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from rtl_spectrum_monitor.errors import StartupError


class TransformPlan:
    """
    Forward, unnormalized complex FFT of a fixed power-of-two size.

    Use as a context manager, or call close() once done. The input buffer is
    exposed so the normalizer can fill it in place.
    """

    def __init__(self, size: int):
        size = int(size)
        if size <= 0 or size & (size - 1):
            raise ValueError(f"FFT size must be a power of two, got {size}")
        self.size = size
        try:
            self._input: Optional[np.ndarray] = np.zeros(size, dtype=np.complex64)
        except MemoryError as exc:
            raise StartupError(f"Failed to allocate {size}-point FFT buffers") from exc

    @property
    def released(self) -> bool:
        return self._input is None

    @property
    def input(self) -> np.ndarray:
        if self._input is None:
            raise RuntimeError("Transform plan has been released")
        return self._input

    def execute(self, window: Optional[np.ndarray] = None) -> np.ndarray:
        """Transform ``window`` (or the input buffer) and return N complex bins."""
        buf = self.input
        if window is None:
            window = buf
        if window.shape != (self.size,):
            raise ValueError(f"Expected {self.size} samples, got shape {window.shape}")
        # Default "backward" norm: no 1/N scaling on the forward transform.
        return np.fft.fft(window)

    def close(self) -> None:
        self._input = None

    def __enter__(self) -> "TransformPlan":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
