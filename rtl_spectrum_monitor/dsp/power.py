"""Log-power estimation and the persistent averaged spectrum."""

from __future__ import annotations

import numpy as np

LOG_GAIN = 0.05
SMOOTHING_ALPHA = 0.01


def log_magnitude(spectrum: np.ndarray, gain: float = LOG_GAIN) -> np.ndarray:
    """Return ``gain * ln(re^2 + im^2 + 1)`` per bin as float32."""
    energy = spectrum.real.astype(np.float64) ** 2 + spectrum.imag.astype(np.float64) ** 2
    return (gain * np.log1p(energy)).astype(np.float32)


class AveragedSpectrum:
    """
    Fixed-length running spectrum shared between estimator and display.

    Only PowerEstimator writes to it; readers get a read-only view.
    """

    def __init__(self, size: int):
        self._bins = np.zeros(int(size), dtype=np.float32)

    def __len__(self) -> int:
        return int(self._bins.size)

    @property
    def values(self) -> np.ndarray:
        view = self._bins.view()
        view.flags.writeable = False
        return view

    def copy(self) -> np.ndarray:
        return self._bins.copy()

    def blend(self, magnitude: np.ndarray, alpha: np.float32) -> None:
        """Move every bin towards ``magnitude`` by ``alpha``. PowerEstimator only."""
        # Single-pole low-pass, in place.
        self._bins -= alpha * (self._bins - magnitude)


class PowerEstimator:
    """Blends per-window log magnitudes into an AveragedSpectrum."""

    def __init__(
        self,
        spectrum: AveragedSpectrum,
        gain: float = LOG_GAIN,
        alpha: float = SMOOTHING_ALPHA,
    ):
        self.spectrum = spectrum
        self.gain = float(gain)
        self.alpha = np.float32(alpha)

    def update(self, transformed: np.ndarray) -> None:
        if transformed.shape != (len(self.spectrum),):
            raise ValueError(
                f"Expected {len(self.spectrum)} bins, got shape {transformed.shape}"
            )
        self.spectrum.blend(log_magnitude(transformed, self.gain), self.alpha)
