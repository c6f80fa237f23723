"""Axis mapping from FFT bins and grid steps to screen coordinates.

Geometry is built in layer-local coordinates and paired with an affine
scale/translate for the current viewport, so a resize only changes the
transforms and never the spectrum.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import List, Tuple

import numpy as np

FREQ_GRID_STEP = 0.1
LEVEL_GRID_STEP = 0.05

# Tolerates float round-off in span/step ratios (1.2 / 0.1 == 11.999...).
_STEP_EPS = 1e-9


def display_index(k: int, n: int) -> int:
    """Bin shown at position ``k`` so DC lands in the middle of the plot."""
    return (k + n // 2) % n


def shift_order(n: int) -> np.ndarray:
    return (np.arange(n) + n // 2) % n


def frequency_grid_offsets(sample_rate: float, step: float = FREQ_GRID_STEP) -> np.ndarray:
    """Offsets from center for vertical grid lines, each positive one mirrored."""
    per_side = int(math.floor((sample_rate * 0.5) / step + _STEP_EPS))
    positive = np.arange(per_side, dtype=np.float64) * step
    return np.column_stack((positive, -positive)).ravel()


def level_grid_positions(step: float = LEVEL_GRID_STEP) -> np.ndarray:
    count = int(math.floor(1.0 / step + _STEP_EPS))
    return np.arange(count, dtype=np.float64) * step


@dataclass(frozen=True)
class Affine:
    """``scale * (point + translate)``: a translate pushed inside a scale."""

    scale_x: float
    scale_y: float
    translate_x: float = 0.0
    translate_y: float = 0.0

    def apply(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64)
        out = np.empty_like(pts)
        out[:, 0] = (pts[:, 0] + self.translate_x) * self.scale_x
        out[:, 1] = (pts[:, 1] + self.translate_y) * self.scale_y
        return out


@dataclass
class Viewport:
    width: int
    height: int

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)


@dataclass(frozen=True)
class Layer:
    name: str
    vertices: np.ndarray
    transform: Affine
    color: Tuple[float, float, float]


class AxisMapper:
    """Builds grid and trace line pairs for one rendered frame."""

    def __init__(
        self,
        fft_size: int,
        sample_rate: float,
        freq_step: float = FREQ_GRID_STEP,
        level_step: float = LEVEL_GRID_STEP,
        grid_color: Tuple[float, float, float] = (0.3, 0.3, 0.0),
        trace_color: Tuple[float, float, float] = (0.8, 0.8, 0.0),
    ):
        self.fft_size = int(fft_size)
        self.sample_rate = float(sample_rate)
        self.grid_color = grid_color
        self.trace_color = trace_color
        self._order = shift_order(self.fft_size)
        self._level_lines = self._build_level_lines(level_step)
        self._frequency_lines = self._build_frequency_lines(freq_step)

    @staticmethod
    def _build_level_lines(step: float) -> np.ndarray:
        ys = level_grid_positions(step)
        verts = np.empty((ys.size * 2, 2), dtype=np.float64)
        verts[0::2, 0] = 0.0
        verts[1::2, 0] = 1.0
        verts[0::2, 1] = ys
        verts[1::2, 1] = ys
        return verts

    def _build_frequency_lines(self, step: float) -> np.ndarray:
        xs = frequency_grid_offsets(self.sample_rate, step)
        verts = np.empty((xs.size * 2, 2), dtype=np.float64)
        verts[0::2, 0] = xs
        verts[1::2, 0] = xs
        verts[0::2, 1] = 0.0
        verts[1::2, 1] = 1.0
        return verts

    @property
    def frequency_line_count(self) -> int:
        return self._frequency_lines.shape[0] // 2

    @property
    def level_line_count(self) -> int:
        return self._level_lines.shape[0] // 2

    def level_lines(self) -> np.ndarray:
        return self._level_lines

    def frequency_lines(self) -> np.ndarray:
        return self._frequency_lines

    def trace_lines(self, averaged: np.ndarray) -> np.ndarray:
        """Line pairs ``(k-1, y[k-1]) -> (k, y[k])`` over the shifted spectrum."""
        if averaged.shape != (self.fft_size,):
            raise ValueError(f"Expected {self.fft_size} bins, got shape {averaged.shape}")
        y = np.asarray(averaged, dtype=np.float64)[self._order]
        n = self.fft_size
        verts = np.empty((2 * (n - 1), 2), dtype=np.float64)
        verts[0::2, 0] = np.arange(n - 1)
        verts[0::2, 1] = y[:-1]
        verts[1::2, 0] = np.arange(1, n)
        verts[1::2, 1] = y[1:]
        return verts

    def level_transform(self, viewport: Viewport) -> Affine:
        return Affine(float(viewport.width), float(viewport.height))

    def frequency_transform(self, viewport: Viewport) -> Affine:
        return Affine(
            viewport.width / self.sample_rate,
            float(viewport.height),
            translate_x=self.sample_rate * 0.5,
        )

    def trace_transform(self, viewport: Viewport) -> Affine:
        return Affine(viewport.width / float(self.fft_size), float(viewport.height))

    def layers(self, averaged: np.ndarray, viewport: Viewport) -> List[Layer]:
        return [
            Layer("levels", self._level_lines, self.level_transform(viewport), self.grid_color),
            Layer(
                "frequencies",
                self._frequency_lines,
                self.frequency_transform(viewport),
                self.grid_color,
            ),
            Layer(
                "trace",
                self.trace_lines(averaged),
                self.trace_transform(viewport),
                self.trace_color,
            ),
        ]
