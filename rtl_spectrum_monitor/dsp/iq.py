"""Normalization of raw RTL-SDR sample blocks into complex FFT windows.

The dongle delivers interleaved unsigned 8-bit I/Q bytes. This module must not
import UI or SDR classes; it is purely numerical.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

IQ_BIAS = 127.0
IQ_SCALE = 0.008


def windows_per_block(block_len: int, fft_size: int) -> int:
    """Number of complete ``fft_size`` windows in ``block_len`` raw bytes."""

    return int(block_len) // (2 * int(fft_size))


def normalize_window(
    block,
    index: int,
    fft_size: int,
    out: Optional[np.ndarray] = None,
    bias: float = IQ_BIAS,
    scale: float = IQ_SCALE,
) -> np.ndarray:
    """
    Convert window ``index`` of a raw block to complex64 samples.

    Window ``index`` covers bytes ``[index * 2N, (index + 1) * 2N)``. When
    ``out`` is given the samples are written into it and it is returned.
    """
    raw = np.frombuffer(block, dtype=np.uint8)
    # Windows sit back to back in the block and never overlap.
    start = int(index) * 2 * fft_size
    stop = start + 2 * fft_size
    if index < 0 or stop > raw.size:
        raise ValueError(
            f"Window {index} needs bytes {start}..{stop}, block has {raw.size}"
        )
    # Interleaved float32 pairs reinterpret directly as complex64.
    pairs = (raw[start:stop].astype(np.float32) - np.float32(bias)) * np.float32(scale)
    samples = pairs.view(np.complex64)
    if out is None:
        return samples
    out[:] = samples
    return out
