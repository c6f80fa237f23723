"""Application configuration defaults and validation.

Defines the MonitorConfig dataclass and default values. This module should not
import UI or SDR classes, and it should stay focused on configuration data only.
"""

from dataclasses import dataclass
from typing import Tuple

from rtl_spectrum_monitor.dsp.iq import windows_per_block


@dataclass
class MonitorConfig:
    """
    Configuration for the spectrum monitor.

    Notes
    Frequencies are in MHz, as given on the command line.
    The visible span equals the sample rate.
    """

    # Device selection.
    device_index: int = 0

    # Tuning.
    center_freq_mhz: float = 88.0
    sample_rate_mhz: float = 2.4

    # FFT size must be a power of two. Block size is in bytes (I/Q interleaved).
    fft_size: int = 2048
    block_size: int = 4 * 16384

    # Normalization of unsigned 8-bit samples.
    iq_bias: float = 127.0
    iq_scale: float = 0.008

    # Log-power gain and single-pole smoothing weight.
    log_gain: float = 0.05
    smoothing_alpha: float = 0.01

    # Reference grids.
    freq_grid_step_mhz: float = 0.1
    level_grid_step: float = 0.05

    # Window.
    window_width: int = 800
    window_height: int = 600
    antialias_samples: int = 4
    title: str = "radio"

    # Colors as RGB floats.
    grid_color: Tuple[float, float, float] = (0.3, 0.3, 0.0)
    trace_color: Tuple[float, float, float] = (0.8, 0.8, 0.0)

    stop_key: str = "Escape"

    @property
    def sample_rate_hz(self) -> int:
        return int(self.sample_rate_mhz * 1e6)

    @property
    def center_freq_hz(self) -> int:
        return int(self.center_freq_mhz * 1e6)

    @property
    def windows_per_block(self) -> int:
        return windows_per_block(self.block_size, self.fft_size)

    def validate(self) -> None:
        n = int(self.fft_size)
        if n <= 0 or n & (n - 1):
            raise ValueError(f"FFT size must be a power of two, got {self.fft_size}")
        if self.windows_per_block < 1:
            raise ValueError(
                f"Block size {self.block_size} cannot hold one {n}-sample window"
            )
        if self.sample_rate_mhz <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate_mhz}")
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"Smoothing alpha must be in (0, 1], got {self.smoothing_alpha}")
