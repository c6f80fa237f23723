"""DSP chain for one acquired block.

Runs normalize, FFT and power estimation for every window of a raw block.
This module must not import UI or SDR classes; it is purely numerical.
"""

from __future__ import annotations

import logging

import numpy as np

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.dsp.iq import normalize_window, windows_per_block
from rtl_spectrum_monitor.dsp.power import AveragedSpectrum, PowerEstimator
from rtl_spectrum_monitor.dsp.transform import TransformPlan

logger = logging.getLogger(__name__)


class SpectrumProcessor:
    """
    Handles DSP for the spectrum.
    Feeds each window of a block through the FFT plan into the averaged spectrum.
    """

    def __init__(self, cfg: MonitorConfig, plan: TransformPlan, spectrum: AveragedSpectrum):
        if plan.size != cfg.fft_size or len(spectrum) != cfg.fft_size:
            raise ValueError("Plan and spectrum sizes must match the configured FFT size")
        self.cfg = cfg
        self.plan = plan
        self.estimator = PowerEstimator(spectrum, cfg.log_gain, cfg.smoothing_alpha)
        self.window_count = cfg.windows_per_block

    @property
    def fft_size(self) -> int:
        return self.plan.size

    def process_block(self, block) -> int:
        """Process every complete window of ``block`` in order. Returns the count."""
        n = self.fft_size
        raw = np.frombuffer(block, dtype=np.uint8)
        available = windows_per_block(raw.size, n)
        count = min(self.window_count, available)
        if count < self.window_count:
            logger.warning(
                "Short read: %d of %d bytes, processing %d of %d windows",
                raw.size,
                self.cfg.block_size,
                count,
                self.window_count,
            )
        for index in range(count):
            normalize_window(
                raw,
                index,
                n,
                out=self.plan.input,
                bias=self.cfg.iq_bias,
                scale=self.cfg.iq_scale,
            )
            self.estimator.update(self.plan.execute())
        return count
