import logging
import math

import numpy as np
import pytest

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.display import shift_order
from rtl_spectrum_monitor.dsp.power import AveragedSpectrum
from rtl_spectrum_monitor.dsp.processor import SpectrumProcessor
from rtl_spectrum_monitor.dsp.transform import TransformPlan


def _tone_block(cfg: MonitorConfig, bin_index: int) -> np.ndarray:
    n = cfg.fft_size
    phase = 2.0 * np.pi * bin_index * np.arange(cfg.block_size // 2) / n
    block = np.empty(cfg.block_size, dtype=np.uint8)
    block[0::2] = np.round(127.5 + 100.0 * np.cos(phase)).astype(np.uint8)
    block[1::2] = np.round(127.5 + 100.0 * np.sin(phase)).astype(np.uint8)
    return block


def test_zero_energy_bins_stay_at_zero(cfg: MonitorConfig) -> None:
    spectrum = AveragedSpectrum(cfg.fft_size)
    with TransformPlan(cfg.fft_size) as plan:
        proc = SpectrumProcessor(cfg, plan, spectrum)
        assert proc.process_block(np.full(cfg.block_size, 127, dtype=np.uint8)) == 16

    values = spectrum.values
    np.testing.assert_allclose(values[1:], 0.0, atol=1e-6)
    # Byte 127 normalizes to -0.008, so only the DC bin carries energy.
    dc_energy = (cfg.fft_size * 0.008) ** 2 * 2
    expected_dc = 0.05 * math.log1p(dc_energy) * (1 - (1 - 0.01) ** 16)
    assert values[0] == pytest.approx(expected_dc, rel=1e-4)


def test_tone_peaks_at_its_bin(cfg: MonitorConfig) -> None:
    spectrum = AveragedSpectrum(cfg.fft_size)
    with TransformPlan(cfg.fft_size) as plan:
        SpectrumProcessor(cfg, plan, spectrum).process_block(_tone_block(cfg, 100))

    values = spectrum.values
    assert int(np.argmax(values)) == 100
    shifted = values[shift_order(cfg.fft_size)]
    assert int(np.argmax(shifted)) == 100 + cfg.fft_size // 2


def test_short_read_clips_window_count(cfg: MonitorConfig, caplog) -> None:
    spectrum = AveragedSpectrum(cfg.fft_size)
    with TransformPlan(cfg.fft_size) as plan:
        proc = SpectrumProcessor(cfg, plan, spectrum)
        with caplog.at_level(logging.WARNING):
            count = proc.process_block(bytes(5 * 2 * cfg.fft_size + 7))
    assert count == 5
    assert "Short read" in caplog.text


def test_oversized_block_uses_configured_window_count(cfg: MonitorConfig) -> None:
    with TransformPlan(cfg.fft_size) as plan:
        proc = SpectrumProcessor(cfg, plan, AveragedSpectrum(cfg.fft_size))
        assert proc.process_block(bytes(cfg.block_size * 2)) == cfg.windows_per_block


def test_mismatched_sizes_are_rejected(cfg: MonitorConfig) -> None:
    with TransformPlan(1024) as plan:
        with pytest.raises(ValueError):
            SpectrumProcessor(cfg, plan, AveragedSpectrum(cfg.fft_size))
