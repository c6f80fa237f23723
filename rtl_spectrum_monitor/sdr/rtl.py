"""RTL-SDR wrapper for raw block acquisition.

Encapsulates pyrtlsdr interactions and tuning. This module must not import any
UI classes to keep SDR operations headless.
"""

from __future__ import annotations

from ctypes import byref, c_int, c_ubyte
import logging

import numpy as np
from rtlsdr import RtlSdr
from rtlsdr.librtlsdr import librtlsdr

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.errors import AcquisitionError, StartupError

logger = logging.getLogger(__name__)


class RtlSdrSource:
    """
    Small wrapper around pyrtlsdr.

    Opens, tunes and resets the device on construction; every setup failure
    is raised as StartupError.
    """

    def __init__(self, cfg: MonitorConfig):
        self.cfg = cfg
        self.block_size = int(cfg.block_size)
        self._buffer = (c_ubyte * self.block_size)()

        if not librtlsdr.rtlsdr_get_device_count():
            raise StartupError("No supported devices found.")

        try:
            self.dev = RtlSdr(device_index=int(cfg.device_index))
        except OSError as exc:
            raise StartupError("Failed to open rtlsdr device") from exc

        try:
            self.configure(cfg.sample_rate_hz, cfg.center_freq_hz)
            self.set_gain_mode(automatic=True)
            self.reset_buffer()
        except StartupError:
            self.close()
            raise

    def configure(self, sample_rate_hz: int, center_hz: int) -> None:
        try:
            self.dev.sample_rate = int(sample_rate_hz)
        except OSError as exc:
            raise StartupError("Failed to set sample rate for rtlsdr device") from exc
        try:
            self.dev.center_freq = int(center_hz)
        except OSError as exc:
            raise StartupError("Failed to set frequency") from exc
        logger.info(
            "Tuned to %.3f MHz at %.3f MS/s",
            center_hz / 1e6,
            sample_rate_hz / 1e6,
        )

    def set_gain_mode(self, automatic: bool) -> None:
        try:
            self.dev.set_manual_gain_enabled(not automatic)
        except OSError as exc:
            raise StartupError("Failed to enable automatic gain.") from exc

    def reset_buffer(self) -> None:
        librtlsdr.rtlsdr_reset_buffer(self.dev.dev_p)

    def read_block(self) -> np.ndarray:
        """
        Read one block; the result may be shorter than block_size.

        The returned array aliases the read buffer and is overwritten by the
        next call. Blocks until the read completes; there is no timeout.
        """
        n_read = c_int(0)
        # read_bytes() closes the device on a short read, so call librtlsdr directly.
        result = librtlsdr.rtlsdr_read_sync(
            self.dev.dev_p, self._buffer, self.block_size, byref(n_read)
        )
        if result < 0:
            raise AcquisitionError(f"sync read failed (error {result})")
        return np.frombuffer(self._buffer, dtype=np.uint8)[: n_read.value]

    def close(self) -> None:
        dev = getattr(self, "dev", None)
        if dev is None:
            return
        self.dev = None
        dev.close()
