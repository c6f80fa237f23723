"""Synthetic acquisition sources for headless runs and tests."""

from __future__ import annotations

from typing import Optional

import numpy as np

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.errors import AcquisitionError


class ConstantSource:
    """
    Fallback source that returns blocks filled with one byte value.

    With ``fail_after`` set, the read following that many blocks raises
    AcquisitionError, like a dongle dropping off the bus.
    """

    def __init__(self, cfg: MonitorConfig, value: int = 127, fail_after: Optional[int] = None):
        self.cfg = cfg
        self.value = int(value)
        self.fail_after = fail_after
        self.blocks_read = 0
        self.closed = False
        self.close_calls = 0

    def read_block(self) -> np.ndarray:
        if self.closed:
            raise AcquisitionError("source is closed")
        if self.fail_after is not None and self.blocks_read >= self.fail_after:
            raise AcquisitionError("sync read failed")
        self.blocks_read += 1
        return np.full(int(self.cfg.block_size), self.value, dtype=np.uint8)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True
