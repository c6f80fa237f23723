"""Acquire, process and render loop for the spectrum monitor.

Owns the averaged spectrum, the FFT plan and the session state. Acquisition
sources and renderers are duck-typed:

* source: ``read_block()`` returning raw I/Q bytes, ``close()``
* renderer: ``on_resize``, ``clear``, ``set_color``, ``draw_lines``,
  ``swap_buffers``, ``poll_key``, ``is_open``, ``close``

Everything runs on the calling thread. The stop condition is checked once per
block, after the block has been rendered.
"""

from __future__ import annotations

from contextlib import ExitStack, closing
import enum
import logging
from typing import Callable

from rtl_spectrum_monitor.config import MonitorConfig
from rtl_spectrum_monitor.display import AxisMapper, Viewport
from rtl_spectrum_monitor.dsp.power import AveragedSpectrum
from rtl_spectrum_monitor.dsp.processor import SpectrumProcessor
from rtl_spectrum_monitor.dsp.transform import TransformPlan
from rtl_spectrum_monitor.errors import AcquisitionError

logger = logging.getLogger(__name__)


class MonitorState(enum.Enum):
    RUNNING = "running"
    TERMINATING = "terminating"


class SpectrumMonitor:
    """Drives one session from the first block read to shutdown."""

    def __init__(self, cfg: MonitorConfig, source, renderer, plan: TransformPlan):
        self.cfg = cfg
        self.source = source
        self.renderer = renderer
        self.spectrum = AveragedSpectrum(cfg.fft_size)
        self.processor = SpectrumProcessor(cfg, plan, self.spectrum)
        self.mapper = AxisMapper(
            cfg.fft_size,
            cfg.sample_rate_mhz,
            freq_step=cfg.freq_grid_step_mhz,
            level_step=cfg.level_grid_step,
            grid_color=cfg.grid_color,
            trace_color=cfg.trace_color,
        )
        self.viewport = Viewport(cfg.window_width, cfg.window_height)
        self.blocks_processed = 0
        self.state = MonitorState.RUNNING
        renderer.on_resize(self._on_resize)

    def _on_resize(self, width: int, height: int) -> None:
        self.viewport.resize(width, height)

    def process_block(self, block) -> int:
        count = self.processor.process_block(block)
        self.blocks_processed += 1
        return count

    def render(self) -> None:
        r = self.renderer
        r.clear()
        for layer in self.mapper.layers(self.spectrum.values, self.viewport):
            r.set_color(*layer.color)
            r.draw_lines(layer.vertices, layer.transform)
        r.swap_buffers()

    def stop_requested(self) -> bool:
        if self.renderer.poll_key(self.cfg.stop_key):
            logger.info("Stop key pressed")
            return True
        if not self.renderer.is_open():
            logger.info("Window closed")
            return True
        return False

    def step(self) -> bool:
        """Run one cycle. Returns False once the session is terminating."""
        if self.state is MonitorState.TERMINATING:
            return False
        try:
            block = self.source.read_block()
        except AcquisitionError as exc:
            logger.warning("Stopping: %s", exc)
            self.state = MonitorState.TERMINATING
            return False
        self.process_block(block)
        self.render()
        if self.stop_requested():
            self.state = MonitorState.TERMINATING
        return self.state is MonitorState.RUNNING

    def run(self) -> int:
        while self.step():
            pass
        logger.info("Processed %d blocks", self.blocks_processed)
        return 0


def run_monitor(
    cfg: MonitorConfig,
    renderer_factory: Callable[[MonitorConfig], object],
    source_factory: Callable[[MonitorConfig], object],
) -> int:
    """
    Acquire resources in order (window, device, FFT plan), run the loop, and
    release everything exactly once on every exit path.
    """
    cfg.validate()
    with ExitStack() as stack:
        renderer = stack.enter_context(closing(renderer_factory(cfg)))
        source = stack.enter_context(closing(source_factory(cfg)))
        plan = stack.enter_context(TransformPlan(cfg.fft_size))
        logger.info(
            "FFT size %d, %d windows per %d-byte block",
            cfg.fft_size,
            cfg.windows_per_block,
            cfg.block_size,
        )
        monitor = SpectrumMonitor(cfg, source, renderer, plan)
        return monitor.run()
