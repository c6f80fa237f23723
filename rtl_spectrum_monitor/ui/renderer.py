"""Qt window for drawing the spectrum with pyqtgraph.

Exposes an immediate-mode style drawing surface (clear, set color, draw line
pairs, swap) on top of a pyqtgraph plot whose view range tracks the widget size
in pixels. This module must not implement DSP or talk to the SDR.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Set, Tuple

import numpy as np
import pyqtgraph as pg
from pyqtgraph.Qt import QtCore

from rtl_spectrum_monitor.display import Affine
from rtl_spectrum_monitor.errors import StartupError

ResizeCallback = Callable[[int, int], None]


def _key_code(key) -> int:
    # Qt6 bindings expose keys as enums, Qt5 as plain ints.
    return int(getattr(key, "value", key))


class SpectrumCanvas(pg.PlotWidget):
    """Plot widget that forwards resize, key and close events to the renderer."""

    def __init__(self, owner: "QtRenderer"):
        super().__init__()
        self._owner = owner

    def resizeEvent(self, ev):
        super().resizeEvent(ev)
        owner = getattr(self, "_owner", None)
        if owner is not None:
            owner._handle_resize(self.width(), self.height())

    def keyPressEvent(self, ev):
        self._owner._pressed.add(_key_code(ev.key()))
        super().keyPressEvent(ev)

    def closeEvent(self, ev):
        self._owner._open = False
        ev.accept()


class QtRenderer:
    """
    Drawing surface for one monitor session.

    Qt events are only processed from swap_buffers(), so the caller keeps a
    single synchronous control loop.
    """

    def __init__(self, width: int, height: int, antialias_samples: int = 4):
        try:
            self.app = pg.mkQApp()
            pg.setConfigOptions(antialias=antialias_samples > 0)
            pg.setConfigOption("background", "k")
            self.canvas = SpectrumCanvas(self)
        except Exception as exc:
            raise StartupError(f"Failed to create window: {exc}") from exc

        self._resize_callbacks: List[ResizeCallback] = []
        self._pressed: Set[int] = set()
        self._curves: List[pg.PlotCurveItem] = []
        self._used = 0
        self._pen = pg.mkPen((255, 255, 255), width=1)
        self._open = True
        self._closed = False

        plot = self.canvas.getPlotItem()
        plot.hideAxis("left")
        plot.hideAxis("bottom")
        plot.hideButtons()
        plot.setMenuEnabled(False)
        plot.setMouseEnabled(x=False, y=False)
        plot.getViewBox().disableAutoRange()

        self.canvas.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        self.canvas.resize(int(width), int(height))
        self.canvas.show()
        self._handle_resize(self.canvas.width(), self.canvas.height())

    @property
    def size(self) -> Tuple[int, int]:
        return self.canvas.width(), self.canvas.height()

    def set_title(self, title: str) -> None:
        self.canvas.setWindowTitle(title)

    def on_resize(self, callback: ResizeCallback) -> None:
        self._resize_callbacks.append(callback)
        callback(*self.size)

    def _handle_resize(self, width: int, height: int) -> None:
        if getattr(self, "_closed", False):
            return
        # Pixel-space projection, origin bottom left.
        self.canvas.getPlotItem().getViewBox().setRange(
            xRange=(0, width), yRange=(0, height), padding=0
        )
        for callback in list(getattr(self, "_resize_callbacks", ())):
            callback(int(width), int(height))

    def clear(self) -> None:
        self._used = 0

    def set_color(self, r: float, g: float, b: float) -> None:
        self._pen = pg.mkPen((int(r * 255), int(g * 255), int(b * 255)), width=1)

    def draw_lines(self, vertices: np.ndarray, transform: Affine) -> None:
        """Draw independent segments from consecutive vertex pairs."""
        pts = transform.apply(vertices)
        if self._used < len(self._curves):
            curve = self._curves[self._used]
        else:
            curve = pg.PlotCurveItem()
            self.canvas.addItem(curve)
            self._curves.append(curve)
        curve.setData(pts[:, 0], pts[:, 1], connect="pairs")
        curve.setPen(self._pen)
        curve.setVisible(True)
        self._used += 1

    def swap_buffers(self) -> None:
        for curve in self._curves[self._used :]:
            curve.setVisible(False)
        self.app.processEvents()

    def poll_key(self, name: str) -> bool:
        """True if key ``name`` (e.g. "Escape") was pressed since the last poll."""
        code = _key_code(getattr(QtCore.Qt.Key, f"Key_{name}"))
        if code in self._pressed:
            self._pressed.discard(code)
            return True
        return False

    def is_open(self) -> bool:
        return self._open and self.canvas.isVisible()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._open = False
        self.canvas.close()
        self.app.processEvents()


def create_renderer(
    width: int,
    height: int,
    antialias_samples: int,
    title: Optional[str] = None,
) -> QtRenderer:
    renderer = QtRenderer(width, height, antialias_samples)
    if title:
        renderer.set_title(title)
    return renderer
