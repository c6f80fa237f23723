import os

# Qt must not need a display when the renderer tests run.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Optional

import pytest

from rtl_spectrum_monitor.config import MonitorConfig


class FakeRenderer:
    """Records draw calls; stops via key or close after a number of frames."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        stop_after: Optional[int] = None,
        close_after: Optional[int] = None,
    ):
        self.width = width
        self.height = height
        self.stop_after = stop_after
        self.close_after = close_after
        self.frames = 0
        self.close_calls = 0
        self.color = (1.0, 1.0, 1.0)
        self.current: list = []
        self.last_frame: list = []
        self._callbacks: list = []

    def on_resize(self, callback) -> None:
        self._callbacks.append(callback)
        callback(self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        self.width, self.height = width, height
        for callback in self._callbacks:
            callback(width, height)

    def clear(self) -> None:
        self.current = []

    def set_color(self, r: float, g: float, b: float) -> None:
        self.color = (r, g, b)

    def draw_lines(self, vertices, transform) -> None:
        self.current.append((self.color, vertices.copy(), transform))

    def swap_buffers(self) -> None:
        self.frames += 1
        self.last_frame = self.current

    def poll_key(self, name: str) -> bool:
        return name == "Escape" and self.stop_after is not None and self.frames >= self.stop_after

    def is_open(self) -> bool:
        return self.close_after is None or self.frames < self.close_after

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def cfg() -> MonitorConfig:
    return MonitorConfig()


@pytest.fixture
def renderer_cls():
    return FakeRenderer
