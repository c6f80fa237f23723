import numpy as np
import pytest

pytest.importorskip("PyQt6.QtWidgets")

from rtl_spectrum_monitor.display import Affine  # noqa: E402
from rtl_spectrum_monitor.ui.renderer import QtRenderer  # noqa: E402


def test_renderer_draws_and_closes_once() -> None:
    renderer = QtRenderer(320, 240, antialias_samples=4)
    sizes = []
    renderer.on_resize(lambda w, h: sizes.append((w, h)))
    assert sizes == [renderer.size]
    assert renderer.is_open()

    renderer.clear()
    renderer.set_color(0.8, 0.8, 0.0)
    renderer.draw_lines(np.array([[0.0, 0.0], [1.0, 1.0]]), Affine(10.0, 10.0))
    renderer.draw_lines(np.array([[0.0, 0.5], [1.0, 0.5]]), Affine(10.0, 10.0))
    renderer.swap_buffers()

    renderer.clear()
    renderer.draw_lines(np.array([[0.0, 0.0], [1.0, 1.0]]), Affine(10.0, 10.0))
    renderer.swap_buffers()
    assert not renderer._curves[1].isVisible()

    assert not renderer.poll_key("Escape")
    renderer.close()
    renderer.close()
    assert not renderer.is_open()
