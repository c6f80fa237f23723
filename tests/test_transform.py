import numpy as np
import pytest

from rtl_spectrum_monitor.dsp.transform import TransformPlan


@pytest.mark.parametrize("size", [0, 3, 1000])
def test_plan_requires_power_of_two(size: int) -> None:
    with pytest.raises(ValueError):
        TransformPlan(size)


def test_forward_transform_is_unnormalized() -> None:
    with TransformPlan(8) as plan:
        plan.input[:] = 1.0
        out = plan.execute()
        np.testing.assert_allclose(out[0], 8.0)
        np.testing.assert_allclose(out[1:], 0.0, atol=1e-6)

        impulse = np.zeros(8, dtype=np.complex64)
        impulse[0] = 1.0
        np.testing.assert_allclose(plan.execute(impulse), np.ones(8), atol=1e-6)


def test_forward_sign_convention() -> None:
    n = 16
    tone = np.exp(2j * np.pi * 3 * np.arange(n) / n).astype(np.complex64)
    with TransformPlan(n) as plan:
        out = plan.execute(tone)
    assert int(np.argmax(np.abs(out))) == 3


def test_wrong_window_size_is_rejected() -> None:
    with TransformPlan(8) as plan:
        with pytest.raises(ValueError):
            plan.execute(np.zeros(4, dtype=np.complex64))


def test_plan_release_is_idempotent() -> None:
    plan = TransformPlan(8)
    with plan:
        assert not plan.released
    assert plan.released
    plan.close()
    assert plan.released
    with pytest.raises(RuntimeError):
        plan.execute()
