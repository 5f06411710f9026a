import math

import numpy as np
import pytest

from ptwarp.core import interpolate, scale_coeffs, warp_signal, warp_time


def test_warp_time_identity():
    np.testing.assert_allclose(warp_time(5, [0.0, 1.0]), [0, 1, 2, 3, 4])


def test_warp_time_quadratic():
    # b = [0, 0, 1] maps index i to i**2 / (n - 1)
    np.testing.assert_allclose(warp_time(5, [0.0, 0.0, 1.0]), [0.0, 0.25, 1.0, 2.25, 4.0])


def test_warp_time_short_signals():
    np.testing.assert_allclose(warp_time(1, [2.0, 3.0]), [2.0])
    assert warp_time(0, [0.0, 1.0]).size == 0


def test_interpolate_interior():
    signal = [1.0, 2.0, 4.0]
    assert interpolate(signal, 0.5) == pytest.approx(1.5)
    assert interpolate(signal, 1.25) == pytest.approx(2.5)
    np.testing.assert_allclose(interpolate(signal, [0.5, 1.25]), [1.5, 2.5])


def test_interpolate_boundaries_are_exact():
    signal = [0.1, 0.7, 0.3, 0.9]
    assert interpolate(signal, len(signal) - 1) == signal[-1]
    assert interpolate(signal, -1) == signal[0]
    assert interpolate(signal, 0) == signal[0]
    assert interpolate(signal, 100.5) == signal[-1]
    assert interpolate(signal, -math.inf) == signal[0]
    assert interpolate(signal, math.inf) == signal[-1]


def test_interpolate_nan_position():
    assert math.isnan(interpolate([1.0, 2.0], float("nan")))


def test_interpolate_single_sample():
    assert interpolate([7.0], 3.2) == 7.0
    assert interpolate([7.0], -3.2) == 7.0


def test_interpolate_rejects_empty_signal():
    with pytest.raises(ValueError):
        interpolate([], 0.0)


@pytest.mark.parametrize("n", [2, 17, 100])
def test_identity_warp_reproduces_signal(n):
    rng = np.random.default_rng(0)
    signal = rng.normal(size=n)
    np.testing.assert_allclose(warp_signal(signal, [0.0, 1.0]), signal, atol=1e-9)
    np.testing.assert_allclose(warp_signal(signal, [0.0, 1.0, 0.0]), signal, atol=1e-9)


def test_shift_warp():
    signal = np.arange(10.0) ** 2
    warped = warp_signal(signal, scale_coeffs([2.0, 1.0], signal.size))
    np.testing.assert_allclose(warped[:-2], signal[2:], atol=1e-9)
    np.testing.assert_array_equal(warped[-2:], [signal[-1], signal[-1]])


def test_warp_short_signals():
    assert warp_signal([], [0.0, 1.0]).size == 0
    np.testing.assert_array_equal(warp_signal([5.0], [3.0, 2.0]), [5.0])
