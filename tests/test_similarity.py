import math

import numpy as np
import pytest

from ptwarp.core import rms_error, triangle_smooth, uncentered_correlation, wcc
from ptwarp.core.similarity import triangle_weights


def test_uncentered_correlation_values():
    assert uncentered_correlation([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert uncentered_correlation([1.0, 2.0], [2.0, 4.0]) == pytest.approx(1.0)
    assert uncentered_correlation([1.0, 2.0], [2.0, 1.0]) == pytest.approx(0.8)


def test_uncentered_correlation_is_not_mean_centred():
    # Pearson correlation is undefined for constant vectors; the cosine is 1.
    assert uncentered_correlation([1.0, 1.0, 1.0], [2.0, 2.0, 2.0]) == pytest.approx(1.0)


def test_uncentered_correlation_zero_energy_and_prefix():
    assert uncentered_correlation([0.0, 0.0], [1.0, 2.0]) == 0.0
    assert uncentered_correlation([], [1.0]) == 0.0
    assert uncentered_correlation([1.0, 2.0, 3.0], [1.0, 2.0]) == pytest.approx(1.0)


def test_triangle_weights():
    np.testing.assert_allclose(triangle_weights(1), [0.5, 1.0, 0.5])
    np.testing.assert_allclose(triangle_weights(0), [1.0])


def test_triangle_smooth_interior_and_boundaries():
    np.testing.assert_allclose(triangle_smooth([0.0, 0.0, 4.0, 0.0, 0.0], 1), [0.0, 1.0, 2.0, 1.0, 0.0])
    # truncated window at the left edge renormalises by 1.5
    np.testing.assert_allclose(triangle_smooth([3.0, 0.0, 0.0], 1), [2.0, 0.75, 0.0])


def test_triangle_smooth_zero_width_is_identity():
    signal = [1.0, -2.0, 3.5]
    np.testing.assert_allclose(triangle_smooth(signal, 0), signal)


@pytest.mark.parametrize("width", [1, 3, 50])
def test_triangle_smooth_keeps_constants(width):
    np.testing.assert_allclose(triangle_smooth(np.full(7, 2.5), width), np.full(7, 2.5))


def test_triangle_smooth_edge_cases():
    assert triangle_smooth([], 3).size == 0
    np.testing.assert_allclose(triangle_smooth([4.0], 3), [4.0])
    with pytest.raises(ValueError):
        triangle_smooth([1.0], -1)


@pytest.mark.parametrize("width", [0, 1, 5, 20, 200])
def test_wcc_self_similarity(width):
    x = np.sin(np.linspace(0, 3, 64)) + 2.0
    assert wcc(x, x, width) == pytest.approx(1.0)


def test_wcc_zero_width_matches_correlation():
    x = [1.0, 2.0, 3.0, 2.0, 1.0]
    y = [0.0, 1.0, 3.0, 3.0, 0.5]
    assert wcc(x, y, 0) == uncentered_correlation(x, y)


def test_wcc_smoothing_rewards_nearby_peaks():
    x = np.zeros(50)
    y = np.zeros(50)
    x[20] = 1.0
    y[23] = 1.0
    assert wcc(x, y, 0) == 0.0
    assert wcc(x, y, 5) > 0.5


def test_rms_error():
    assert rms_error([1.0, 2.0, 3.0], [1.0, 2.0, 5.0]) == pytest.approx(math.sqrt(4.0 / 3.0))
    assert rms_error([1.0, 2.0, 3.0], [1.0, 2.0]) == 0.0
    assert rms_error([], []) == 0.0
