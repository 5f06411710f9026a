import numpy as np
import pytest

from ptwarp.core import scale_coeffs, unscale_coeffs


@pytest.mark.parametrize("n", [2, 3, 10, 100, 10000])
@pytest.mark.parametrize("coeffs", [[0.0, 1.0, 0.0], [1.5, -0.3, 2e-4, 1e-7], [1000.0, 1.0]])
def test_unscale_inverts_scale(n, coeffs):
    result = unscale_coeffs(scale_coeffs(coeffs, n), n)
    np.testing.assert_allclose(result, coeffs, rtol=1e-12, atol=1e-9)


def test_scale_values():
    np.testing.assert_allclose(scale_coeffs([2.0, 3.0, 4.0], 11), [0.2, 3.0, 40.0])
    np.testing.assert_allclose(unscale_coeffs([0.2, 3.0, 40.0], 11), [2.0, 3.0, 4.0])


def test_identity_warp_is_scale_invariant():
    np.testing.assert_allclose(scale_coeffs([0.0, 1.0, 0.0], 500), [0.0, 1.0, 0.0])


@pytest.mark.parametrize("n", [0, 1])
def test_short_signals_leave_coefficients_unchanged(n):
    coeffs = [3.0, 2.0, 1.0]
    np.testing.assert_array_equal(scale_coeffs(coeffs, n), coeffs)
    np.testing.assert_array_equal(unscale_coeffs(coeffs, n), coeffs)


def test_scale_returns_copy():
    coeffs = np.array([1.0, 1.0])
    out = scale_coeffs(coeffs, 1)
    out[0] = 5.0
    assert coeffs[0] == 1.0
