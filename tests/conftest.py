import numpy as np
import pytest


def gaussian(n, center, var=10.0):
    x = np.arange(n, dtype=float)
    return np.exp(-0.5 * (x - center) ** 2 / var)


@pytest.fixture
def peak_pair():
    """Reference peak at 50 and the same peak shifted to 52 over 100 samples."""
    return gaussian(100, 50.0), gaussian(100, 52.0)
