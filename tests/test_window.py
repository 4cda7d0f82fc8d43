"""Tests for the Hann analysis window."""

import numpy as np
import pytest

from timbral.core.window import hann_window
from timbral.errors import InvalidParameterError


def test_small_window_values():
    np.testing.assert_allclose(hann_window(5), [0.0, 0.5, 1.0, 0.5, 0.0], atol=1e-12)


def test_matches_closed_form():
    n = 2048
    i = np.arange(n)
    expected = 0.5 * (1 - np.cos(2 * np.pi * i / (n - 1)))
    np.testing.assert_allclose(hann_window(n), expected, atol=1e-12)


def test_symmetric_with_zero_endpoints():
    w = hann_window(1024)
    assert w[0] == pytest.approx(0.0, abs=1e-12)
    assert w[-1] == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(w, w[::-1], atol=1e-12)


def test_length_two():
    np.testing.assert_allclose(hann_window(2), [0.0, 0.0], atol=1e-12)


@pytest.mark.parametrize("length", [1, 0, -4])
def test_degenerate_lengths_rejected(length):
    with pytest.raises(InvalidParameterError):
        hann_window(length)


def test_window_is_shared_and_read_only():
    w = hann_window(512)
    assert hann_window(512) is w
    with pytest.raises(ValueError):
        w[0] = 1.0
