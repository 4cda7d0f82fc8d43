"""Shared synthetic signals for the test suite."""

import numpy as np
import pytest

TEST_SR = 22050


@pytest.fixture
def pure_sine():
    """One second of a unit-amplitude 440 Hz sine, shape (1, 22050)."""
    sr = TEST_SR
    t = np.arange(sr) / sr
    y = np.sin(2 * np.pi * 440.0 * t)
    return y[np.newaxis, :], sr


@pytest.fixture
def mixed_signal():
    """Two seconds of a chord plus low-level noise, shape (1, 44100)."""
    sr = TEST_SR
    rng = np.random.default_rng(7)
    t = np.arange(2 * sr) / sr
    y = (
        0.3 * np.sin(2 * np.pi * 220.0 * t)
        + 0.2 * np.sin(2 * np.pi * 660.0 * t)
        + 0.05 * rng.standard_normal(t.size)
    ).astype(np.float32)
    return y[np.newaxis, :], sr


@pytest.fixture
def stereo_signal():
    """Stereo buffer: a 1 kHz sine on the left, silence on the right."""
    sr = TEST_SR
    t = np.arange(sr // 2) / sr
    left = 0.5 * np.sin(2 * np.pi * 1000.0 * t)
    right = np.zeros_like(left)
    return np.stack([left, right]), sr


@pytest.fixture
def white_noise():
    """Uniform white noise in [-1, 1], shape (1, 22050)."""
    rng = np.random.default_rng(42)
    return rng.uniform(-1.0, 1.0, size=(1, TEST_SR)), TEST_SR
