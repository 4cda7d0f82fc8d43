"""
Frame-level acoustic feature extraction.

Every framed extractor returns a ``[C, T]`` matrix (one value per channel and
frame); every ``*_overall`` variant reduces the whole signal to ``[C]``.

Time-domain features (RMS, zero-crossing rate) work on the raw frame grid.
Spectral features work on the STFT magnitude; callers that already hold the
magnitude (see :class:`timbral.core.analyzer.FeatureAnalyzer`) can pass it as
``magnitude=`` to skip the transform, in which case ``signal`` may be None.

Silence is a valid input: centroid, bandwidth and rolloff return 0.0 for a
frame whose magnitude sums to zero instead of dividing by it.
"""

from typing import Optional

import librosa
import numpy as np

from timbral.core.framing import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_LENGTH,
    as_signal,
    frame,
    frame_matrix,
)
from timbral.core.spectral import (
    DEFAULT_SAMPLE_RATE,
    frequency_bins,
    magnitude_spectrum,
    stft,
)
from timbral.errors import InvalidParameterError

DEFAULT_ROLLOFF_THRESHOLD = 0.85
DEFAULT_BANDWIDTH_POWER = 2.0
DEFAULT_FLATNESS_AMIN = 1e-10
DEFAULT_FLATNESS_POWER = 2.0


# ---------------------------------------------------------------------------
# Time-domain features
# ---------------------------------------------------------------------------

def rms(
    signal,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
) -> np.ndarray:
    """
    Root-mean-square energy of each frame.

    Args:
        signal: ``[C, N]`` float buffer.
        frame_size: Samples per frame.
        hop_length: Samples between frame starts.

    Returns:
        ``[C, T]`` array of non-negative values.
    """
    padded, _ = frame(signal, frame_size, hop_length)
    return librosa.feature.rms(
        y=np.ascontiguousarray(padded),
        frame_length=frame_size,
        hop_length=hop_length,
        center=False,
        dtype=np.float64,
    )[..., 0, :]


def rms_overall(signal) -> np.ndarray:
    """RMS of each whole channel, shape ``[C]``; zeros for an empty signal."""
    signal = as_signal(signal)
    if signal.shape[1] == 0:
        return np.zeros(signal.shape[0])
    return np.sqrt(np.mean(np.square(signal), axis=-1, dtype=np.float64))


def _sign_changes(samples: np.ndarray, axis: int) -> np.ndarray:
    """Count adjacent sample pairs along ``axis`` whose product is negative."""
    n = samples.shape[axis]
    head = np.take(samples, np.arange(0, n - 1), axis=axis)
    tail = np.take(samples, np.arange(1, n), axis=axis)
    return np.count_nonzero(head * tail < 0, axis=axis)


def zero_crossing_rate(
    signal,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
) -> np.ndarray:
    """
    Fraction of sign changes in each frame.

    The count of adjacent pairs with ``x[i] * x[i+1] < 0`` is divided by
    ``frame_size`` (not ``frame_size - 1``).  Zero padding never counts as a
    crossing.

    Returns:
        ``[C, T]`` array.
    """
    frames = frame_matrix(signal, frame_size, hop_length)
    return _sign_changes(frames, axis=-2) / float(frame_size)


def zero_crossing_rate_overall(signal) -> np.ndarray:
    """
    Sign changes over each whole channel divided by the channel length.

    Returns zeros for an empty signal.
    """
    signal = as_signal(signal)
    n_samples = signal.shape[1]
    if n_samples == 0:
        return np.zeros(signal.shape[0])
    return _sign_changes(signal, axis=-1) / float(n_samples)


# ---------------------------------------------------------------------------
# Reductions over the frequency axis
#
# All helpers take magnitude shaped [..., F, T] and frequencies shaped [F],
# and return [..., T].  librosa keeps a singleton feature axis at -2, which
# is dropped here.
# ---------------------------------------------------------------------------

def _centroid(freqs: np.ndarray, magnitude: np.ndarray) -> np.ndarray:
    return librosa.feature.spectral_centroid(S=magnitude, freq=freqs)[..., 0, :]


def _bandwidth(freqs: np.ndarray, magnitude: np.ndarray, power: float) -> np.ndarray:
    return librosa.feature.spectral_bandwidth(S=magnitude, freq=freqs, p=power)[..., 0, :]


def _rolloff(freqs: np.ndarray, magnitude: np.ndarray, threshold: float) -> np.ndarray:
    total = magnitude.sum(axis=-2)
    cumulative = np.cumsum(magnitude, axis=-2)
    reached = cumulative >= threshold * total[..., np.newaxis, :]
    # Rounding can leave the last cumulative value just under the target.
    bins = np.where(reached.any(axis=-2), reached.argmax(axis=-2), freqs.size - 1)
    return np.where(total == 0, 0.0, freqs[bins])


def _flatness(magnitude: np.ndarray, amin: float, power: float) -> np.ndarray:
    # The amin floor applies to magnitude ** power, before the log.
    return librosa.feature.spectral_flatness(S=magnitude, amin=amin, power=power)[..., 0, :]


def _check_power(power: float) -> None:
    if power <= 0:
        raise InvalidParameterError(f"power must be > 0, got {power}")


def _check_threshold(threshold: float) -> None:
    if not 0.0 < threshold <= 1.0:
        raise InvalidParameterError(f"threshold must be in (0, 1], got {threshold}")


def _check_amin(amin: float) -> None:
    if amin <= 0:
        raise InvalidParameterError(f"amin must be > 0, got {amin}")


def _framed_magnitude(
    signal,
    magnitude: Optional[np.ndarray],
    frame_size: int,
    hop_length: int,
) -> np.ndarray:
    if magnitude is not None:
        magnitude = np.asarray(magnitude)
        expected_bins = frame_size // 2 + 1
        if magnitude.ndim != 3 or magnitude.shape[1] != expected_bins:
            raise InvalidParameterError(
                f"magnitude must have shape [channels, {expected_bins}, frames], "
                f"got {magnitude.shape}"
            )
        return magnitude
    if signal is None:
        raise InvalidParameterError("either signal or magnitude must be given")
    return np.abs(stft(signal, frame_size, hop_length))


def _overall_magnitude(signal) -> tuple[np.ndarray, int]:
    """Whole-signal magnitude as ``[C, F, 1]`` plus the transform length."""
    signal = as_signal(signal)
    return magnitude_spectrum(signal)[..., np.newaxis], signal.shape[1]


# ---------------------------------------------------------------------------
# Framed spectral features
# ---------------------------------------------------------------------------

def spectral_centroid(
    signal=None,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    magnitude: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Magnitude-weighted mean frequency (Hz) of each frame.

    Args:
        signal: ``[C, N]`` float buffer; ignored when ``magnitude`` is given.
        frame_size: FFT size in samples.
        hop_length: Samples between frame starts.
        sample_rate: Sample rate in Hz.
        magnitude: Optional precomputed ``abs(stft(...))``.

    Returns:
        ``[C, T]`` array; 0.0 for frames with no energy.
    """
    magnitude = _framed_magnitude(signal, magnitude, frame_size, hop_length)
    return _centroid(frequency_bins(frame_size, sample_rate), magnitude)


def spectral_bandwidth(
    signal=None,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    power: float = DEFAULT_BANDWIDTH_POWER,
    magnitude: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Order-``power`` spread of frequencies around the spectral centroid.

    ``(sum(S * |f - centroid| ** power) / sum(S)) ** (1 / power)`` per frame.

    Returns:
        ``[C, T]`` array; 0.0 for frames with no energy.
    """
    _check_power(power)
    magnitude = _framed_magnitude(signal, magnitude, frame_size, hop_length)
    return _bandwidth(frequency_bins(frame_size, sample_rate), magnitude, power)


def spectral_rolloff(
    signal=None,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    threshold: float = DEFAULT_ROLLOFF_THRESHOLD,
    magnitude: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Lowest bin frequency below which ``threshold`` of the magnitude lies.

    Falls back to the top bin when no cumulative value reaches the target.

    Returns:
        ``[C, T]`` array in Hz; 0.0 for frames with no energy.
    """
    _check_threshold(threshold)
    magnitude = _framed_magnitude(signal, magnitude, frame_size, hop_length)
    return _rolloff(frequency_bins(frame_size, sample_rate), magnitude, threshold)


def spectral_flatness(
    signal=None,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
    amin: float = DEFAULT_FLATNESS_AMIN,
    power: float = DEFAULT_FLATNESS_POWER,
    magnitude: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Geometric over arithmetic mean of the power spectrum, per frame.

    ``magnitude ** power`` is floored at ``amin`` before taking logs.
    Values are in ``(0, 1]``: near 1 for noise, near 0 for a pure tone.

    Returns:
        ``[C, T]`` array.
    """
    _check_amin(amin)
    _check_power(power)
    magnitude = _framed_magnitude(signal, magnitude, frame_size, hop_length)
    return _flatness(magnitude, amin, power)


# ---------------------------------------------------------------------------
# Whole-signal spectral features
# ---------------------------------------------------------------------------

def spectral_centroid_overall(signal, sample_rate: float = DEFAULT_SAMPLE_RATE) -> np.ndarray:
    """Spectral centroid of each whole Hann-windowed channel, shape ``[C]``."""
    magnitude, n_fft = _overall_magnitude(signal)
    return _centroid(frequency_bins(n_fft, sample_rate), magnitude)[..., 0]


def spectral_bandwidth_overall(
    signal,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    power: float = DEFAULT_BANDWIDTH_POWER,
) -> np.ndarray:
    """Spectral bandwidth of each whole channel, shape ``[C]``."""
    _check_power(power)
    magnitude, n_fft = _overall_magnitude(signal)
    return _bandwidth(frequency_bins(n_fft, sample_rate), magnitude, power)[..., 0]


def spectral_rolloff_overall(
    signal,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    threshold: float = DEFAULT_ROLLOFF_THRESHOLD,
) -> np.ndarray:
    """Spectral rolloff of each whole channel, shape ``[C]``."""
    _check_threshold(threshold)
    magnitude, n_fft = _overall_magnitude(signal)
    return _rolloff(frequency_bins(n_fft, sample_rate), magnitude, threshold)[..., 0]


def spectral_flatness_overall(
    signal,
    amin: float = DEFAULT_FLATNESS_AMIN,
    power: float = DEFAULT_FLATNESS_POWER,
) -> np.ndarray:
    """Spectral flatness of each whole channel, shape ``[C]``."""
    _check_amin(amin)
    _check_power(power)
    magnitude, _ = _overall_magnitude(signal)
    return _flatness(magnitude, amin, power)[..., 0]
