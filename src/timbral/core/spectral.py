"""
Short-time spectral analysis.

Windowed FFTs over the frame grid, the whole-signal transforms used for
unframed analysis, and the mappings from bin index to Hz and frame index
to seconds.
"""

from typing import Union

import librosa
import numpy as np
import scipy.fft

from timbral.core.framing import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_LENGTH,
    as_signal,
    frame_matrix,
)
from timbral.core.window import hann_window
from timbral.errors import InvalidParameterError

DEFAULT_SAMPLE_RATE = 22050


def _check_sample_rate(sample_rate: float) -> None:
    if sample_rate <= 0:
        raise InvalidParameterError(f"sample_rate must be > 0, got {sample_rate}")


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

def stft(
    signal,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
) -> np.ndarray:
    """
    Short-time Fourier transform of every channel.

    Each frame is multiplied by a Hann window of ``frame_size`` samples and
    transformed; only the non-negative frequency bins are kept.

    Args:
        signal: ``[C, N]`` float buffer.
        frame_size: FFT size and frame length in samples (>= 2).
        hop_length: Samples between frame starts.

    Returns:
        Complex array of shape ``[C, frame_size // 2 + 1, T]``.
    """
    window = hann_window(frame_size)
    frames = frame_matrix(signal, frame_size, hop_length)
    return scipy.fft.rfft(frames * window[:, np.newaxis], axis=-2)


def fft(signal) -> np.ndarray:
    """
    Full FFT of each whole channel after a Hann window of the signal length.

    No bins are dropped; the result has shape ``[C, N]``.
    """
    signal = as_signal(signal)
    window = hann_window(signal.shape[1])
    return scipy.fft.fft(signal * window, axis=-1)


def magnitude_spectrum(signal) -> np.ndarray:
    """
    Magnitude of the real FFT of each Hann-windowed channel.

    Returns:
        Float array of shape ``[C, N // 2 + 1]``.
    """
    signal = as_signal(signal)
    window = hann_window(signal.shape[1])
    return np.abs(scipy.fft.rfft(signal * window, axis=-1))


# ---------------------------------------------------------------------------
# Axis mapping
# ---------------------------------------------------------------------------

def frequency_bins(frame_size: int, sample_rate: float = DEFAULT_SAMPLE_RATE) -> np.ndarray:
    """
    Centre frequency in Hz of each non-negative FFT bin.

    Bin ``k`` maps to ``k * sample_rate / frame_size``; bin 0 is DC.
    """
    if frame_size < 1:
        raise InvalidParameterError(f"frame_size must be >= 1, got {frame_size}")
    _check_sample_rate(sample_rate)
    return librosa.fft_frequencies(sr=sample_rate, n_fft=frame_size)


def frames_to_time(
    frames: Union[int, np.ndarray],
    hop_length: int = DEFAULT_HOP_LENGTH,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> np.ndarray:
    """
    Start time in seconds of each frame.

    Args:
        frames: A frame count, or a feature matrix whose last axis is time.
        hop_length: Samples between frame starts.
        sample_rate: Sample rate in Hz.

    Returns:
        Float array of shape ``[T]``; frame ``t`` is ``t * hop_length / sample_rate``.
    """
    if hop_length < 1:
        raise InvalidParameterError(f"hop_length must be >= 1, got {hop_length}")
    _check_sample_rate(sample_rate)

    if isinstance(frames, (int, np.integer)) or np.ndim(frames) == 0:
        n_frames = int(frames)
    else:
        n_frames = np.shape(frames)[-1]
    if n_frames < 0:
        raise InvalidParameterError(f"frame count must be >= 0, got {n_frames}")

    return librosa.frames_to_time(
        np.arange(n_frames),
        sr=sample_rate,
        hop_length=hop_length,
    )
