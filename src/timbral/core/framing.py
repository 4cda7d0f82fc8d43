"""
Frame grid construction.

Turns a ``[channels, samples]`` buffer into a right-padded buffer plus an
ordered list of half-open sample ranges, one per analysis frame.  Every
framed extractor goes through :func:`frame_matrix`, which exposes the same
frames as a strided view so no per-frame Python loop is needed.
"""

import logging
import math

import librosa
import numpy as np

from timbral.errors import InvalidParameterError, InvalidSignalError

logger = logging.getLogger(__name__)

DEFAULT_FRAME_SIZE = 2048
DEFAULT_HOP_LENGTH = 512


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def as_signal(samples) -> np.ndarray:
    """
    Validate a sample buffer and return it as a 2-D ``[C, N]`` array.

    A 1-D array is read as a single channel.  The input is never copied
    unless it is not already an ndarray.

    Raises:
        InvalidSignalError: If the buffer is not 1-D/2-D, has no channels,
            or is not real floating point.
    """
    arr = np.asarray(samples)
    if arr.ndim == 1:
        arr = arr[np.newaxis, :]
    if arr.ndim != 2:
        raise InvalidSignalError(
            f"signal must have shape [channels, samples], got {arr.shape}"
        )
    if arr.shape[0] < 1:
        raise InvalidSignalError("signal must have at least one channel")
    if not np.issubdtype(arr.dtype, np.floating):
        raise InvalidSignalError(
            f"signal must hold real floating-point samples, got dtype {arr.dtype}"
        )
    return arr


def check_frame_params(frame_size: int, hop_length: int) -> None:
    """Fail fast on a frame size or hop length the grid cannot use."""
    if hop_length < 1:
        raise InvalidParameterError(f"hop_length must be >= 1, got {hop_length}")
    if frame_size < 1:
        raise InvalidParameterError(f"frame_size must be >= 1, got {frame_size}")


# ---------------------------------------------------------------------------
# Grid arithmetic
# ---------------------------------------------------------------------------

def total_frames(signal_length: int, frame_size: int, hop_length: int) -> int:
    """
    Number of frames needed to cover ``signal_length`` samples.

    Signals shorter than one frame still get a single (padded) frame.
    """
    check_frame_params(frame_size, hop_length)
    if signal_length <= frame_size:
        return 1
    return math.ceil((signal_length - frame_size) / hop_length) + 1


def pad_amount(signal_length: int, frame_size: int, hop_length: int) -> int:
    """
    Samples to append so the last frame ends exactly on the padded length.

    Args:
        signal_length: Number of samples in the signal.
        frame_size: Samples per frame.
        hop_length: Samples between consecutive frame starts.

    Returns:
        Non-negative padding count.
    """
    frames = total_frames(signal_length, frame_size, hop_length)
    padded_length = (frames - 1) * hop_length + frame_size
    return padded_length - signal_length


def pad_right(signal: np.ndarray, pad_count: int, fill: float = 0.0) -> np.ndarray:
    """Append ``pad_count`` columns of ``fill`` along the sample axis."""
    if pad_count == 0:
        return signal
    padding = np.full((signal.shape[0], pad_count), fill, dtype=signal.dtype)
    return np.concatenate([signal, padding], axis=1)


def build_ranges(padded_length: int, frame_size: int, hop_length: int) -> list[range]:
    """
    Half-open sample ranges ``[start, start + frame_size)`` for every frame.

    Starts at 0 and steps by ``hop_length`` while the frame still fits.
    """
    check_frame_params(frame_size, hop_length)
    return [
        range(start, start + frame_size)
        for start in range(0, padded_length - frame_size + 1, hop_length)
    ]


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------

def frame(
    signal,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
) -> tuple[np.ndarray, list[range]]:
    """
    Pad a signal to a whole number of frames and list the frame ranges.

    Args:
        signal: ``[C, N]`` float buffer (1-D is read as mono).
        frame_size: Samples per frame.
        hop_length: Samples between consecutive frame starts.

    Returns:
        Tuple of (padded_signal, ranges).

    Raises:
        InvalidParameterError: If ``hop_length < 1`` or ``frame_size < 1``.
    """
    check_frame_params(frame_size, hop_length)
    signal = as_signal(signal)

    amount = pad_amount(signal.shape[1], frame_size, hop_length)
    if amount > 0:
        signal = pad_right(signal, amount)
    ranges = build_ranges(signal.shape[1], frame_size, hop_length)

    logger.debug(
        "Framed %d channel(s): padded %d sample(s), %d frame(s)",
        signal.shape[0],
        amount,
        len(ranges),
    )
    return signal, ranges


def frame_matrix(
    signal,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop_length: int = DEFAULT_HOP_LENGTH,
) -> np.ndarray:
    """
    All frames of the padded signal as a read-only ``[C, frame_size, T]`` view.

    Column ``t`` holds the samples of ``ranges[t]`` from :func:`frame`.
    """
    padded, _ = frame(signal, frame_size, hop_length)
    return librosa.util.frame(
        np.ascontiguousarray(padded),
        frame_length=frame_size,
        hop_length=hop_length,
        axis=-1,
    )
