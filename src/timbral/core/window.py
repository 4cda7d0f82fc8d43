"""
Analysis window.

The symmetric Hann window, ``0.5 * (1 - cos(2*pi*i / (length - 1)))``.
Windows are cached per length and returned read-only so one instance can be
shared by every frame and every call.
"""

from functools import lru_cache

import numpy as np
from scipy import signal as scipy_signal

from timbral.errors import InvalidParameterError


@lru_cache(maxsize=32)
def _cached_hann(length: int) -> np.ndarray:
    window = scipy_signal.windows.hann(length, sym=True)
    window.flags.writeable = False
    return window


def hann_window(length: int) -> np.ndarray:
    """
    Symmetric Hann window of ``length`` samples.

    Args:
        length: Window length; must be at least 2 (the formula divides by
            ``length - 1``).

    Returns:
        Read-only float64 array of shape ``(length,)``.

    Raises:
        InvalidParameterError: If ``length < 2``.
    """
    if length < 2:
        raise InvalidParameterError(f"Hann window length must be >= 2, got {length}")
    return _cached_hann(int(length))
