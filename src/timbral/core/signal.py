"""
Decoded audio container.

The decoding and resampling layers hand the engine a channel-major float
buffer plus its sample rate; :class:`AudioSignal` holds that pair and
validates it once so the extractors can trust the shape.
"""

from dataclasses import dataclass

import librosa
import numpy as np

from timbral.core.framing import as_signal
from timbral.errors import InvalidParameterError, InvalidSignalError


def duration(samples, sample_rate: float) -> float:
    """
    Length of a sample buffer in seconds.

    The last axis is the sample axis.  Returns 0.0 when either the sample
    count or the sample rate is non-positive.
    """
    n_samples = np.shape(samples)[-1] if np.ndim(samples) else 0
    if n_samples <= 0 or sample_rate <= 0:
        return 0.0
    return n_samples / float(sample_rate)


@dataclass
class AudioSignal:
    """Channel-major samples, shape ``[channels, n_samples]``, with their rate."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        self.samples = as_signal(self.samples)
        if self.sample_rate <= 0:
            raise InvalidParameterError(
                f"sample_rate must be > 0, got {self.sample_rate}"
            )

    @classmethod
    def from_interleaved(
        cls,
        data,
        channels: int,
        sample_rate: int,
    ) -> "AudioSignal":
        """
        Build a signal from interleaved PCM (``s0c0, s0c1, ..., s1c0, ...``).

        Args:
            data: 1-D float vector of interleaved samples.
            channels: Number of interleaved channels.
            sample_rate: Sample rate in Hz.

        Raises:
            InvalidSignalError: If ``channels < 1`` or the vector length is
                not a multiple of ``channels``.
        """
        data = np.asarray(data)
        if channels < 1:
            raise InvalidSignalError(f"channels must be >= 1, got {channels}")
        if data.ndim != 1 or data.size % channels != 0:
            raise InvalidSignalError(
                f"interleaved data of shape {data.shape} does not split into "
                f"{channels} channel(s)"
            )
        return cls(samples=data.reshape(-1, channels).T, sample_rate=sample_rate)

    @property
    def channels(self) -> int:
        """Number of channels."""
        return self.samples.shape[0]

    @property
    def n_samples(self) -> int:
        """Samples per channel."""
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return duration(self.samples, self.sample_rate)

    def to_mono(self) -> "AudioSignal":
        """Average all channels into one; returns ``self`` when already mono."""
        if self.channels == 1:
            return self
        mono = librosa.to_mono(self.samples)
        return AudioSignal(samples=mono[np.newaxis, :], sample_rate=self.sample_rate)
