"""
Feature analysis facade.

Runs the full extractor set over an :class:`AudioSignal` with one explicit,
immutable :class:`AnalysisConfig`.  The STFT is computed once per call and
its magnitude shared by every spectral extractor.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from timbral.core import features
from timbral.core.framing import DEFAULT_FRAME_SIZE, DEFAULT_HOP_LENGTH
from timbral.core.signal import AudioSignal
from timbral.core.spectral import frames_to_time, stft
from timbral.errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """Frame grid and extractor tuning constants."""

    frame_size: int = DEFAULT_FRAME_SIZE
    hop_length: int = DEFAULT_HOP_LENGTH
    rolloff_threshold: float = features.DEFAULT_ROLLOFF_THRESHOLD
    bandwidth_power: float = features.DEFAULT_BANDWIDTH_POWER
    flatness_amin: float = features.DEFAULT_FLATNESS_AMIN
    flatness_power: float = features.DEFAULT_FLATNESS_POWER

    def validate(self) -> "AnalysisConfig":
        """
        Check every field and return ``self``.

        Raises:
            InvalidParameterError: On the first out-of-range field.
        """
        if self.hop_length < 1:
            raise InvalidParameterError(f"hop_length must be >= 1, got {self.hop_length}")
        if self.frame_size < 2:
            raise InvalidParameterError(f"frame_size must be >= 2, got {self.frame_size}")
        if not 0.0 < self.rolloff_threshold <= 1.0:
            raise InvalidParameterError(
                f"rolloff_threshold must be in (0, 1], got {self.rolloff_threshold}"
            )
        if self.bandwidth_power <= 0:
            raise InvalidParameterError(
                f"bandwidth_power must be > 0, got {self.bandwidth_power}"
            )
        if self.flatness_amin <= 0:
            raise InvalidParameterError(f"flatness_amin must be > 0, got {self.flatness_amin}")
        if self.flatness_power <= 0:
            raise InvalidParameterError(
                f"flatness_power must be > 0, got {self.flatness_power}"
            )
        return self


@dataclass
class ExtractedFeatures:
    """Complete feature set for one signal."""

    # Framed features, shape (channels, n_frames)
    rms: np.ndarray
    zero_crossing_rate: np.ndarray
    spectral_centroid: np.ndarray
    spectral_bandwidth: np.ndarray
    spectral_rolloff: np.ndarray
    spectral_flatness: np.ndarray

    # Whole-signal features, shape (channels,)
    rms_overall: np.ndarray
    zero_crossing_rate_overall: np.ndarray

    n_frames: int
    frame_size: int
    hop_length: int
    sample_rate: int
    frame_times: np.ndarray = field(default_factory=lambda: np.array([]))

    def __post_init__(self):
        if len(self.frame_times) == 0:
            self.frame_times = frames_to_time(
                self.n_frames,
                hop_length=self.hop_length,
                sample_rate=self.sample_rate,
            )

    @property
    def channels(self) -> int:
        return self.rms.shape[0]


class FeatureAnalyzer:
    """
    Extracts every frame-level feature from a decoded signal.

    Holds nothing but its configuration, so one instance can be shared
    between threads.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize the analyzer.

        Args:
            config: Frame grid and tuning constants.  Defaults to
                ``AnalysisConfig()``.
        """
        self.config = (config or AnalysisConfig()).validate()

    def extract_energy(self, signal: AudioSignal) -> tuple[np.ndarray, np.ndarray]:
        """Framed RMS and zero-crossing rate."""
        cfg = self.config
        rms = features.rms(signal.samples, cfg.frame_size, cfg.hop_length)
        zcr = features.zero_crossing_rate(signal.samples, cfg.frame_size, cfg.hop_length)
        return rms, zcr

    def extract_spectral(self, signal: AudioSignal) -> dict[str, np.ndarray]:
        """
        Centroid, bandwidth, rolloff and flatness from a single STFT.

        Returns:
            Mapping of feature name to ``[C, T]`` array.
        """
        cfg = self.config
        sr = signal.sample_rate
        magnitude = np.abs(stft(signal.samples, cfg.frame_size, cfg.hop_length))

        return {
            "spectral_centroid": features.spectral_centroid(
                frame_size=cfg.frame_size,
                sample_rate=sr,
                magnitude=magnitude,
            ),
            "spectral_bandwidth": features.spectral_bandwidth(
                frame_size=cfg.frame_size,
                sample_rate=sr,
                power=cfg.bandwidth_power,
                magnitude=magnitude,
            ),
            "spectral_rolloff": features.spectral_rolloff(
                frame_size=cfg.frame_size,
                sample_rate=sr,
                threshold=cfg.rolloff_threshold,
                magnitude=magnitude,
            ),
            "spectral_flatness": features.spectral_flatness(
                frame_size=cfg.frame_size,
                amin=cfg.flatness_amin,
                power=cfg.flatness_power,
                magnitude=magnitude,
            ),
        }

    def analyze(self, signal: AudioSignal) -> ExtractedFeatures:
        """
        Perform complete feature extraction.

        Args:
            signal: Decoded, channel-major audio.

        Returns:
            ExtractedFeatures with every framed and whole-signal feature.
        """
        cfg = self.config
        logger.debug(
            "Analyzing %d channel(s) x %d sample(s) @ %d Hz (frame=%d, hop=%d)",
            signal.channels,
            signal.n_samples,
            signal.sample_rate,
            cfg.frame_size,
            cfg.hop_length,
        )

        rms, zcr = self.extract_energy(signal)
        spectral = self.extract_spectral(signal)

        return ExtractedFeatures(
            rms=rms,
            zero_crossing_rate=zcr,
            rms_overall=features.rms_overall(signal.samples),
            zero_crossing_rate_overall=features.zero_crossing_rate_overall(signal.samples),
            n_frames=rms.shape[1],
            frame_size=cfg.frame_size,
            hop_length=cfg.hop_length,
            sample_rate=signal.sample_rate,
            **spectral,
        )
