"""Frame analysis and spectral feature engine for decoded audio."""

from timbral.core.analyzer import AnalysisConfig, ExtractedFeatures, FeatureAnalyzer
from timbral.core.features import (
    rms,
    rms_overall,
    spectral_bandwidth,
    spectral_bandwidth_overall,
    spectral_centroid,
    spectral_centroid_overall,
    spectral_flatness,
    spectral_flatness_overall,
    spectral_rolloff,
    spectral_rolloff_overall,
    zero_crossing_rate,
    zero_crossing_rate_overall,
)
from timbral.core.framing import (
    build_ranges,
    frame,
    frame_matrix,
    pad_amount,
    pad_right,
    total_frames,
)
from timbral.core.signal import AudioSignal, duration
from timbral.core.spectral import (
    fft,
    frames_to_time,
    frequency_bins,
    magnitude_spectrum,
    stft,
)
from timbral.core.window import hann_window
from timbral.errors import InvalidParameterError, InvalidSignalError, TimbralError

__version__ = "0.1.0"
__all__ = [
    "AnalysisConfig",
    "AudioSignal",
    "ExtractedFeatures",
    "FeatureAnalyzer",
    "InvalidParameterError",
    "InvalidSignalError",
    "TimbralError",
    "build_ranges",
    "duration",
    "fft",
    "frame",
    "frame_matrix",
    "frames_to_time",
    "frequency_bins",
    "hann_window",
    "magnitude_spectrum",
    "pad_amount",
    "pad_right",
    "rms",
    "rms_overall",
    "spectral_bandwidth",
    "spectral_bandwidth_overall",
    "spectral_centroid",
    "spectral_centroid_overall",
    "spectral_flatness",
    "spectral_flatness_overall",
    "spectral_rolloff",
    "spectral_rolloff_overall",
    "stft",
    "total_frames",
    "zero_crossing_rate",
    "zero_crossing_rate_overall",
]
