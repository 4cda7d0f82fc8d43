"""Core frame analysis and spectral feature modules."""

from timbral.core.analyzer import AnalysisConfig, ExtractedFeatures, FeatureAnalyzer
from timbral.core.signal import AudioSignal

__all__ = ["AnalysisConfig", "AudioSignal", "ExtractedFeatures", "FeatureAnalyzer"]
