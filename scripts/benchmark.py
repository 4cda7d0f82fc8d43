"""
Timbral feature-engine benchmark + consistency check.

Usage:
    python scripts/benchmark.py [--quick] [--channels N]

Modes:
    default  — 60 s of noise at 44 100 Hz, 3 warm-up + 5 timed runs per extractor
    --quick  — 10 s of noise at 22 050 Hz, 1 warm-up + 3 timed runs (CI-friendly)

Output: timing table + consistency report printed to stdout.

Consistency check: every extractor is called twice on the same buffer and
must return bit-identical output, and FeatureAnalyzer.analyze() must agree
exactly with the standalone extractors it shares an STFT between.
"""

import argparse
import os
import sys
import time
from typing import List

import numpy as np

# Make sure the installed package is on the path when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from timbral import AnalysisConfig, AudioSignal, FeatureAnalyzer
from timbral.core import features
from timbral.core.spectral import stft

_SEP = "─" * 72


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _timeit(fn, *args, warmup: int = 2, runs: int = 5, **kwargs) -> List[float]:
    """Run fn(*args, **kwargs), discard warmup iterations, return timed samples."""
    for _ in range(warmup):
        fn(*args, **kwargs)
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn(*args, **kwargs)
        times.append(time.perf_counter() - t0)
    return times


def _stats(times: List[float]) -> str:
    arr = np.array(times)
    return f"mean={arr.mean()*1000:.1f} ms  min={arr.min()*1000:.1f} ms  max={arr.max()*1000:.1f} ms"


# ---------------------------------------------------------------------------
# Consistency helpers
# ---------------------------------------------------------------------------

def _idempotence_report(y: np.ndarray, sr: int) -> dict:
    """Call each extractor twice and record whether the outputs match bit for bit."""
    extractors = {
        "rms": lambda: features.rms(y),
        "zero_crossing_rate": lambda: features.zero_crossing_rate(y),
        "spectral_centroid": lambda: features.spectral_centroid(y, sample_rate=sr),
        "spectral_bandwidth": lambda: features.spectral_bandwidth(y, sample_rate=sr),
        "spectral_rolloff": lambda: features.spectral_rolloff(y, sample_rate=sr),
        "spectral_flatness": lambda: features.spectral_flatness(y),
    }
    return {name: bool(np.array_equal(fn(), fn())) for name, fn in extractors.items()}


def _analyzer_report(signal: AudioSignal) -> dict:
    """Compare FeatureAnalyzer output with the standalone extractors."""
    result = FeatureAnalyzer().analyze(signal)
    y, sr = signal.samples, signal.sample_rate
    return {
        "spectral_centroid": bool(np.array_equal(
            result.spectral_centroid, features.spectral_centroid(y, sample_rate=sr)
        )),
        "spectral_rolloff": bool(np.array_equal(
            result.spectral_rolloff, features.spectral_rolloff(y, sample_rate=sr)
        )),
        "spectral_flatness": bool(np.array_equal(
            result.spectral_flatness, features.spectral_flatness(y)
        )),
    }


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Timbral feature-engine benchmark")
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Use 10 s at 22 050 Hz instead of 60 s at 44 100 Hz for fast CI runs",
    )
    parser.add_argument(
        "--channels",
        type=int,
        default=2,
        help="Number of channels in the synthetic signal (default: 2)",
    )
    args = parser.parse_args()

    if args.quick:
        SR, SECONDS = 22050, 10
        WARMUP, RUNS = 1, 3
        label = "10 s @ 22 050 Hz (quick mode)"
    else:
        SR, SECONDS = 44100, 60
        WARMUP, RUNS = 3, 5
        label = "60 s @ 44 100 Hz (full mode)"

    rng = np.random.default_rng(0)
    y = rng.uniform(-1.0, 1.0, size=(args.channels, SR * SECONDS)).astype(np.float32)
    signal = AudioSignal(samples=y, sample_rate=SR)
    cfg = AnalysisConfig()

    print(f"\nTimbral Feature Benchmark  —  {label}")
    print(f"Channels: {args.channels}  |  frame_size={cfg.frame_size}  hop_length={cfg.hop_length}")
    print(f"Warm-up runs: {WARMUP}  |  Timed runs: {RUNS}")

    results = {}

    # ------------------------------------------------------------------
    # 1. Transforms
    # ------------------------------------------------------------------
    _hdr("1. stft")
    t = _timeit(stft, y, cfg.frame_size, cfg.hop_length, warmup=WARMUP, runs=RUNS)
    results["stft"] = t
    print(f"  {_stats(t)}")

    # ------------------------------------------------------------------
    # 2. Time-domain features
    # ------------------------------------------------------------------
    _hdr("2. time-domain features")
    for name, fn in (("rms", features.rms), ("zero_crossing_rate", features.zero_crossing_rate)):
        t = _timeit(fn, y, warmup=WARMUP, runs=RUNS)
        results[name] = t
        print(f"  {name:<20} {_stats(t)}")

    # ------------------------------------------------------------------
    # 3. Spectral features (each computes its own STFT)
    # ------------------------------------------------------------------
    _hdr("3. spectral features")
    for name, fn, kwargs in (
        ("spectral_centroid", features.spectral_centroid, {"sample_rate": SR}),
        ("spectral_bandwidth", features.spectral_bandwidth, {"sample_rate": SR}),
        ("spectral_rolloff", features.spectral_rolloff, {"sample_rate": SR}),
        ("spectral_flatness", features.spectral_flatness, {}),
    ):
        t = _timeit(fn, y, warmup=WARMUP, runs=RUNS, **kwargs)
        results[name] = t
        print(f"  {name:<20} {_stats(t)}")

    # ------------------------------------------------------------------
    # 4. Full analysis (shared STFT)
    # ------------------------------------------------------------------
    _hdr("4. FeatureAnalyzer.analyze (shared STFT)")
    analyzer = FeatureAnalyzer(cfg)
    t = _timeit(analyzer.analyze, signal, warmup=WARMUP, runs=RUNS)
    results["analyze"] = t
    separate = sum(np.mean(results[name]) for name in results if name not in ("stft", "analyze"))
    print(f"  {_stats(t)}")
    print(f"  Sum of standalone extractors: {separate*1000:.1f} ms")
    print(f"  Speedup: {separate / np.mean(t):.1f}×")

    # ------------------------------------------------------------------
    # Consistency validation
    # ------------------------------------------------------------------
    _hdr("Consistency validation (2 s excerpt)")
    excerpt = y[:, : SR * 2]
    idem = _idempotence_report(excerpt, SR)
    agree = _analyzer_report(AudioSignal(samples=excerpt, sample_rate=SR))

    print(f"  {'Check':<40} status")
    print(f"  {'-'*40} ------")
    for name, ok in idem.items():
        print(f"  {'idempotent: ' + name:<40} {'PASS' if ok else 'FAIL'}")
    for name, ok in agree.items():
        print(f"  {'analyzer == standalone: ' + name:<40} {'PASS' if ok else 'FAIL'}")

    if all(idem.values()) and all(agree.values()):
        print("\n  All consistency checks PASSED.")
    else:
        print("\n  !! CONSISTENCY FAILURES DETECTED !!")
        sys.exit(1)

    # ------------------------------------------------------------------
    # Summary table
    # ------------------------------------------------------------------
    _hdr("Summary")
    name_w = max(len(name) for name in results) + 2
    print(f"  {'Function':<{name_w}} Time (ms, mean)")
    print(f"  {'-'*name_w} ---------------")
    for name, times in results.items():
        print(f"  {name:<{name_w}} {np.mean(times)*1000:.1f}")

    print(f"\n{_SEP}\n")


if __name__ == "__main__":
    main()
