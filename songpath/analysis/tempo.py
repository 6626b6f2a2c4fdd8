"""Autocorrelation tempo estimation."""

import numpy as np

from songpath.analysis.envelope import short_time_rms
from songpath.analysis.models import BeatEvent

# Cap on the number of difference samples summed per lag.
MAX_CORRELATION_SAMPLES = 2000


def fold_bpm(bpm: float, low: float = 80.0, high: float = 180.0) -> float:
    """Fold a tempo into [low, high] by doubling or halving.

    Values already in range are returned unchanged.
    """
    if bpm <= 0 or not np.isfinite(bpm):
        return bpm
    while bpm < low:
        bpm *= 2
    while bpm > high:
        bpm /= 2
    return bpm


def onset_strength(samples: np.ndarray, sr: int) -> tuple[np.ndarray, float]:
    """Half-wave-rectified difference of the 10 ms energy envelope.

    Returns (onset_strength, envelope_rate) where envelope_rate is the number
    of envelope samples per second.
    """
    hop = max(1, int(sr * 0.01))
    window = max(1, int(sr * 0.02))
    n_frames = len(samples) // hop
    envelope = short_time_rms(samples, hop, window, n_frames=n_frames)
    if len(envelope) < 2:
        return np.zeros(0), sr / hop
    return np.maximum(np.diff(envelope), 0.0), sr / hop


def estimate_bpm(
    samples: np.ndarray,
    sr: int,
    min_bpm: float = 60,
    max_bpm: float = 200,
) -> int:
    """Estimate a single global tempo.

    Autocorrelates the onset-strength signal over lags covering
    ``min_bpm``-``max_bpm`` and folds the winner into 80-180 BPM. Every
    buffer yields some peak, so this never fails; silent or very short
    input ends up at the shortest lag.
    """
    diff, env_sr = onset_strength(samples, sr)

    min_lag = max(1, int(env_sr * 60 / max_bpm))
    max_lag = int(env_sr * 60 / min_bpm)
    last_lag = min(max_lag, min(max_lag + 1, len(diff)) - 1)

    best_lag = min_lag
    best_corr = -np.inf
    for lag in range(min_lag, last_lag + 1):
        n = min(len(diff) - lag, MAX_CORRELATION_SAMPLES)
        corr = float(np.dot(diff[:n], diff[lag:lag + n]))
        if corr > best_corr:
            best_corr = corr
            best_lag = lag

    detected = env_sr * 60 / best_lag
    return int(round(fold_bpm(detected)))


def beat_regularity(beats: list[BeatEvent]) -> float:
    """How regular the beat timing is (0-1), from the coefficient of variation.

    Uses at most the first 100 beats. Fewer than 3 beats gives 0.5.
    """
    if len(beats) < 3:
        return 0.5

    times = np.array([b.time for b in beats[:100]])
    intervals = np.diff(times)
    mean = float(np.mean(intervals))
    if mean <= 0:
        return 0.0
    cv = float(np.std(intervals)) / mean
    return max(0.0, 1.0 - cv * 5)
