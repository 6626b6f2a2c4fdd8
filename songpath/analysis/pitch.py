"""Coarse monophonic pitch contour via normalized autocorrelation.

This is deliberately simple: on polyphonic or noisy material it returns
low-confidence values that mean little musically, so consumers must gate on
``PitchPoint.confidence``.
"""

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from songpath.analysis.models import PitchPoint

MIN_FREQUENCY = 80.0  # Hz
MAX_FREQUENCY = 1000.0  # Hz


def _lag_correlations(frame: np.ndarray, lags: np.ndarray, max_samples: int) -> np.ndarray:
    """Normalized autocorrelation of ``frame`` at each lag.

    Each lag compares the first ``min(len(frame) - lag, max_samples)``
    samples with their lagged copy.
    """
    window = len(frame)
    if window - int(lags[-1]) >= max_samples:
        head = frame[:max_samples]
        lagged = sliding_window_view(frame, max_samples)[lags]
        corr = lagged @ head
        norm1 = float(head @ head)
        norm2 = np.einsum("ij,ij->i", lagged, lagged)
        denom = np.sqrt(norm1 * norm2)
        out = np.zeros(len(lags))
        valid = (norm1 > 0) & (norm2 > 0)
        out[valid] = corr[valid] / denom[valid]
        return out

    out = np.zeros(len(lags))
    for k, lag in enumerate(lags):
        n = min(window - lag, max_samples)
        a = frame[:n]
        b = frame[lag:lag + n]
        norm1 = float(a @ a)
        norm2 = float(b @ b)
        if norm1 > 0 and norm2 > 0:
            out[k] = float(a @ b) / np.sqrt(norm1 * norm2)
    return out


def estimate_frame_pitch(frame: np.ndarray, sr: int, max_samples: int = 512) -> tuple[float, float]:
    """Return (frequency, confidence) for one analysis window."""
    window = len(frame)
    min_period = max(1, int(sr / MAX_FREQUENCY))
    max_period = int(sr / MIN_FREQUENCY)
    upper = min(max_period, -(-window // 2))

    if upper <= min_period:
        return sr / min_period, 0.0

    lags = np.arange(min_period, upper)
    correlations = _lag_correlations(frame, lags, max_samples)
    best = int(np.argmax(correlations))
    best_corr = float(correlations[best])
    if best_corr <= -1.0:
        return sr / min_period, 0.0
    return sr / int(lags[best]), min(1.0, max(0.0, best_corr))


def extract_pitch_contour(
    samples: np.ndarray,
    sr: int,
    silence_threshold: float = 1e-4,
    max_corr_samples: int = 512,
    decimation: int = 5,
) -> list[PitchPoint]:
    """Pitch estimates on a 20 ms hop / 40 ms window grid.

    Only every ``decimation``-th frame is kept. Windows whose mean energy is
    below ``silence_threshold`` produce zero-frequency, zero-confidence
    points.
    """
    hop = max(1, int(sr * 0.02))
    window = max(1, int(sr * 0.04))
    x = np.asarray(samples, dtype=np.float64)
    n = len(x)

    contour = []
    i = 0
    while i * hop + window < n:
        start = i * hop
        time = start / sr
        frame = x[start:start + window]

        if float(frame @ frame) / window < silence_threshold:
            contour.append(PitchPoint(time=time, frequency=0.0, confidence=0.0))
        else:
            frequency, confidence = estimate_frame_pitch(frame, sr, max_corr_samples)
            contour.append(PitchPoint(time=time, frequency=frequency, confidence=confidence))
        i += decimation

    return contour
