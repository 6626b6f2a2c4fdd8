"""Shared energy/envelope routines used by the analysis stages."""

from __future__ import annotations

import numpy as np


def rms(samples: np.ndarray) -> float:
    """Root mean square of a window (0.0 for an empty window)."""
    if len(samples) == 0:
        return 0.0
    samples = np.asarray(samples, dtype=np.float64)
    return float(np.sqrt(np.mean(samples * samples)))


def _squared_cumsum(samples: np.ndarray) -> np.ndarray:
    samples = np.asarray(samples, dtype=np.float64)
    return np.concatenate(([0.0], np.cumsum(samples * samples)))


def frame_energies(
    samples: np.ndarray,
    hop: int,
    window: int,
    n_frames: int | None = None,
) -> np.ndarray:
    """Summed squared amplitude of ``samples[i*hop : i*hop + window]``.

    Frames are truncated at the end of the buffer. By default one frame is
    produced for every ``i`` with ``i*hop < len(samples)``.
    """
    n = len(samples)
    hop = max(1, int(hop))
    if n_frames is None:
        n_frames = -(-n // hop)
    if n == 0 or n_frames <= 0:
        return np.zeros(0)

    cs = _squared_cumsum(samples)
    starts = np.minimum(np.arange(n_frames) * hop, n)
    ends = np.minimum(starts + int(window), n)
    # cumsum differences can go a hair below zero
    return np.maximum(cs[ends] - cs[starts], 0.0)


def short_time_rms(
    samples: np.ndarray,
    hop: int,
    window: int,
    n_frames: int | None = None,
) -> np.ndarray:
    """RMS per frame, using the same framing as :func:`frame_energies`."""
    n = len(samples)
    hop = max(1, int(hop))
    energies = frame_energies(samples, hop, window, n_frames)
    if len(energies) == 0:
        return energies
    starts = np.minimum(np.arange(len(energies)) * hop, n)
    lengths = np.minimum(starts + int(window), n) - starts
    out = np.zeros(len(energies))
    valid = lengths > 0
    out[valid] = np.sqrt(energies[valid] / lengths[valid])
    return out


def normalize_peak(values: np.ndarray) -> np.ndarray:
    """Scale so the maximum is 1.0. Silent input stays all zeros."""
    values = np.asarray(values, dtype=np.float64)
    if len(values) == 0:
        return values
    peak = float(np.max(values))
    if peak <= 0:
        return np.zeros_like(values)
    return values / peak


def moving_average(
    values: np.ndarray,
    before: int,
    after: int | None = None,
) -> np.ndarray:
    """Centered moving average over ``values[i - before : i + after + 1]``.

    The window is truncated at both edges, so the output has the same length
    as the input.
    """
    if after is None:
        after = before
    values = np.asarray(values, dtype=np.float64)
    n = len(values)
    if n == 0:
        return values

    cs = np.concatenate(([0.0], np.cumsum(values)))
    idx = np.arange(n)
    lo = np.maximum(idx - before, 0)
    hi = np.minimum(idx + after, n - 1) + 1
    return (cs[hi] - cs[lo]) / (hi - lo)
