"""Band-split energy-flux onset detection."""

import numpy as np

from songpath.analysis.models import OnsetEvent

ONSET_WINDOW = 2048  # samples


def _band_bounds(window: int) -> tuple[int, int]:
    """Split points of three contiguous thirds of the analysis window."""
    first = int(np.ceil(window / 3))
    second = int(np.ceil(window * 2 / 3))
    return first, second


def band_energies(samples: np.ndarray, sr: int, window: int = ONSET_WINDOW) -> np.ndarray:
    """Energy of the low/mid/high thirds for every 10 ms frame.

    Returns an array of shape (n_frames, 3). Frames exist while the whole
    window fits strictly inside the buffer.
    """
    hop = max(1, int(sr * 0.01))
    n = len(samples)
    if n <= window:
        return np.zeros((0, 3))
    n_frames = (n - window - 1) // hop + 1

    x = np.asarray(samples, dtype=np.float64)
    cs = np.concatenate(([0.0], np.cumsum(x * x)))
    starts = np.arange(n_frames) * hop
    first, second = _band_bounds(window)
    edges = [0, first, second, window]
    out = np.empty((n_frames, 3))
    for b in range(3):
        out[:, b] = cs[starts + edges[b + 1]] - cs[starts + edges[b]]
    return np.maximum(out, 0.0)


def detect_onsets(
    samples: np.ndarray,
    sr: int,
    threshold: float = 0.02,
    min_gap: float = 0.05,
) -> list[OnsetEvent]:
    """Detect onsets from frame-to-frame increases in total energy.

    The dominant band is the strictly loudest third of the window ("mid" on
    ties). Onsets closer than ``min_gap`` seconds to the previously accepted
    onset are dropped.
    """
    hop = max(1, int(sr * 0.01))
    energies = band_energies(samples, sr)

    onsets: list[OnsetEvent] = []
    prev_total = 0.0
    for i, (low, mid, high) in enumerate(energies):
        total = low + mid + high
        flux = total - prev_total
        prev_total = total
        if flux <= threshold:
            continue

        band = "mid"
        if low > mid and low > high:
            band = "low"
        elif high > mid and high > low:
            band = "high"

        time = i * hop / sr
        if onsets and time - onsets[-1].time <= min_gap:
            continue
        onsets.append(OnsetEvent(
            time=time,
            strength=min(1.0, float(flux) * 10),
            frequency_band=band,
        ))

    return onsets
