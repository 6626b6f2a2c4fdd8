"""Fixed-rate loudness curve."""

import numpy as np

from songpath.analysis.envelope import normalize_peak, short_time_rms
from songpath.analysis.models import EnergyPoint


def compute_energy_curve(samples: np.ndarray, sr: int, fps: int = 30) -> list[EnergyPoint]:
    """RMS per 1/fps hop over a 2-hop window, peak-normalized to 1.0.

    A silent buffer gives all-zero energy.
    """
    hop = max(1, int(sr / fps))
    raw = short_time_rms(samples, hop, hop * 2)
    energies = normalize_peak(raw)
    return [
        EnergyPoint(time=i * hop / sr, energy=float(e))
        for i, e in enumerate(energies)
    ]
