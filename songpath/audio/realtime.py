"""Per-frame features of the live playback signal."""

from __future__ import annotations

from typing import Protocol

import librosa
import numpy as np

from songpath.analysis.envelope import rms
from songpath.analysis.models import RealtimeFeatures
from songpath.audio.stream import AnalyserSnapshot


class SnapshotSource(Protocol):
    """Anything that can hand out the current analyser frame."""

    def snapshot(self) -> AnalyserSnapshot | None: ...


def zero_crossing_rate(samples: np.ndarray) -> float:
    """Fraction of adjacent sample pairs that change sign (>= 0 counts as positive)."""
    if len(samples) < 2:
        return 0.0
    positive = samples >= 0
    return float(np.count_nonzero(positive[1:] != positive[:-1])) / (len(samples) - 1)


class RealtimeFeatureExtractor:
    """Computes RealtimeFeatures once per rendered frame.

    The previous frame's spectrum is the only state carried between calls,
    so each instance must be driven by a single playback session.
    """

    def __init__(self, source: SnapshotSource | None = None, num_bands: int = 6) -> None:
        self.source = source
        self.num_bands = num_bands
        self._prev_magnitudes: np.ndarray | None = None

    def reset(self) -> None:
        """Forget the previous spectrum (start of a new playback session)."""
        self._prev_magnitudes = None

    def extract(self) -> RealtimeFeatures:
        if self.source is None:
            return RealtimeFeatures.zero(self.num_bands)
        snapshot = self.source.snapshot()
        if snapshot is None:
            return RealtimeFeatures.zero(self.num_bands)
        return self.extract_from(snapshot)

    extract_realtime_features = extract

    def extract_from(self, snapshot: AnalyserSnapshot) -> RealtimeFeatures:
        """Features of an explicit snapshot (updates the flux state)."""
        samples = np.asarray(snapshot.time_domain, dtype=np.float64)
        level = rms(samples)
        zcr = zero_crossing_rate(samples)

        magnitudes = librosa.db_to_amplitude(np.asarray(snapshot.frequency_db, dtype=np.float64))
        n_bins = len(magnitudes)

        total = float(np.sum(magnitudes))
        if total > 0 and n_bins:
            centroid = float(np.arange(n_bins) @ magnitudes) / total / n_bins
        else:
            centroid = 0.0

        flux = 0.0
        prev = self._prev_magnitudes
        if prev is not None and len(prev) == n_bins:
            flux = float(np.sum(np.maximum(magnitudes - prev, 0.0)))
        self._prev_magnitudes = magnitudes

        return RealtimeFeatures(
            rms=level,
            spectral_centroid=centroid,
            spectral_flux=flux,
            zcr=zcr,
            band_energies=self._band_energies(magnitudes),
        )

    def _band_energies(self, magnitudes: np.ndarray) -> tuple[float, ...]:
        band_size = len(magnitudes) // self.num_bands if self.num_bands else 0
        if band_size == 0:
            return (0.0,) * self.num_bands
        usable = magnitudes[:band_size * self.num_bands]
        return tuple(float(v) for v in usable.reshape(self.num_bands, band_size).sum(axis=1))
