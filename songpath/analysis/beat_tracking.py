"""Fixed-tempo beat grid anchored to the first strong onset."""

import logging

import numpy as np

from songpath.analysis.envelope import frame_energies
from songpath.analysis.models import BeatEvent

logger = logging.getLogger(__name__)

ANCHOR_SEARCH_SECONDS = 2.0
STRENGTH_WINDOW = 1024  # samples
DOWNBEAT_BONUS = 0.3
BEATS_PER_BAR = 4


def find_grid_anchor(samples: np.ndarray, sr: int) -> float:
    """Time of the loudest 10 ms frame in the first two seconds.

    Frame 0 is skipped so a click at the very start of the buffer does not
    pin the grid to zero. Silent input anchors at 0.
    """
    hop = max(1, int(sr * 0.01))
    search_end = min(int(ANCHOR_SEARCH_SECONDS * sr / hop), len(samples) // hop)
    if search_end <= 1:
        return 0.0

    energies = frame_energies(samples, hop, hop, n_frames=search_end)[1:]
    if len(energies) == 0 or float(np.max(energies)) <= 0:
        return 0.0
    # argmax returns the first frame on ties
    return (int(np.argmax(energies)) + 1) * hop / sr


def beat_strength(samples: np.ndarray, sr: int, time: float) -> float:
    """Local loudness of the 1024 samples starting at ``time`` (0-1)."""
    start = int(time * sr)
    window = np.asarray(samples[start:start + STRENGTH_WINDOW], dtype=np.float64)
    energy = float(np.sum(window * window))
    return min(1.0, float(np.sqrt(energy / STRENGTH_WINDOW)) * 5)


def generate_beat_grid(
    samples: np.ndarray,
    sr: int,
    bpm: float,
    duration: float,
) -> list[BeatEvent]:
    """Lay a constant-interval beat grid over the whole track.

    Every 4th beat (0-indexed) is a downbeat and gets a strength bonus.
    """
    if bpm <= 0:
        return []

    interval = 60.0 / bpm
    anchor = find_grid_anchor(samples, sr)

    beats = []
    index = 0
    time = anchor
    while time < duration:
        is_downbeat = index % BEATS_PER_BAR == 0
        strength = beat_strength(samples, sr, time)
        if is_downbeat:
            strength = min(1.0, strength + DOWNBEAT_BONUS)
        beats.append(BeatEvent(time=time, strength=strength, is_downbeat=is_downbeat))
        index += 1
        time = anchor + index * interval

    logger.debug(f"Beat grid: {len(beats)} beats from {anchor:.2f}s at {bpm} BPM")
    return beats
