"""Ideal path generation from a SongMap.

Pitch drives the lateral (x) axis, energy drives height (y) and the path
moves forward along -z at a constant speed. The speed must equal the orb's
forward speed or sync scoring drifts over the song.
"""

from __future__ import annotations

import logging
from bisect import bisect_right

import numpy as np

from songpath.analysis.envelope import moving_average
from songpath.analysis.models import EnergyPoint, PathPoint, PitchPoint, SongMap, Vec3
from songpath.game.mathutil import clamp, map_range

logger = logging.getLogger(__name__)

DEFAULT_PITCH = 250.0  # Hz, used when the contour has no usable pitch
DEFAULT_ENERGY = 0.5
MIN_PITCH_CONFIDENCE = 0.3
MIN_PITCH_FREQUENCY = 50.0
FALLBACK_PITCH_RANGE = (100.0, 500.0)
RANGE_EXPANSION = 50.0  # Hz each side when the pitch range collapses


def _bracket(times: list[float], time: float) -> tuple[int, int]:
    """Indices of the samples surrounding ``time`` (binary search)."""
    n = len(times)
    if n == 1:
        return 0, 0
    lo = int(clamp(bisect_right(times, time) - 1, 0, n - 2))
    return lo, lo + 1


def interpolate_pitch(time: float, contour: list[PitchPoint], times: list[float]) -> float:
    """Confidence-weighted pitch at ``time``.

    Falls back to DEFAULT_PITCH when the bracketing points carry almost no
    confidence.
    """
    if not contour:
        return DEFAULT_PITCH

    lo, hi = _bracket(times, time)
    p0, p1 = contour[lo], contour[hi]
    if p0.time == p1.time:
        return p0.frequency if p0.confidence >= 0.01 else DEFAULT_PITCH

    t = clamp((time - p0.time) / (p1.time - p0.time), 0.0, 1.0)
    w0, w1 = p0.confidence, p1.confidence
    if w0 + w1 < 0.01:
        return DEFAULT_PITCH

    denom = w0 * (1 - t) + w1 * t
    if denom < 0.001:
        return DEFAULT_PITCH
    return (p0.frequency * w0 * (1 - t) + p1.frequency * w1 * t) / denom


def interpolate_energy(time: float, curve: list[EnergyPoint], times: list[float]) -> float:
    if not curve:
        return DEFAULT_ENERGY

    lo, hi = _bracket(times, time)
    p0, p1 = curve[lo], curve[hi]
    if p0.time == p1.time:
        return p0.energy

    t = clamp((time - p0.time) / (p1.time - p0.time), 0.0, 1.0)
    return p0.energy * (1 - t) + p1.energy * t


def pitch_range(contour: list[PitchPoint]) -> tuple[float, float]:
    """Observed range of confident pitches, widened if it collapses."""
    valid = [
        p.frequency for p in contour
        if p.confidence > MIN_PITCH_CONFIDENCE and p.frequency > MIN_PITCH_FREQUENCY
    ]
    if valid:
        low, high = min(valid), max(valid)
    else:
        low, high = FALLBACK_PITCH_RANGE
    if high - low < 1:
        low -= RANGE_EXPANSION
        high += RANGE_EXPANSION
    return low, high


def smooth_path(points: list[PathPoint], window: int) -> list[PathPoint]:
    """Centered moving average of positions; times are kept as they are."""
    if not points:
        return []
    half = window // 2
    xs = moving_average(np.array([p.position.x for p in points]), half)
    ys = moving_average(np.array([p.position.y for p in points]), half)
    zs = moving_average(np.array([p.position.z for p in points]), half)
    return [
        PathPoint(time=p.time, position=Vec3(float(x), float(y), float(z)))
        for p, x, y, z in zip(points, xs, ys, zs)
    ]


def generate_ideal_path(
    song_map: SongMap,
    sample_rate: int = 15,
    forward_speed: float = 8.0,
    lateral_range: float = 8.0,
    vertical_range: float = 4.0,
    vertical_base: float = 2.0,
    smoothing_window: int = 25,
) -> list[PathPoint]:
    """Sample the song into a smooth 3D path, ``sample_rate`` points per second."""
    duration = song_map.duration
    contour = list(song_map.pitch_contour)
    curve = list(song_map.energy_curve)
    pitch_times = [p.time for p in contour]
    energy_times = [p.time for p in curve]

    low, high = pitch_range(contour)
    # more danceable songs get wider lateral movement
    movement_scale = 0.5 + song_map.danceability * 0.5

    n_points = int(np.floor(duration * sample_rate)) if duration > 0 else 0
    raw = []
    for i in range(n_points):
        time = i / sample_rate

        pitch = interpolate_pitch(time, contour, pitch_times)
        normalized = map_range(clamp(pitch, low, high), low, high, -1.0, 1.0)
        x = normalized * lateral_range * movement_scale

        energy = interpolate_energy(time, curve, energy_times)
        y = vertical_base + energy * vertical_range

        z = -time * forward_speed
        raw.append(PathPoint(time=time, position=Vec3(x, y, z)))

    path = smooth_path(raw, smoothing_window)
    path = smooth_path(path, smoothing_window // 2)
    logger.debug(f"Ideal path: {len(path)} points over {duration:.1f}s")
    return path


generate_path = generate_ideal_path
