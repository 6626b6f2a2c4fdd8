"""Tests for ideal path generation."""

import pytest

from songpath.analysis.models import EnergyPoint, Key, PathPoint, PitchPoint, SongMap, Vec3
from songpath.game import generate_path
from songpath.game.path_generator import (
    DEFAULT_PITCH,
    generate_ideal_path,
    interpolate_energy,
    interpolate_pitch,
    pitch_range,
    smooth_path,
)


def make_song_map(duration=10.0, danceability=0.0, pitch_contour=(), energy_curve=()):
    return SongMap(
        bpm=120,
        key=Key(name="C", scale="major"),
        danceability=danceability,
        duration=duration,
        pitch_contour=tuple(pitch_contour),
        energy_curve=tuple(energy_curve),
    )


def contour(points):
    return [PitchPoint(time=t, frequency=f, confidence=c) for t, f, c in points]


def interp_pitch(time, points):
    c = contour(points)
    return interpolate_pitch(time, c, [p.time for p in c])


# --- interpolation ----------------------------------------------------------

def test_interpolate_pitch_weights_by_confidence():
    points = [(0.0, 100.0, 1.0), (1.0, 300.0, 0.0)]
    assert interp_pitch(0.5, points) == pytest.approx(100.0)


def test_interpolate_pitch_linear_with_equal_confidence():
    points = [(0.0, 100.0, 1.0), (1.0, 300.0, 1.0)]
    assert interp_pitch(0.25, points) == pytest.approx(150.0)


def test_interpolate_pitch_low_confidence_falls_back():
    points = [(0.0, 100.0, 0.005), (1.0, 300.0, 0.004)]
    assert interp_pitch(0.5, points) == DEFAULT_PITCH


def test_interpolate_pitch_empty_and_single():
    assert interp_pitch(1.0, []) == DEFAULT_PITCH
    assert interp_pitch(3.0, [(0.0, 320.0, 0.9)]) == 320.0
    assert interp_pitch(3.0, [(0.0, 320.0, 0.005)]) == DEFAULT_PITCH


def test_interpolate_pitch_outside_range_is_clamped():
    points = [(1.0, 100.0, 1.0), (2.0, 200.0, 1.0), (3.0, 300.0, 1.0)]
    assert interp_pitch(0.0, points) == pytest.approx(100.0)
    assert interp_pitch(10.0, points) == pytest.approx(300.0)
    assert interp_pitch(2.5, points) == pytest.approx(250.0)


def test_interpolate_energy():
    curve = [EnergyPoint(time=0.0, energy=0.0), EnergyPoint(time=1.0, energy=1.0)]
    times = [p.time for p in curve]
    assert interpolate_energy(0.3, curve, times) == pytest.approx(0.3)
    assert interpolate_energy(-1.0, curve, times) == pytest.approx(0.0)
    assert interpolate_energy(5.0, curve, times) == pytest.approx(1.0)
    assert interpolate_energy(0.3, [], []) == 0.5


# --- pitch range ------------------------------------------------------------

def test_pitch_range_ignores_unreliable_points():
    points = contour([
        (0.0, 200.0, 0.9),
        (0.1, 400.0, 0.8),
        (0.2, 900.0, 0.2),  # low confidence
        (0.3, 40.0, 1.0),  # below 50 Hz
    ])
    assert pitch_range(points) == (200.0, 400.0)


def test_pitch_range_fallback_and_expansion():
    assert pitch_range([]) == (100.0, 500.0)
    assert pitch_range(contour([(0.0, 300.0, 0.9)])) == (250.0, 350.0)


# --- smoothing --------------------------------------------------------------

def test_smooth_path_keeps_times_and_linear_motion():
    points = [PathPoint(time=i / 15, position=Vec3(0.0, 1.0, -i * 2.0)) for i in range(60)]
    smoothed = smooth_path(points, 25)

    assert [p.time for p in smoothed] == [p.time for p in points]
    assert smoothed[30].position.z == pytest.approx(-60.0)
    assert all(p.position.y == pytest.approx(1.0) for p in smoothed)


def test_smooth_path_empty():
    assert smooth_path([], 25) == []


# --- full path --------------------------------------------------------------

def test_path_sample_count_and_forward_motion():
    path = generate_ideal_path(make_song_map(duration=10.0))

    assert len(path) == 150
    assert path[0].time == 0.0
    assert path[-1].time == pytest.approx(149 / 15)
    zs = [p.position.z for p in path]
    assert all(b < a for a, b in zip(zs, zs[1:]))
    # linear motion survives the centered smoothing away from the edges
    assert path[75].position.z == pytest.approx(-5.0 * 8.0)


def test_path_defaults_without_pitch_or_energy():
    path = generate_ideal_path(make_song_map(duration=5.0, danceability=0.0))

    # 250 Hz inside the 100-500 Hz fallback range maps to -0.25
    for p in path:
        assert p.position.x == pytest.approx(-0.25 * 8.0 * 0.5)
        assert p.position.y == pytest.approx(2.0 + 0.5 * 4.0)


def test_path_flat_pitch_stays_centered():
    points = contour([(i * 0.1, 220.0, 1.0) for i in range(100)])
    path = generate_ideal_path(make_song_map(pitch_contour=points))
    assert all(p.position.x == pytest.approx(0.0, abs=1e-9) for p in path)


def test_path_follows_pitch_and_energy():
    points = contour([(i * 0.1, 200.0 if i < 50 else 400.0, 1.0) for i in range(100)])
    curve = [EnergyPoint(time=i / 30, energy=0.0 if i < 150 else 1.0) for i in range(300)]
    path = generate_ideal_path(make_song_map(danceability=1.0, pitch_contour=points, energy_curve=curve))

    early = path[30]  # t = 2 s
    late = path[120]  # t = 8 s
    assert early.position.x == pytest.approx(-8.0)
    assert late.position.x == pytest.approx(8.0)
    assert early.position.y == pytest.approx(2.0)
    assert late.position.y == pytest.approx(6.0)


def test_path_lateral_bounds():
    points = contour([(i * 0.1, 100.0 + (i % 7) * 60.0, 1.0) for i in range(100)])
    for danceability in (0.0, 0.5, 1.0):
        path = generate_ideal_path(make_song_map(danceability=danceability, pitch_contour=points))
        limit = 8.0 * (0.5 + danceability * 0.5)
        assert all(abs(p.position.x) <= limit + 1e-9 for p in path)


def test_path_zero_duration():
    assert generate_ideal_path(make_song_map(duration=0.0)) == []


def test_path_custom_rate():
    path = generate_ideal_path(make_song_map(duration=2.0), sample_rate=30, forward_speed=4.0)
    assert len(path) == 60
    assert path[30].position.z == pytest.approx(-4.0)


def test_generate_path_alias():
    song_map = make_song_map(duration=3.0)
    assert generate_path(song_map) == generate_ideal_path(song_map)


def test_attach_path_to_song_map():
    song_map = make_song_map(duration=3.0)
    with_path = song_map.with_ideal_path(generate_ideal_path(song_map))
    assert len(with_path.ideal_path) == 45
    assert song_map.ideal_path == ()
    assert isinstance(with_path.ideal_path, tuple)
