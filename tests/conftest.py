"""Shared test fixtures for song analysis tests."""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from songpath.main import app

SR = 22050


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


def generate_click_track(
    bpm: float,
    duration_seconds: float = 10.0,
    sr: int = SR,
    beats_per_bar: int = 4,
    accent_ratio: float = 2.0,
) -> np.ndarray:
    """Generate a synthetic click track with accented downbeats.

    Returns mono audio at the given sample rate.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)

    beat_interval = 60.0 / bpm  # seconds per beat
    click_samples = int(0.02 * sr)  # 20ms click

    # Create click sound (short sine burst with envelope)
    t_click = np.arange(click_samples) / sr
    click = np.sin(2 * np.pi * 1000 * t_click) * np.exp(-t_click * 100)

    beat = 0
    time = 0.0
    while time < duration_seconds:
        sample_pos = int(time * sr)
        amplitude = accent_ratio if beat % beats_per_bar == 0 else 1.0

        end = min(sample_pos + click_samples, n_samples)
        length = end - sample_pos
        if length > 0:
            audio[sample_pos:end] += click[:length] * amplitude

        time += beat_interval
        beat += 1

    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak

    return audio


def generate_sine(
    frequency: float = 440.0,
    duration_seconds: float = 5.0,
    sr: int = SR,
    amplitude: float = 0.5,
) -> np.ndarray:
    """A single pure tone with no rhythm."""
    t = np.arange(int(duration_seconds * sr)) / sr
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def generate_silence(duration_seconds: float = 10.0, sr: int = SR) -> np.ndarray:
    return np.zeros(int(duration_seconds * sr), dtype=np.float32)


@pytest.fixture
def click_120():
    """Click track at 120 BPM."""
    return generate_click_track(bpm=120, duration_seconds=10)


@pytest.fixture
def sine_440():
    """Five seconds of A4."""
    return generate_sine(440.0, duration_seconds=5)


@pytest.fixture
def silence():
    return generate_silence(10)
