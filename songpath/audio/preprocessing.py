"""Audio preprocessing utilities."""

from __future__ import annotations

import librosa
import numpy as np


def to_mono(audio: np.ndarray) -> np.ndarray:
    """Average all channels of a ``(channels, samples)`` array.

    One-dimensional input is already mono and is returned as float32.
    """
    audio = np.asarray(audio, dtype=np.float32)
    if audio.ndim == 1:
        return audio
    if audio.shape[0] == 1:
        return audio[0]
    return librosa.to_mono(audio)


def preprocess(audio: np.ndarray) -> np.ndarray:
    """Prepare a decoded buffer for analysis (mono float32, finite values)."""
    audio = np.asarray(audio, dtype=np.float32)
    if not np.all(np.isfinite(audio)):
        audio = np.nan_to_num(audio, nan=0.0, posinf=0.0, neginf=0.0)
    return to_mono(audio)
