"""Audio file loading utilities."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Union

import librosa
import numpy as np


def load_audio(
    file_path_or_buffer: Union[str, Path, BytesIO],
    sr: int | None = 22050,
    mono: bool = True,
) -> tuple[np.ndarray, int]:
    """Decode an audio file or buffer.

    Parameters
    ----------
    file_path_or_buffer:
        Path to an audio file or a BytesIO buffer containing audio data.
    sr:
        Target sample rate. Defaults to 22050 Hz; ``None`` keeps the
        file's native rate.
    mono:
        Mix down to a single channel. With ``False`` a stereo file comes
        back as a ``(channels, samples)`` array.

    Returns
    -------
    tuple[np.ndarray, int]
        A tuple of (audio_array, sample_rate).

    Decoder errors are not caught here; callers decide how to report them.
    """
    audio, sample_rate = librosa.load(file_path_or_buffer, sr=sr, mono=mono)
    return audio, int(sample_rate)
