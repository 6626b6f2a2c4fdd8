"""Ring buffer and analyser tap for the live playback signal."""

from __future__ import annotations

from dataclasses import dataclass

import librosa
import numpy as np

_DEFAULT_SR = 22050
_MAX_DURATION_SECONDS = 10


@dataclass(frozen=True)
class AnalyserSnapshot:
    """One frame of the playback signal as the analyser sees it."""
    time_domain: np.ndarray  # fft_size samples
    frequency_db: np.ndarray  # fft_size // 2 magnitudes in dB


class StreamBuffer:
    """Fixed-capacity ring buffer holding the most recent playback audio.

    Parameters
    ----------
    sr:
        Sample rate in Hz. Defaults to 22050.
    max_duration:
        Maximum buffer duration in seconds. Defaults to 10.
    """

    def __init__(self, sr: int = _DEFAULT_SR, max_duration: float = _MAX_DURATION_SECONDS) -> None:
        self._sr = sr
        self._max_samples = max(1, int(sr * max_duration))
        self._buffer = np.zeros(self._max_samples, dtype=np.float32)
        self._write_pos = 0
        self._length = 0  # how many valid samples are in the buffer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, chunk: np.ndarray) -> None:
        """Append an audio chunk, overwriting the oldest samples when full."""
        chunk = np.asarray(chunk, dtype=np.float32).ravel()
        n = len(chunk)
        if n == 0:
            return

        if n >= self._max_samples:
            self._buffer[:] = chunk[-self._max_samples:]
            self._write_pos = 0
            self._length = self._max_samples
            return

        end = self._write_pos + n
        if end <= self._max_samples:
            self._buffer[self._write_pos:end] = chunk
        else:
            first = self._max_samples - self._write_pos
            self._buffer[self._write_pos:] = chunk[:first]
            self._buffer[:n - first] = chunk[first:]

        self._write_pos = end % self._max_samples
        self._length = min(self._length + n, self._max_samples)

    def latest(self, n_samples: int) -> np.ndarray:
        """The most recent ``n_samples`` samples, zero-padded at the front."""
        out = np.zeros(n_samples, dtype=np.float32)
        n = min(n_samples, self._length)
        if n == 0:
            return out

        start = (self._write_pos - n) % self._max_samples
        if start + n <= self._max_samples:
            out[n_samples - n:] = self._buffer[start:start + n]
        else:
            first = self._max_samples - start
            out[n_samples - n:n_samples - n + first] = self._buffer[start:]
            out[n_samples - n + first:] = self._buffer[:n - first]
        return out

    @property
    def duration(self) -> float:
        """Current buffer duration in seconds."""
        return self._length / self._sr

    @property
    def is_empty(self) -> bool:
        return self._length == 0

    def clear(self) -> None:
        """Reset the buffer."""
        self._buffer[:] = 0
        self._write_pos = 0
        self._length = 0


class AnalyserTap:
    """Frequency/time snapshots of a :class:`StreamBuffer`.

    Behaves like a browser analyser node: a Blackman-windowed FFT of the
    last ``fft_size`` samples, magnitudes smoothed across snapshots with
    ``smoothing`` and reported in decibels.
    """

    def __init__(self, buffer: StreamBuffer, fft_size: int = 2048, smoothing: float = 0.8) -> None:
        self.buffer = buffer
        self.fft_size = fft_size
        self.smoothing = smoothing
        self._window = np.blackman(fft_size)
        self._smoothed = np.zeros(fft_size // 2)

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def snapshot(self) -> AnalyserSnapshot | None:
        """Current frame, or ``None`` before any audio has arrived."""
        if self.buffer.is_empty:
            return None

        time_domain = self.buffer.latest(self.fft_size)
        spectrum = np.abs(np.fft.rfft(time_domain * self._window))[:self.frequency_bin_count]
        spectrum /= self.fft_size
        self._smoothed = self.smoothing * self._smoothed + (1 - self.smoothing) * spectrum
        frequency_db = librosa.amplitude_to_db(self._smoothed, ref=1.0, amin=1e-10, top_db=None)
        return AnalyserSnapshot(time_domain=time_domain, frequency_db=frequency_db)

    def reset(self) -> None:
        self._smoothed = np.zeros(self.frequency_bin_count)
