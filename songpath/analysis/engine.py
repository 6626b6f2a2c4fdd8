"""Analysis orchestrator - assembles every stage into a SongMap."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

import numpy as np

from songpath.analysis.beat_tracking import generate_beat_grid
from songpath.analysis.energy import compute_energy_curve
from songpath.analysis.key import detect_key
from songpath.analysis.models import SongMap
from songpath.analysis.onset import detect_onsets
from songpath.analysis.pitch import extract_pitch_contour
from songpath.analysis.sections import segment_sections
from songpath.analysis.tempo import beat_regularity, estimate_bpm
from songpath.audio.loader import load_audio
from songpath.audio.preprocessing import preprocess
from songpath.config import settings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


def compute_danceability(mean_energy: float, regularity: float) -> float:
    """Blend of loudness and beat regularity, clamped to [0, 1]."""
    return float(min(1.0, max(0.0, mean_energy * 0.5 + regularity * 0.5)))


class AnalysisEngine:
    """Orchestrates the full analysis pipeline.

    Every stage is a pure function of the sample buffer, so one engine can
    be shared and several engines can run side by side.
    """

    def __init__(self, executor: ThreadPoolExecutor | None = None):
        self._executor = executor
        self._owns_executor = executor is None

    def analyze_file(self, file_path: str, on_progress: ProgressCallback | None = None) -> SongMap:
        """Decode and analyze an audio file. Decoder errors propagate."""
        audio, sr = load_audio(file_path, sr=settings.sample_rate, mono=False)
        return self.analyze_audio(audio, sr, on_progress=on_progress)

    def analyze_audio(
        self,
        audio: np.ndarray,
        sr: int = 22050,
        on_progress: ProgressCallback | None = None,
    ) -> SongMap:
        """Analyze a decoded mono or ``(channels, samples)`` buffer.

        ``on_progress`` is called on this thread with increasing values in
        [0, 1] after each stage.
        """
        def report(progress: float) -> None:
            if on_progress is not None:
                on_progress(progress)

        samples = preprocess(audio)
        duration = len(samples) / sr
        logger.info(f"Analyzing {duration:.1f}s of audio at {sr}Hz")
        report(0.05)

        logger.info("Step 1: Tempo estimation")
        bpm = estimate_bpm(samples, sr)
        logger.info(f"  Tempo: {bpm} BPM")
        report(0.15)

        logger.info("Step 2: Beat grid")
        beats = generate_beat_grid(samples, sr, bpm, duration)
        logger.info(f"  {len(beats)} beats, {sum(1 for b in beats if b.is_downbeat)} downbeats")
        report(0.3)

        logger.info("Step 3: Energy curve")
        energy_curve = compute_energy_curve(samples, sr)
        report(0.45)

        logger.info("Step 4: Onset detection")
        onsets = detect_onsets(samples, sr)
        logger.info(f"  {len(onsets)} onsets")
        report(0.55)

        logger.info("Step 5: Pitch contour")
        pitch_contour = extract_pitch_contour(samples, sr)
        voiced = sum(1 for p in pitch_contour if p.confidence > 0)
        logger.info(f"  {len(pitch_contour)} points ({voiced} voiced)")
        report(0.7)

        logger.info("Step 6: Section segmentation")
        sections = segment_sections(energy_curve, duration)
        for s in sections:
            logger.info(f"  Section {s.start_time:.1f}-{s.end_time:.1f}s: {s.label} ({s.energy:.2f})")
        report(0.85)

        logger.info("Step 7: Key detection")
        key = detect_key(samples, sr)
        logger.info(f"  Key: {key.label}")

        if energy_curve and beats:
            mean_energy = float(np.mean([p.energy for p in energy_curve]))
            danceability = compute_danceability(mean_energy, beat_regularity(beats))
        else:
            danceability = 0.0
        report(1.0)

        return SongMap(
            bpm=bpm,
            key=key,
            danceability=danceability,
            duration=duration,
            beats=tuple(beats),
            onsets=tuple(onsets),
            sections=tuple(sections),
            pitch_contour=tuple(pitch_contour),
            energy_curve=tuple(energy_curve),
        )

    def analyze_in_background(
        self,
        audio: np.ndarray,
        sr: int = 22050,
        on_progress: ProgressCallback | None = None,
    ) -> Future:
        """Run :meth:`analyze_audio` on a worker thread.

        Progress callbacks fire on the worker thread. The computation cannot
        be cancelled once started; callers that lose interest simply ignore
        the future's result.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="songpath-analysis")
        return self._executor.submit(self.analyze_audio, audio, sr, on_progress)

    def close(self) -> None:
        """Shut down the worker thread started by :meth:`analyze_in_background`.

        An executor passed in by the caller is left running.
        """
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> AnalysisEngine:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
