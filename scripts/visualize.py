#!/usr/bin/env python3
"""Plot the SongMap and ideal path of an audio file.

Panels: energy curve with sections and beats, pitch contour (confidence
shaded), and the ideal path's lateral/vertical axes over time.

Usage:
    uv run python scripts/visualize.py song.mp3
    uv run python scripts/visualize.py song.mp3 --output song.png
    uv run python scripts/visualize.py song.mp3 --min-confidence 0.5
"""

import argparse
import logging
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from songpath.analysis.engine import AnalysisEngine
from songpath.game.path_generator import generate_ideal_path

SECTION_COLORS = {
    "intro": "#8ecae6",
    "verse": "#90be6d",
    "chorus": "#f9c74f",
    "bridge": "#f9844a",
    "outro": "#b5a7d6",
}


def plot_song_map(song_map, output: Path, min_confidence: float = 0.3) -> None:
    fig, axes = plt.subplots(3, 1, figsize=(14, 9), sharex=True)
    fig.suptitle(
        f"{song_map.bpm} BPM, {song_map.key.label}, "
        f"danceability {song_map.danceability:.2f}"
    )

    ax = axes[0]
    for s in song_map.sections:
        ax.axvspan(s.start_time, s.end_time, color=SECTION_COLORS.get(s.label, "#dddddd"), alpha=0.4)
        ax.text(s.start_time, 1.02, s.label, fontsize=8)
    ax.plot([p.time for p in song_map.energy_curve], [p.energy for p in song_map.energy_curve],
            color="black", linewidth=0.8)
    for b in song_map.beats:
        ax.axvline(b.time, color="red" if b.is_downbeat else "grey",
                   alpha=0.5 if b.is_downbeat else 0.15, linewidth=0.6)
    ax.set_ylabel("energy")
    ax.set_ylim(0, 1.1)

    ax = axes[1]
    voiced = [p for p in song_map.pitch_contour if p.confidence >= min_confidence]
    if voiced:
        ax.scatter([p.time for p in voiced], [p.frequency for p in voiced],
                   c=[p.confidence for p in voiced], cmap="viridis", s=4, vmin=0, vmax=1)
    ax.set_ylabel("pitch (Hz)")
    ax.set_yscale("log")

    ax = axes[2]
    times = np.array([p.time for p in song_map.ideal_path])
    ax.plot(times, [p.position.x for p in song_map.ideal_path], label="x (pitch)")
    ax.plot(times, [p.position.y for p in song_map.ideal_path], label="y (energy)")
    ax.set_ylabel("path")
    ax.set_xlabel("time (s)")
    ax.legend(loc="upper right")

    fig.tight_layout()
    fig.savefig(output, dpi=120)
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Visualize a SongMap")
    parser.add_argument("audio", type=Path, help="Audio file to analyze")
    parser.add_argument("--output", type=Path, default=None,
                        help="PNG path (default: <audio>.songmap.png)")
    parser.add_argument("--min-confidence", type=float, default=0.3,
                        help="Hide pitch points below this confidence")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")

    if not args.audio.exists():
        print(f"Error: {args.audio} not found")
        sys.exit(1)

    engine = AnalysisEngine()
    song_map = engine.analyze_file(
        str(args.audio),
        on_progress=lambda p: print(f"\r  analyzing... {p:.0%}", end="", flush=True),
    )
    print()
    song_map = song_map.with_ideal_path(generate_ideal_path(song_map))

    output = args.output or args.audio.with_suffix(".songmap.png")
    plot_song_map(song_map, output, args.min_confidence)
    print(f"Saved {output}")


if __name__ == "__main__":
    main()
