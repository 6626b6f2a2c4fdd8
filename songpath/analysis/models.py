"""Core data models for song analysis."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


@dataclass(frozen=True)
class BeatEvent:
    """A single beat on the tempo grid."""
    time: float  # seconds
    strength: float  # 0.0-1.0
    is_downbeat: bool = False


@dataclass(frozen=True)
class OnsetEvent:
    """Start of a new sound event."""
    time: float
    strength: float  # 0.0-1.0
    frequency_band: str = "mid"  # "low" | "mid" | "high"


@dataclass(frozen=True)
class Section:
    """A contiguous region of the song with a heuristic label."""
    start_time: float
    end_time: float
    label: str  # intro, verse, chorus, bridge, outro
    energy: float  # mean smoothed energy, 0.0-1.0


@dataclass(frozen=True)
class PitchPoint:
    """Coarse pitch estimate. Zero confidence means no usable pitch."""
    time: float
    frequency: float  # Hz
    confidence: float  # 0.0-1.0


@dataclass(frozen=True)
class EnergyPoint:
    """Normalized loudness at a point in time."""
    time: float
    energy: float  # 0.0-1.0


@dataclass(frozen=True)
class Vec3:
    """Position in world space. z runs forward (negative) with time."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def lerp(self, other: Vec3, t: float) -> Vec3:
        return Vec3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )


@dataclass(frozen=True)
class PathPoint:
    """A sample of the ideal path."""
    time: float
    position: Vec3


@dataclass(frozen=True)
class Key:
    """Detected musical key."""
    name: str  # one of NOTE_NAMES
    scale: str  # "major" | "minor"

    @property
    def label(self) -> str:
        return f"{self.name} {self.scale}"


@dataclass(frozen=True)
class SongMap:
    """Complete analysis of one track.

    Built once per loaded track and replaced wholesale on the next load.
    The ideal path is attached afterwards with :meth:`with_ideal_path`.
    """
    bpm: int
    key: Key
    danceability: float
    duration: float
    beats: tuple[BeatEvent, ...] = ()
    onsets: tuple[OnsetEvent, ...] = ()
    sections: tuple[Section, ...] = ()
    pitch_contour: tuple[PitchPoint, ...] = ()
    energy_curve: tuple[EnergyPoint, ...] = ()
    ideal_path: tuple[PathPoint, ...] = ()

    def with_ideal_path(self, path) -> SongMap:
        """Return a copy of this map carrying the generated path."""
        return replace(self, ideal_path=tuple(path))


@dataclass(frozen=True)
class RealtimeFeatures:
    """Per-frame features of the live playback signal."""
    rms: float
    spectral_centroid: float
    spectral_flux: float
    zcr: float
    band_energies: tuple[float, ...] = field(default_factory=tuple)

    @classmethod
    def zero(cls, num_bands: int = 6) -> RealtimeFeatures:
        return cls(
            rms=0.0,
            spectral_centroid=0.0,
            spectral_flux=0.0,
            zcr=0.0,
            band_energies=(0.0,) * num_bands,
        )
