"""Pydantic response models for API."""

from pydantic import BaseModel


class BeatResponse(BaseModel):
    time: float
    strength: float
    is_downbeat: bool


class OnsetResponse(BaseModel):
    time: float
    strength: float
    frequency_band: str


class SectionResponse(BaseModel):
    start_time: float
    end_time: float
    label: str
    energy: float


class PitchPointResponse(BaseModel):
    time: float
    frequency: float
    confidence: float


class EnergyPointResponse(BaseModel):
    time: float
    energy: float


class PathPointResponse(BaseModel):
    time: float
    position: tuple[float, float, float]


class KeyResponse(BaseModel):
    name: str
    scale: str


class SongMapResponse(BaseModel):
    bpm: int
    key: KeyResponse
    danceability: float
    duration: float
    beats: list[BeatResponse]
    onsets: list[OnsetResponse] = []
    sections: list[SectionResponse] = []
    pitch_contour: list[PitchPointResponse] = []
    energy_curve: list[EnergyPointResponse] = []
    ideal_path: list[PathPointResponse] = []


# WebSocket message types

class FeaturesMessage(BaseModel):
    type: str = "features"
    rms: float
    spectral_centroid: float
    spectral_flux: float
    zcr: float
    band_energies: list[float] = []


def song_map_to_response(song_map) -> SongMapResponse:
    """Convert a SongMap into its JSON response model."""
    return SongMapResponse(
        bpm=song_map.bpm,
        key=KeyResponse(name=song_map.key.name, scale=song_map.key.scale),
        danceability=song_map.danceability,
        duration=song_map.duration,
        beats=[
            BeatResponse(time=b.time, strength=b.strength, is_downbeat=b.is_downbeat)
            for b in song_map.beats
        ],
        onsets=[
            OnsetResponse(time=o.time, strength=o.strength, frequency_band=o.frequency_band)
            for o in song_map.onsets
        ],
        sections=[
            SectionResponse(start_time=s.start_time, end_time=s.end_time, label=s.label, energy=s.energy)
            for s in song_map.sections
        ],
        pitch_contour=[
            PitchPointResponse(time=p.time, frequency=p.frequency, confidence=p.confidence)
            for p in song_map.pitch_contour
        ],
        energy_curve=[
            EnergyPointResponse(time=p.time, energy=p.energy)
            for p in song_map.energy_curve
        ],
        ideal_path=[
            PathPointResponse(time=p.time, position=(p.position.x, p.position.y, p.position.z))
            for p in song_map.ideal_path
        ],
    )
