"""File upload endpoint for song analysis."""

import logging
import os
import tempfile

from fastapi import APIRouter, UploadFile, File, HTTPException

from songpath.api.schemas import SongMapResponse, song_map_to_response
from songpath.analysis.engine import AnalysisEngine
from songpath.config import settings
from songpath.game.path_generator import generate_ideal_path

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".aac", ".wma"}


def _build_song_map(path: str):
    song_map = AnalysisEngine().analyze_file(path)
    ideal_path = generate_ideal_path(
        song_map,
        sample_rate=settings.path_sample_rate,
        forward_speed=settings.forward_speed,
        lateral_range=settings.lateral_range,
        vertical_range=settings.vertical_range,
        vertical_base=settings.vertical_base,
        smoothing_window=settings.smoothing_window,
    )
    return song_map.with_ideal_path(ideal_path)


@router.post("/analyze", response_model=SongMapResponse)
def analyze_file(file: UploadFile = File(...)):
    """Analyze an uploaded audio file and return its SongMap with the ideal path."""
    suffix = ""
    if file.filename and "." in file.filename:
        suffix = "." + file.filename.rsplit(".", 1)[-1].lower()
        if suffix not in ALLOWED_EXTENSIONS:
            raise HTTPException(400, f"Unsupported format. Use: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

    content = file.file.read()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(400, f"File too large (max {settings.max_upload_mb} MB)")

    # librosa needs a real path for some formats
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(content)
            tmp_path = tmp.name

        song_map = _build_song_map(tmp_path)
        return song_map_to_response(song_map)
    except Exception:
        logger.exception("Analysis failed")
        raise HTTPException(500, "Analysis failed")
    finally:
        if tmp_path:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
