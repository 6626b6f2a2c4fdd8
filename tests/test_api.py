"""Tests for the HTTP and WebSocket endpoints."""

import numpy as np
import soundfile as sf

from tests.conftest import SR, generate_click_track, generate_sine


def test_health_endpoint(client):
    """GET /api/health should return ok."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_api_analyze_endpoint(client, tmp_path):
    """POST /api/analyze should return the SongMap with its ideal path."""
    audio = generate_click_track(bpm=120, duration_seconds=5)
    wav_path = tmp_path / "test.wav"
    sf.write(str(wav_path), audio, SR)

    with open(wav_path, "rb") as f:
        response = client.post("/api/analyze", files={"file": ("test.wav", f, "audio/wav")})

    assert response.status_code == 200
    data = response.json()
    for key in ("bpm", "key", "danceability", "duration", "beats", "onsets",
                "sections", "pitch_contour", "energy_curve", "ideal_path"):
        assert key in data
    assert 110 <= data["bpm"] <= 130
    assert data["key"]["scale"] in ("major", "minor")
    assert len(data["beats"]) > 0
    assert len(data["ideal_path"]) == 75
    assert len(data["ideal_path"][0]["position"]) == 3
    assert data["sections"][-1]["end_time"] == data["duration"]


def test_api_analyze_rejects_unsupported_extension(client):
    response = client.post(
        "/api/analyze",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400
    assert "Unsupported format" in response.json()["detail"]


def test_api_analyze_rejects_oversized_file(client, monkeypatch):
    """Upload endpoint should reject files larger than configured limit."""
    from songpath.config import settings

    monkeypatch.setattr(settings, "max_upload_mb", 1)
    payload = b"x" * (1024 * 1024 + 1)

    response = client.post(
        "/api/analyze",
        files={"file": ("big.wav", payload, "audio/wav")},
    )

    assert response.status_code == 400
    assert "File too large" in response.json()["detail"]


def test_api_analyze_undecodable_file_returns_generic_error(client):
    response = client.post(
        "/api/analyze",
        files={"file": ("test.wav", b"definitely not audio", "audio/wav")},
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Analysis failed"


def test_api_analyze_tempfile_failure_returns_generic_error(client, monkeypatch):
    """Upload endpoint should not leak internal exception details."""
    import songpath.api.upload as upload_module

    def _raise_tempfile_error(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(upload_module.tempfile, "NamedTemporaryFile", _raise_tempfile_error)

    response = client.post(
        "/api/analyze",
        files={"file": ("test.wav", b"audio", "audio/wav")},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Analysis failed"


def test_live_websocket_streams_features(client):
    chunk = generate_sine(440.0, duration_seconds=0.2)

    with client.websocket_connect("/api/ws/live") as ws:
        ws.send_bytes(chunk.tobytes())
        first = ws.receive_json()
        ws.send_bytes(chunk.tobytes())
        second = ws.receive_json()

    assert first["type"] == "features"
    assert len(first["band_energies"]) == 6
    assert first["rms"] > 0.3
    assert first["spectral_flux"] == 0.0
    assert 0.0 <= second["zcr"] <= 1.0


def test_live_websocket_ignores_partial_samples(client):
    chunk = np.zeros(1024, dtype=np.float32).tobytes() + b"\x00\x00"

    with client.websocket_connect("/api/ws/live") as ws:
        ws.send_bytes(chunk)
        message = ws.receive_json()

    assert message["type"] == "features"
    assert message["rms"] == 0.0
