"""WebSocket endpoint streaming real-time features of live playback audio."""

import logging

import numpy as np
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from songpath.api.schemas import FeaturesMessage
from songpath.audio.realtime import RealtimeFeatureExtractor
from songpath.audio.stream import AnalyserTap, StreamBuffer
from songpath.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/live")
async def live_features(websocket: WebSocket):
    """Real-time features of live audio via WebSocket.

    Protocol:
    - Client sends binary Float32 PCM chunks (mono, at settings.sample_rate)
    - Server answers every chunk with
      {"type": "features", "rms": ..., "spectral_centroid": ..., "spectral_flux": ...,
       "zcr": ..., "band_energies": [...]}
    """
    await websocket.accept()

    stream_buffer = StreamBuffer(
        sr=settings.sample_rate,
        max_duration=settings.stream_buffer_seconds,
    )
    tap = AnalyserTap(stream_buffer, fft_size=settings.fft_size, smoothing=settings.analyser_smoothing)
    extractor = RealtimeFeatureExtractor(tap, num_bands=settings.num_bands)

    try:
        while True:
            data = await websocket.receive_bytes()

            # Decode Float32 PCM, ignoring a trailing partial sample
            n_samples = len(data) // 4
            if n_samples == 0:
                continue
            chunk = np.frombuffer(data[:n_samples * 4], dtype=np.float32)
            stream_buffer.append(chunk)

            features = extractor.extract()
            message = FeaturesMessage(
                rms=features.rms,
                spectral_centroid=features.spectral_centroid,
                spectral_flux=features.spectral_flux,
                zcr=features.zcr,
                band_energies=list(features.band_energies),
            )
            await websocket.send_json(message.model_dump())

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"Live feature stream failed: {e}")
        try:
            await websocket.send_json({"type": "error", "message": "Live analysis failed"})
        except Exception:
            pass
