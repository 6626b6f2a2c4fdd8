"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings with env var overrides."""

    # Audio
    sample_rate: int = 22050

    # Live streaming
    stream_buffer_seconds: float = 10.0
    fft_size: int = 2048
    analyser_smoothing: float = 0.8
    num_bands: int = 6

    # Path generation (forward_speed must match the orb's speed)
    path_sample_rate: int = 15
    forward_speed: float = 8.0
    lateral_range: float = 8.0
    vertical_range: float = 4.0
    vertical_base: float = 2.0
    smoothing_window: int = 25

    # Sync scoring
    sync_max_distance: float = 15.0
    sync_ema_alpha: float = 0.05
    score_sample_interval: float = 0.1  # seconds

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_mb: int = 50

    model_config = {"env_prefix": "SONGPATH_"}


settings = Settings()
