"""
Proxy Guard Configuration Settings

Thresholds mirror the browser defaults the monitoring loops were tuned with:
- Face match tolerance: 0.5 Euclidean distance between 128-d descriptors
- Audio: AnalyserNode-style byte frequency data (fftSize 2048, -100..-30 dB)
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration for the proxy detection service."""

    # API Settings
    APP_NAME: str = "Proxy Guard"
    DEBUG: bool = True
    HOST: str = "127.0.0.1"
    PORT: int = 8001

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # Camera
    CAMERA_INDEX: int = 0  # 0 = default webcam
    FRAME_WIDTH: int = 640
    FRAME_HEIGHT: int = 480

    # Face recognition
    FACE_DETECTION_MODEL: str = "hog"  # "hog" (CPU) or "cnn" (GPU)
    FACE_MATCH_TOLERANCE: float = 0.5
    PRELOAD_MODELS: bool = True

    # Audio anomaly thresholds
    NOISE_THRESHOLD: float = 0.4  # Normalized RMS loudness
    MULTIPLE_VOICES_THRESHOLD: int = 5  # Frequency peaks indicating multiple voices
    PEAK_MAGNITUDE_THRESHOLD: int = 150  # Bin magnitude (0-255) counted as a peak

    # Audio analysis node
    AUDIO_SAMPLE_RATE: int = 44100
    FFT_SIZE: int = 2048
    SMOOTHING_TIME_CONSTANT: float = 0.8
    MIN_DECIBELS: float = -100.0
    MAX_DECIBELS: float = -30.0

    # Loop scheduling (one tick per display refresh)
    TICK_INTERVAL: float = 1 / 60

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
