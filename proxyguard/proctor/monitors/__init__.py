"""Monitoring loops"""

from .face_monitor import FaceMonitor
from .audio_monitor import AudioMonitor

__all__ = ["FaceMonitor", "AudioMonitor"]
