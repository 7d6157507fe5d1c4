"""Detector modules for proxy detection"""

from .face_detector import FaceDetector
from .face_verifier import FaceVerifier, is_authorized, euclidean_distance
from .audio_detector import AudioDetector
from .expression import most_likely_expression

__all__ = [
    "FaceDetector",
    "FaceVerifier",
    "is_authorized",
    "euclidean_distance",
    "AudioDetector",
    "most_likely_expression"
]
