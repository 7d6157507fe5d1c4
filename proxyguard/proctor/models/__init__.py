"""Model loading utilities"""

from .model_loader import get_face_recognition, get_deepface, check_models

__all__ = ["get_face_recognition", "get_deepface", "check_models"]
