"""
Model Loader - Lazy loading and caching of face models
"""

import logging
from functools import lru_cache
from typing import Dict

from ..errors import ModelLoadFailure

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_face_recognition():
    """
    Get the face_recognition module (dlib HOG detector, 68-point landmarks
    and 128-d ResNet descriptors).

    Raises:
        ModelLoadFailure: if face_recognition or its model weights are missing
    """
    try:
        import face_recognition
    except ImportError as e:
        raise ModelLoadFailure(
            "face_recognition not installed. Run: pip install face_recognition"
        ) from e

    logger.info("face_recognition loaded successfully")
    return face_recognition


@lru_cache(maxsize=1)
def get_deepface():
    """
    Get DeepFace for per-face emotion scores.

    The emotion model weights are downloaded on first use; building the
    model here makes that happen at startup instead of on the first tick.

    Raises:
        ModelLoadFailure: if DeepFace is missing or the model cannot be built
    """
    try:
        from deepface import DeepFace
    except ImportError as e:
        raise ModelLoadFailure("DeepFace not installed. Run: pip install deepface") from e

    try:
        DeepFace.build_model(task="facial_attribute", model_name="Emotion")
    except Exception as e:
        raise ModelLoadFailure(f"Could not build emotion model: {e}") from e

    logger.info("DeepFace emotion model loaded successfully")
    return DeepFace


def check_models() -> Dict[str, bool]:
    """
    Check which models and media backends are importable.

    Returns:
        Dict with availability per dependency
    """
    status = {
        "face_recognition": False,
        "deepface": False,
        "pyaudio": False
    }

    try:
        import face_recognition  # noqa: F401
        status["face_recognition"] = True
    except ImportError:
        pass

    try:
        import deepface  # noqa: F401
        status["deepface"] = True
    except ImportError:
        pass

    try:
        import pyaudio  # noqa: F401
        status["pyaudio"] = True
    except ImportError:
        pass

    return status
