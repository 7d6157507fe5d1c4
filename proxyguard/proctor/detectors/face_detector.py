"""
Face Detector - Finds faces, identity descriptors and expression scores

Detection and descriptors come from face_recognition (dlib HOG detector,
68-point landmarks, ResNet descriptors). Expression scores come from
DeepFace's emotion model run on each face crop.
"""

import logging
from typing import Dict, List, Optional, Tuple

import cv2
import numpy as np

from ..models import get_deepface, get_face_recognition
from ..types import BoundingBox, DetectedFace, freeze_descriptor
from .expression import normalize_deepface_emotions

logger = logging.getLogger(__name__)


def css_to_box(location: Tuple[int, int, int, int]) -> BoundingBox:
    """Convert a face_recognition (top, right, bottom, left) tuple to (x, y, w, h)"""
    top, right, bottom, left = location
    return (int(left), int(top), int(right - left), int(bottom - top))


class FaceDetector:
    """
    Detects every face in a frame.

    Models are loaded lazily through the model loader; call ``load()`` up
    front to surface a ModelLoadFailure before monitoring starts.
    """

    def __init__(self, model: str = "hog", upsample: int = 1):
        """
        Initialize face detector.

        Args:
            model: face_recognition detection model ("hog" or "cnn")
            upsample: Times to upsample the frame looking for smaller faces
        """
        self.model = model
        self.upsample = upsample
        self._face_recognition = None
        self._deepface = None

    def load(self):
        """Load face_recognition and DeepFace (raises ModelLoadFailure)"""
        self._face_recognition = get_face_recognition()
        self._deepface = get_deepface()

    @property
    def loaded(self) -> bool:
        return self._face_recognition is not None and self._deepface is not None

    def detect(self, frame: np.ndarray) -> List[DetectedFace]:
        """
        Detect faces in a frame.

        Args:
            frame: BGR image from OpenCV

        Returns:
            One DetectedFace per face, in detector order
        """
        if frame is None or frame.size == 0:
            return []

        if not self.loaded:
            self.load()

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        locations = self._face_recognition.face_locations(
            rgb, number_of_times_to_upsample=self.upsample, model=self.model
        )
        if not locations:
            return []

        # "large" runs the 68-point landmark model before computing descriptors
        encodings = self._face_recognition.face_encodings(rgb, locations, model="large")

        faces = []
        for location, encoding in zip(locations, encodings):
            box = css_to_box(location)
            faces.append(DetectedFace(
                box=box,
                descriptor=freeze_descriptor(encoding),
                expressions=self._expressions(frame, box)
            ))
        return faces

    def _expressions(self, frame: np.ndarray, box: BoundingBox) -> Dict[str, float]:
        """Score expressions on a face crop"""
        crop = self._crop(frame, box)
        if crop is None:
            return {}

        try:
            result = self._deepface.analyze(
                img_path=crop,
                actions=["emotion"],
                enforce_detection=False,
                detector_backend="skip",
                silent=True
            )
        except Exception as e:
            logger.warning(f"Expression analysis failed: {e}")
            return {}

        # Newer DeepFace versions return a list with one entry per face
        if isinstance(result, list):
            result = result[0] if result else {}
        return normalize_deepface_emotions(result.get("emotion", {}))

    @staticmethod
    def _crop(frame: np.ndarray, box: BoundingBox) -> Optional[np.ndarray]:
        x, y, w, h = box
        height, width = frame.shape[:2]
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(width, x + w), min(height, y + h)
        if x1 <= x0 or y1 <= y0:
            return None
        return frame[y0:y1, x0:x1]
