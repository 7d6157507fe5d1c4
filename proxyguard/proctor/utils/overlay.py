"""
Overlay - Draws face boxes and expression labels onto the latest frame
"""

import logging
import threading
from typing import List, Optional, Sequence

import cv2
import numpy as np

from ..types import Annotation, DetectedFace

logger = logging.getLogger(__name__)

# BGR
GREEN = (0, 255, 0)
RED = (0, 0, 255)


class Overlay:
    """
    Write-only rendering sink for the face loop.

    Keeps the last annotated frame so the API can serve it as a JPEG, and
    the last annotations so callers can inspect what was drawn.
    """

    def __init__(self, line_width: int = 3, font_scale: float = 0.5):
        self.line_width = line_width
        self.font_scale = font_scale

        self._frame: Optional[np.ndarray] = None
        self._annotations: List[Annotation] = []
        self._lock = threading.Lock()

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    def draw(
        self,
        frame: np.ndarray,
        faces: Sequence[DetectedFace],
        authorized: Sequence[bool],
        labels: Sequence[str]
    ) -> np.ndarray:
        """
        Draw one box per face, green if authorized else red, with the
        expression label just above the box.

        Returns:
            Annotated copy of the frame
        """
        annotated = frame.copy()
        annotations = []

        for face, ok, label in zip(faces, authorized, labels):
            x, y, w, h = face.box
            color = GREEN if ok else RED

            cv2.rectangle(annotated, (x, y), (x + w, y + h), color, self.line_width)
            if label:
                cv2.putText(
                    annotated, label, (x, max(0, y - 5)),
                    cv2.FONT_HERSHEY_SIMPLEX, self.font_scale, color, 1, cv2.LINE_AA
                )
            annotations.append(Annotation(box=face.box, color=color, label=label))

        with self._lock:
            self._frame = annotated
            self._annotations = annotations
        return annotated

    def clear(self, frame: Optional[np.ndarray] = None):
        """Drop all annotations; keep the bare frame if one is given"""
        with self._lock:
            self._frame = None if frame is None else frame.copy()
            self._annotations = []

    def snapshot_jpeg(self, quality: int = 80) -> Optional[bytes]:
        """Encode the last frame as JPEG, or None if nothing was drawn yet"""
        with self._lock:
            frame = self._frame
        if frame is None:
            return None

        ok, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
        if not ok:
            logger.warning("Could not encode overlay frame")
            return None
        return buffer.tobytes()
