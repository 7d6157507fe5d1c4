"""
Camera - OpenCV webcam capture
"""

import logging
from typing import Optional

import cv2
import numpy as np

from ..errors import MediaAccessDenied

logger = logging.getLogger(__name__)


class Camera:
    """Wraps a cv2.VideoCapture opened by the session controller"""

    def __init__(self, index: int = 0, width: int = 640, height: int = 480):
        self.index = index
        self.width = width
        self.height = height
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self):
        """
        Open the webcam.

        Raises:
            MediaAccessDenied: if the device is missing or access was refused
        """
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            raise MediaAccessDenied(f"Could not open camera {self.index}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture = capture
        logger.info(f"Camera {self.index} opened ({self.width}x{self.height})")

    def read(self) -> Optional[np.ndarray]:
        """Grab the current BGR frame, or None if the read failed"""
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        return frame if ok else None

    def release(self):
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info(f"Camera {self.index} released")
