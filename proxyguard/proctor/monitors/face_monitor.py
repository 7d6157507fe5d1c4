"""
Face Monitor - Per-frame face detection and proxy flagging loop
"""

import asyncio
import logging
from typing import List, Optional

import numpy as np

from ..context import SessionContext
from ..detectors import FaceDetector, FaceVerifier, most_likely_expression
from ..errors import DetectionTickFailure
from ..types import DetectedFace, FrameResult

logger = logging.getLogger(__name__)


class FaceMonitor:
    """
    Runs face detection once per display refresh while monitoring is on.

    Each tick grabs a frame, detects faces, checks every face against the
    reference set, redraws the overlay and publishes a FrameResult. A failed
    tick is reported and skipped. Ticks never overlap: the next one is only
    scheduled after the current detection call has returned.
    """

    def __init__(
        self,
        context: SessionContext,
        detector: FaceDetector,
        verifier: FaceVerifier,
        interval: float = 1 / 60
    ):
        self.context = context
        self.detector = detector
        self.verifier = verifier
        self.interval = interval
        self.ticks = 0

    async def run(self):
        """Tick until the monitoring flag goes false"""
        logger.info(f"Face monitor started for session {self.context.session_id}")

        while self.context.monitoring:
            await self.tick()
            if not self.context.monitoring:
                break
            await asyncio.sleep(self.interval)

        logger.info(f"Face monitor stopped after {self.ticks} ticks")

    async def tick(self) -> Optional[FrameResult]:
        """
        Run one detection cycle.

        Returns:
            The published FrameResult, or None if the tick was skipped or
            monitoring stopped while detection was in flight
        """
        self.ticks += 1

        try:
            frame = await self._grab_frame()
            faces = await asyncio.to_thread(self.detector.detect, frame)

            # Stopped while detection was running: drop the result
            if not self.context.monitoring:
                return None

            result = self.evaluate(frame, faces)
        except Exception as e:
            if self.context.monitoring:
                self.context.aggregator.report_tick_failure("face", e)
            return None

        self.context.aggregator.publish_face(result)
        return result

    def evaluate(self, frame: np.ndarray, faces: List[DetectedFace]) -> FrameResult:
        """
        Reduce one frame's detections to a FrameResult and draw the overlay.
        """
        overlay = self.context.overlay

        if not faces:
            overlay.clear(frame)
            return FrameResult()

        labels = [most_likely_expression(face.expressions) for face in faces]
        authorized = self.verifier.verify_all(faces)
        overlay.draw(frame, faces, authorized, labels)

        store = self.context.store
        unauthorized_present = store.captured and len(store) > 0 and not all(authorized)

        return FrameResult(
            expressions={f"Face {i + 1}": label for i, label in enumerate(labels)},
            authorized=tuple(authorized),
            unauthorized_present=unauthorized_present
        )

    async def _grab_frame(self) -> np.ndarray:
        camera = self.context.camera
        if camera is None:
            raise DetectionTickFailure("Camera is not open")

        frame = await asyncio.to_thread(camera.read)
        if frame is None:
            raise DetectionTickFailure("Camera returned no frame")
        return frame
