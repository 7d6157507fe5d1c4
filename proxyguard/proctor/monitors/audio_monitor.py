"""
Audio Monitor - Noise and multiple-voice detection loop
"""

import asyncio
import logging
from typing import Optional

from ..context import SessionContext
from ..detectors import AudioDetector
from ..errors import DetectionTickFailure
from ..types import AudioVerdict

logger = logging.getLogger(__name__)


class AudioMonitor:
    """
    Analyses one microphone frequency snapshot per display refresh.

    Shares nothing with the face monitor except the monitoring flag and the
    aggregator it publishes to.
    """

    def __init__(self, context: SessionContext, detector: AudioDetector, interval: float = 1 / 60):
        self.context = context
        self.detector = detector
        self.interval = interval
        self.ticks = 0

    async def run(self):
        """Tick until the monitoring flag goes false"""
        if self.context.microphone is None:
            logger.warning("No microphone open, audio monitor not started")
            return

        logger.info(f"Audio monitor started for session {self.context.session_id}")

        while self.context.monitoring:
            self.tick()
            if not self.context.monitoring:
                break
            await asyncio.sleep(self.interval)

        logger.info(f"Audio monitor stopped after {self.ticks} ticks")

    def tick(self) -> Optional[AudioVerdict]:
        """
        Analyse the current snapshot and publish the verdict.

        Returns:
            The published verdict, or None if the tick failed
        """
        self.ticks += 1
        microphone = self.context.microphone

        try:
            if microphone is None:
                raise DetectionTickFailure("Microphone is not open")
            bins = microphone.get_byte_frequency_data()
            verdict = self.detector.analyze(bins)
        except Exception as e:
            self.context.aggregator.report_tick_failure("audio", e)
            return None

        self.context.aggregator.publish_audio(verdict)
        return verdict
