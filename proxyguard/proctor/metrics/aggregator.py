"""
Verdict Aggregator - Merges face and audio verdicts into one status
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ..errors import DetectionTickFailure
from ..types import AudioVerdict, FrameResult
from ..utils.logging import log_alert_raised, log_tick_failure

logger = logging.getLogger(__name__)

FACE_PROXY_MESSAGE = "Proxy detected! Unauthorized person detected!"
NOISE_MESSAGE = "Proxy in audio! Noise detected!"
MULTIPLE_VOICES_MESSAGE = "Multiple voices detected!"
MONITORING_MESSAGE = "Monitoring in progress..."


@dataclass
class VerdictAggregator:
    """
    Holds the latest verdict from each monitoring loop.

    Each source owns a single last-write-wins slot, so interleaved or
    out-of-order publishes from the two loops always leave the most recent
    verdict of each in place. While monitoring is active the status message
    is derived from those slots by priority: an unauthorized face beats
    audio, noise beats multiple voices. Otherwise the last lifecycle notice
    set by the session controller is shown.
    """

    session_id: str

    face: FrameResult = field(default_factory=FrameResult)
    audio: AudioVerdict = field(default_factory=AudioVerdict)
    active: bool = False
    detection_error: bool = False
    notice: str = ""

    # Counters
    face_ticks: int = 0
    audio_ticks: int = 0
    tick_failures: int = 0
    alerts_raised: int = 0

    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def face_proxy(self) -> bool:
        return self.face.unauthorized_present

    @property
    def audio_proxy(self) -> bool:
        return self.audio.audio_proxy

    @property
    def alert(self) -> bool:
        return self.face_proxy or self.audio_proxy

    @property
    def expressions(self) -> Dict[str, str]:
        return dict(self.face.expressions)

    @property
    def status_message(self) -> str:
        if not self.active:
            return self.notice
        if self.face_proxy:
            return FACE_PROXY_MESSAGE
        if self.audio.noise_detected:
            return NOISE_MESSAGE
        if self.audio.multiple_voices:
            return MULTIPLE_VOICES_MESSAGE
        if self.detection_error:
            return DetectionTickFailure.status_message
        return MONITORING_MESSAGE

    def publish_face(self, result: FrameResult):
        """Store the latest frame result from the face loop"""
        if result.unauthorized_present and not self.face_proxy:
            self.alerts_raised += 1
            log_alert_raised(self.session_id, "face", "unauthorized_face")

        self.face = result
        self.detection_error = False
        self.face_ticks += 1
        self.updated_at = datetime.utcnow()

    def publish_audio(self, verdict: AudioVerdict):
        """Store the latest verdict from the audio loop"""
        if verdict.audio_proxy and not self.audio_proxy:
            self.alerts_raised += 1
            reason = "noise" if verdict.noise_detected else "multiple_voices"
            log_alert_raised(self.session_id, "audio", reason)

        self.audio = verdict
        self.audio_ticks += 1
        self.updated_at = datetime.utcnow()

    def report_tick_failure(self, loop: str, error: Exception):
        """Record a skipped tick; the previous verdicts stay in place"""
        self.tick_failures += 1
        if loop == "face":
            self.detection_error = True
        log_tick_failure(self.session_id, loop, error)

    def set_notice(self, message: str):
        """Lifecycle message shown while monitoring is inactive"""
        self.notice = message
        self.updated_at = datetime.utcnow()

    def reset_alerts(self):
        """Clear both verdicts and the expression map"""
        self.face = FrameResult()
        self.audio = AudioVerdict()
        self.detection_error = False
        self.updated_at = datetime.utcnow()

    def begin_monitoring(self):
        self.reset_alerts()
        self.active = True

    def end_monitoring(self, notice: str):
        self.active = False
        self.reset_alerts()
        self.set_notice(notice)

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a snapshot of the current verdicts.

        Returns:
            Dict with alert flags, message, expressions and counters
        """
        return {
            "session_id": self.session_id,
            "alert": self.alert,
            "face_proxy": self.face_proxy,
            "audio_proxy": self.audio_proxy,
            "noise_detected": self.audio.noise_detected,
            "multiple_voices": self.audio.multiple_voices,
            "status_message": self.status_message,
            "expressions": self.expressions,
            "counts": {
                "face_ticks": self.face_ticks,
                "audio_ticks": self.audio_ticks,
                "tick_failures": self.tick_failures,
                "alerts_raised": self.alerts_raised
            }
        }
