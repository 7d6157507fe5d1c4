"""
Proctoring Logger - Logs proctoring events
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def log_proctor_event(
    session_id: str,
    event_type: str,
    details: Optional[Dict[str, Any]] = None,
    level: str = "info"
):
    """
    Log a proctoring event.

    Args:
        session_id: Proctoring session ID
        event_type: Type of event (camera_start, alert_raised, tick_failed, etc.)
        details: Optional event details
        level: Log level (debug, info, warning, error)
    """
    message = f"[PROCTOR] session={session_id} event={event_type}"

    if details:
        detail_str = " ".join(f"{k}={v}" for k, v in details.items())
        message += f" {detail_str}"

    if level == "debug":
        logger.debug(message)
    elif level == "warning":
        logger.warning(message)
    elif level == "error":
        logger.error(message)
    else:
        logger.info(message)


def log_session_start(session_id: str, reference_faces: int):
    """Log monitoring start"""
    log_proctor_event(
        session_id=session_id,
        event_type="monitoring_start",
        details={"reference_faces": reference_faces}
    )


def log_session_end(session_id: str, face_ticks: int, audio_ticks: int, alerts: int):
    """Log monitoring stop"""
    log_proctor_event(
        session_id=session_id,
        event_type="monitoring_stop",
        details={
            "face_ticks": face_ticks,
            "audio_ticks": audio_ticks,
            "alerts_raised": alerts
        }
    )


def log_alert_raised(session_id: str, source: str, reason: str):
    """Log when an alert flips on"""
    log_proctor_event(
        session_id=session_id,
        event_type="alert_raised",
        details={"source": source, "reason": reason},
        level="warning"
    )


def log_tick_failure(session_id: str, loop: str, error: Exception):
    """Log a skipped detection tick"""
    log_proctor_event(
        session_id=session_id,
        event_type="tick_failed",
        details={"loop": loop, "error": repr(error)},
        level="error"
    )
