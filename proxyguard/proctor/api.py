"""
Proctoring API - FastAPI endpoints for the proxy detection session

Endpoints:
- POST /api/proctor/camera/start - Open camera and microphone
- POST /api/proctor/camera/stop - Release media and clear the reference
- POST /api/proctor/reference/capture - Capture the reference face(s)
- POST /api/proctor/monitoring/start - Start face and audio monitoring
- POST /api/proctor/monitoring/stop - Stop monitoring
- GET /api/proctor/status - Current status, alerts and expressions
- GET /api/proctor/overlay - Latest annotated frame (JPEG)
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .session import ProctorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proctor", tags=["Proctoring"])

# One session per process
_session: Optional[ProctorSession] = None


def get_session() -> ProctorSession:
    """Return the process-wide session, creating it on first use"""
    global _session
    if _session is None:
        _session = ProctorSession()
    return _session


# ============== Response Models ==============

class StatusResponse(BaseModel):
    """Current session status"""
    session_id: str
    camera_on: bool
    reference_captured: bool
    monitoring: bool
    models_loaded: bool
    alert: bool = Field(..., description="Face or audio proxy currently flagged")
    face_proxy: bool
    audio_proxy: bool
    noise_detected: bool
    multiple_voices: bool
    detection_error: bool
    status_message: str
    expressions: Dict[str, str] = Field(default_factory=dict)
    reference_faces: int
    face_ticks: int
    audio_ticks: int
    alerts_raised: int


class ControlResponse(BaseModel):
    """Result of a control action"""
    success: bool
    status: StatusResponse


class ModelStatusResponse(BaseModel):
    """Model and media backend availability"""
    face_recognition: bool
    deepface: bool
    pyaudio: bool


def _status(session: ProctorSession) -> StatusResponse:
    status = session.get_status()
    counts = status["counts"]
    return StatusResponse(
        session_id=status["session_id"],
        camera_on=status["camera_on"],
        reference_captured=status["reference_captured"],
        monitoring=status["monitoring"],
        models_loaded=status["models_loaded"],
        alert=status["alert"],
        face_proxy=status["face_proxy"],
        audio_proxy=status["audio_proxy"],
        noise_detected=status["noise_detected"],
        multiple_voices=status["multiple_voices"],
        detection_error=status["detection_error"],
        status_message=status["status_message"],
        expressions=status["expressions"],
        reference_faces=status["reference_faces"],
        face_ticks=counts["face_ticks"],
        audio_ticks=counts["audio_ticks"],
        alerts_raised=counts["alerts_raised"]
    )


# ============== Control Endpoints ==============

@router.post("/camera/start", response_model=ControlResponse)
async def start_camera(session: ProctorSession = Depends(get_session)):
    """
    Open the camera and microphone.

    On permission denial or a missing device the status message says so;
    the call can simply be retried.
    """
    success = await session.start_camera()
    return ControlResponse(success=success, status=_status(session))


@router.post("/camera/stop", response_model=ControlResponse)
async def stop_camera(session: ProctorSession = Depends(get_session)):
    """Stop monitoring, release media and clear the reference set."""
    success = await session.stop_camera()
    return ControlResponse(success=success, status=_status(session))


@router.post("/reference/capture", response_model=ControlResponse)
async def capture_reference(session: ProctorSession = Depends(get_session)):
    """
    Capture every face in the current frame as the reference set.

    Replaces any previous reference.
    """
    success = await session.capture_reference()
    return ControlResponse(success=success, status=_status(session))


@router.post("/monitoring/start", response_model=ControlResponse)
async def start_monitoring(session: ProctorSession = Depends(get_session)):
    """Start the face and audio monitoring loops."""
    success = await session.start_monitoring()
    return ControlResponse(success=success, status=_status(session))


@router.post("/monitoring/stop", response_model=ControlResponse)
async def stop_monitoring(session: ProctorSession = Depends(get_session)):
    """Stop both monitoring loops."""
    success = await session.stop_monitoring()
    return ControlResponse(success=success, status=_status(session))


# ============== Status Endpoints ==============

@router.get("/status", response_model=StatusResponse)
async def get_status(session: ProctorSession = Depends(get_session)):
    """
    Get current session status.
    """
    return _status(session)


@router.get("/overlay")
async def get_overlay(session: ProctorSession = Depends(get_session)):
    """
    Latest frame with face boxes and expression labels, as JPEG.
    """
    image = session.context.overlay.snapshot_jpeg()
    if image is None:
        raise HTTPException(status_code=404, detail="No frame rendered yet")
    return Response(content=image, media_type="image/jpeg")


@router.get("/models-status", response_model=ModelStatusResponse)
async def get_models_status():
    """
    Check which models and media backends are installed.
    """
    from .models.model_loader import check_models

    return ModelStatusResponse(**check_models())


@router.get("/health")
async def health_check(session: ProctorSession = Depends(get_session)):
    """Health check for proctoring module"""
    return {
        "status": "healthy",
        "session_id": session.id,
        "monitoring": session.state.monitoring,
        "module": "proctoring"
    }
