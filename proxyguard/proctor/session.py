"""
Proctor Session - Owns the camera, reference capture and monitoring lifecycle
"""

import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings, settings as default_settings
from .context import SessionContext
from .detectors import AudioDetector, FaceDetector, FaceVerifier
from .errors import MediaAccessDenied, ModelLoadFailure, NoFaceFound
from .media import Camera, Microphone, open_microphone
from .monitors import AudioMonitor, FaceMonitor
from .types import SessionState
from .utils.logging import log_proctor_event, log_session_end, log_session_start
from .utils.overlay import Overlay

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading models..."
MODELS_LOADED_MESSAGE = "Models loaded. Start the camera."
CAMERA_STARTED_MESSAGE = "Camera started. Capture reference photo."
CAMERA_STOPPED_MESSAGE = "Camera stopped."
CAMERA_REQUIRED_MESSAGE = "Start the camera first."
REFERENCE_CAPTURED_MESSAGE = "Reference photo captured! Start monitoring."
REFERENCE_REQUIRED_MESSAGE = "Please capture your reference photo first."
CAPTURE_FAILED_MESSAGE = "Reference capture failed. Please try again."
MONITORING_STOPPED_MESSAGE = "Monitoring stopped."


class ProctorSession:
    """
    Session controller for one proctoring session.

    State transitions:
    - start_camera: opens camera and microphone together
    - capture_reference: requires the camera; replaces the reference set
    - start_monitoring: requires a reference; launches both loops
    - stop_monitoring: flips the monitoring flag, loops wind down on their own
    - stop_camera: stops monitoring, releases media, clears the reference set

    Failures never raise out of these methods; they update the status
    message and return False.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        session_id: Optional[str] = None,
        face_detector: Optional[FaceDetector] = None,
        camera_factory: Optional[Callable[[], Camera]] = None,
        microphone_factory: Optional[Callable[[], Microphone]] = None,
        overlay: Optional[Overlay] = None
    ):
        """
        Initialize a proctoring session.

        Args:
            config: Settings (defaults to the service settings)
            session_id: Optional custom session ID (auto-generated if not provided)
            face_detector: Face detector (defaults to face_recognition + DeepFace)
            camera_factory: Callable returning an opened camera
            microphone_factory: Callable returning an opened microphone
            overlay: Rendering sink for the face loop
        """
        self.settings = config or default_settings
        self.id = session_id or f"PRX_{uuid.uuid4().hex[:6].upper()}"

        self.context = SessionContext(session_id=self.id, overlay=overlay or Overlay())
        self.face_detector = face_detector or FaceDetector(model=self.settings.FACE_DETECTION_MODEL)
        self.verifier = FaceVerifier(self.context.store, tolerance=self.settings.FACE_MATCH_TOLERANCE)
        self.audio_detector = AudioDetector(
            noise_threshold=self.settings.NOISE_THRESHOLD,
            voices_threshold=self.settings.MULTIPLE_VOICES_THRESHOLD,
            peak_threshold=self.settings.PEAK_MAGNITUDE_THRESHOLD
        )

        self._camera_factory = camera_factory or self._open_camera
        self._microphone_factory = microphone_factory or self._open_microphone

        self.models_loaded = False
        self.face_monitor: Optional[FaceMonitor] = None
        self.audio_monitor: Optional[AudioMonitor] = None
        self._tasks: List[asyncio.Task] = []

        self.aggregator.set_notice(LOADING_MESSAGE)

    @property
    def state(self) -> SessionState:
        return self.context.state

    @property
    def store(self):
        return self.context.store

    @property
    def aggregator(self):
        return self.context.aggregator

    @property
    def status_message(self) -> str:
        return self.aggregator.status_message

    # ============== Models ==============

    def load_models(self) -> bool:
        """Load face models; on failure capture and monitoring stay disabled"""
        try:
            self.face_detector.load()
        except ModelLoadFailure as e:
            logger.error(f"Error loading models: {e}")
            self.models_loaded = False
            self.aggregator.set_notice(e.status_message)
            return False

        self.models_loaded = True
        self.aggregator.set_notice(MODELS_LOADED_MESSAGE)
        return True

    # ============== Camera ==============

    async def start_camera(self) -> bool:
        """Open camera and microphone"""
        if self.state.camera_on:
            return True

        try:
            camera = await asyncio.to_thread(self._camera_factory)
            try:
                microphone = await asyncio.to_thread(self._microphone_factory)
            except MediaAccessDenied:
                camera.release()
                raise
        except MediaAccessDenied as e:
            logger.error(f"Error accessing devices: {e}")
            self.aggregator.set_notice(e.status_message)
            return False

        self.context.camera = camera
        self.context.microphone = microphone
        self.state.camera_on = True
        self.aggregator.set_notice(CAMERA_STARTED_MESSAGE)
        log_proctor_event(self.id, "camera_start")
        return True

    async def stop_camera(self) -> bool:
        """Stop monitoring, release media and forget the reference set"""
        was_monitoring = self.state.monitoring
        self.state.monitoring = False
        await self.wait_stopped()

        if self.context.camera is not None:
            self.context.camera.release()
            self.context.camera = None
        if self.context.microphone is not None:
            self.context.microphone.release()
            self.context.microphone = None

        self.store.clear()
        self.verifier.reset()
        self.state.reset()
        self.context.overlay.clear()
        self.aggregator.end_monitoring(CAMERA_STOPPED_MESSAGE)

        if was_monitoring:
            self._log_monitoring_end()
        log_proctor_event(self.id, "camera_stop")
        return True

    # ============== Reference ==============

    async def capture_reference(self) -> bool:
        """Capture every face currently visible as the reference set"""
        if not self.state.camera_on or self.context.camera is None:
            self.aggregator.set_notice(CAMERA_REQUIRED_MESSAGE)
            return False
        if not self.models_loaded and not await asyncio.to_thread(self.load_models):
            return False

        try:
            frame = await asyncio.to_thread(self.context.camera.read)
            if frame is None:
                raise NoFaceFound("Camera returned no frame")
            faces = await asyncio.to_thread(self.face_detector.detect, frame)
            count = self.store.capture(face.descriptor for face in faces)
        except NoFaceFound as e:
            logger.info(f"Reference capture failed: {e}")
            self.aggregator.set_notice(e.status_message)
            return False
        except Exception as e:
            logger.exception(f"Reference capture error: {e}")
            self.aggregator.set_notice(CAPTURE_FAILED_MESSAGE)
            return False

        self.aggregator.set_notice(REFERENCE_CAPTURED_MESSAGE)
        log_proctor_event(self.id, "reference_captured", {"faces": count})
        return True

    # ============== Monitoring ==============

    async def start_monitoring(self) -> bool:
        """Launch the face and audio loops"""
        if not self.state.reference_captured:
            self.aggregator.set_notice(REFERENCE_REQUIRED_MESSAGE)
            return False
        if self.state.monitoring:
            return True

        # Loops from a previous run exit on their next flag check
        await self.wait_stopped()

        self.aggregator.begin_monitoring()
        self.context.overlay.clear()
        self.state.monitoring = True

        interval = self.settings.TICK_INTERVAL
        self.face_monitor = FaceMonitor(self.context, self.face_detector, self.verifier, interval)
        self.audio_monitor = AudioMonitor(self.context, self.audio_detector, interval)
        self._tasks = [
            asyncio.create_task(self.face_monitor.run(), name=f"{self.id}-face"),
            asyncio.create_task(self.audio_monitor.run(), name=f"{self.id}-audio"),
        ]

        log_session_start(self.id, len(self.store))
        return True

    async def stop_monitoring(self) -> bool:
        """Flip the monitoring flag; running loops stop at their next check"""
        was_monitoring = self.state.monitoring
        self.state.monitoring = False
        self.context.overlay.clear()
        self.aggregator.end_monitoring(MONITORING_STOPPED_MESSAGE)

        if was_monitoring:
            self._log_monitoring_end()
        return True

    async def wait_stopped(self):
        """Wait for loop tasks to finish after the flag went false"""
        pending = [task for task in self._tasks if not task.done()]
        if pending:
            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Monitoring loop ended with error: {result!r}")
        self._tasks = []

    async def shutdown(self):
        """Release everything (service shutdown)"""
        await self.stop_camera()

    def _log_monitoring_end(self):
        log_session_end(
            self.id,
            self.face_monitor.ticks if self.face_monitor else 0,
            self.audio_monitor.ticks if self.audio_monitor else 0,
            self.aggregator.alerts_raised
        )

    # ============== Status ==============

    def get_status(self) -> Dict[str, Any]:
        """
        Get the current session status.

        Returns:
            Dict with state flags, alert flags, status message and expressions
        """
        summary = self.aggregator.get_summary()
        return {
            **self.state.as_dict(),
            **summary,
            "models_loaded": self.models_loaded,
            "reference_faces": len(self.store),
            "detection_error": self.aggregator.detection_error,
            "verification": self.verifier.get_metrics(),
            "audio": self.audio_detector.get_metrics()
        }

    # ============== Default media factories ==============

    def _open_camera(self) -> Camera:
        camera = Camera(
            index=self.settings.CAMERA_INDEX,
            width=self.settings.FRAME_WIDTH,
            height=self.settings.FRAME_HEIGHT
        )
        camera.open()
        return camera

    def _open_microphone(self) -> Microphone:
        return open_microphone(
            sample_rate=self.settings.AUDIO_SAMPLE_RATE,
            fft_size=self.settings.FFT_SIZE,
            smoothing=self.settings.SMOOTHING_TIME_CONSTANT,
            min_db=self.settings.MIN_DECIBELS,
            max_db=self.settings.MAX_DECIBELS
        )
