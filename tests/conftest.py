"""
Pytest Configuration for Proxy Guard Tests

Provides fake camera, microphone and face detector so no hardware or model
weights are needed.
"""
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from proxyguard.config import Settings  # noqa: E402
from proxyguard.proctor.types import DetectedFace, freeze_descriptor  # noqa: E402

DESCRIPTOR_SIZE = 128


def descriptor_at(distance: float, axis: int = 0) -> np.ndarray:
    """Descriptor exactly `distance` away from the all-zero reference"""
    values = np.zeros(DESCRIPTOR_SIZE)
    values[axis] = distance
    return freeze_descriptor(values)


def make_face(distance: float = 0.0, box=(10, 20, 100, 120), expressions=None) -> DetectedFace:
    """DetectedFace whose descriptor sits `distance` from the zero reference"""
    return DetectedFace(
        box=box,
        descriptor=descriptor_at(distance),
        expressions=expressions if expressions is not None else {"neutral": 0.9, "happy": 0.1}
    )


class FakeCamera:
    """Returns a blank frame on every read"""

    def __init__(self, width=640, height=480):
        self.frame = np.zeros((height, width, 3), dtype=np.uint8)
        self.released = False
        self.reads = 0

    def read(self):
        self.reads += 1
        return None if self.released else self.frame.copy()

    def release(self):
        self.released = True


class FakeMicrophone:
    """Serves whatever frequency bins the test sets"""

    def __init__(self, bins=None):
        self.bins = bins if bins is not None else np.zeros(1024, dtype=np.uint8)
        self.released = False

    def get_byte_frequency_data(self):
        return self.bins

    def release(self):
        self.released = True


class FakeFaceDetector:
    """Returns a preset face list; can be told to fail"""

    def __init__(self, faces=None):
        self.faces = faces if faces is not None else []
        self.error = None
        self.load_error = None
        self.loaded = False
        self.calls = 0

    def load(self):
        if self.load_error is not None:
            raise self.load_error
        self.loaded = True

    def detect(self, frame):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.faces)


@pytest.fixture
def test_settings():
    """Settings with a fast tick and no model preloading"""
    return Settings(TICK_INTERVAL=0.001, PRELOAD_MODELS=False, LOG_TO_FILE=False)


@pytest.fixture
def camera():
    return FakeCamera()


@pytest.fixture
def microphone():
    return FakeMicrophone()


@pytest.fixture
def face_detector():
    return FakeFaceDetector(faces=[make_face(0.0)])


@pytest.fixture
def session(test_settings, camera, microphone, face_detector):
    """ProctorSession wired to fakes"""
    from proxyguard.proctor.session import ProctorSession

    return ProctorSession(
        config=test_settings,
        session_id="PRX_TEST",
        face_detector=face_detector,
        camera_factory=lambda: camera,
        microphone_factory=lambda: microphone
    )
