"""
Proctoring data types shared by the detectors, loops and reporter
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np

# 128-d identity embedding; stored read-only
FaceDescriptor = np.ndarray

# (x, y, width, height) in frame pixels
BoundingBox = Tuple[int, int, int, int]

# Fixed label order used for tie-breaking the dominant expression
EXPRESSION_LABELS: Tuple[str, ...] = (
    "neutral",
    "happy",
    "sad",
    "angry",
    "fearful",
    "disgusted",
    "surprised",
)


def freeze_descriptor(values) -> FaceDescriptor:
    """Copy a descriptor into a read-only float64 array"""
    descriptor = np.array(values, dtype=np.float64, copy=True)
    descriptor.flags.writeable = False
    return descriptor


@dataclass(frozen=True)
class DetectedFace:
    """One face found in one frame; lives for a single detection tick"""
    box: BoundingBox
    descriptor: FaceDescriptor
    expressions: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class FrameResult:
    """Aggregate of every face detected in a frame"""
    expressions: Dict[str, str] = field(default_factory=dict)
    authorized: Tuple[bool, ...] = ()
    unauthorized_present: bool = False

    @property
    def face_count(self) -> int:
        return len(self.authorized)


@dataclass(frozen=True)
class AudioVerdict:
    """Result of analysing one frequency snapshot"""
    noise_detected: bool = False
    multiple_voices: bool = False
    loudness: float = 0.0
    peak_count: int = 0

    @property
    def audio_proxy(self) -> bool:
        return self.noise_detected or self.multiple_voices


@dataclass
class SessionState:
    """Which loops may run"""
    camera_on: bool = False
    reference_captured: bool = False
    monitoring: bool = False

    def reset(self):
        self.camera_on = False
        self.reference_captured = False
        self.monitoring = False

    def as_dict(self) -> Dict[str, bool]:
        return {
            "camera_on": self.camera_on,
            "reference_captured": self.reference_captured,
            "monitoring": self.monitoring,
        }


@dataclass
class Annotation:
    """A box drawn on the overlay"""
    box: BoundingBox
    color: Tuple[int, int, int]
    label: str
