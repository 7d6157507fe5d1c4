"""
Face Verifier - Matches live face descriptors against the reference set

Descriptors come from dlib's ResNet model (via face_recognition), so two
descriptors of the same person sit within ~0.5 Euclidean distance.
"""

import logging
from typing import Any, Dict, List, Sequence

import numpy as np

from ..reference_store import DescriptorStore
from ..types import DetectedFace, FaceDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.5


def euclidean_distance(a: FaceDescriptor, b: FaceDescriptor) -> float:
    """Euclidean distance between two descriptors"""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def is_authorized(
    descriptor: FaceDescriptor,
    reference_set: Sequence[FaceDescriptor],
    tolerance: float = DEFAULT_TOLERANCE
) -> bool:
    """
    Check whether a descriptor matches any reference descriptor.

    Args:
        descriptor: Descriptor of the face under test
        reference_set: Captured reference descriptors
        tolerance: Match if the closest distance is strictly below this

    Returns:
        True iff the minimum distance is < tolerance. An empty reference set
        never authorizes.
    """
    if len(reference_set) == 0:
        return False
    closest = min(euclidean_distance(descriptor, ref) for ref in reference_set)
    return closest < tolerance


class FaceVerifier:
    """
    Verifies detected faces against the session's descriptor store.

    Keeps running counts so the status endpoint can report how often
    faces matched.
    """

    def __init__(self, store: DescriptorStore, tolerance: float = DEFAULT_TOLERANCE):
        """
        Initialize face verifier.

        Args:
            store: Reference descriptor store for this session
            tolerance: Euclidean distance below which a face is authorized
        """
        self.store = store
        self.tolerance = tolerance

        self._verification_count = 0
        self._verified_count = 0

    def verify(self, face: DetectedFace) -> bool:
        """Return True if the face matches a reference descriptor"""
        self._verification_count += 1
        verified = is_authorized(face.descriptor, self.store.descriptors, self.tolerance)
        if verified:
            self._verified_count += 1
        return verified

    def verify_all(self, faces: Sequence[DetectedFace]) -> List[bool]:
        """Verify every face in a frame, preserving order"""
        return [self.verify(face) for face in faces]

    def get_metrics(self) -> Dict[str, Any]:
        """Get verification metrics"""
        return {
            "verification_count": self._verification_count,
            "verified_count": self._verified_count,
            "verification_rate": self._verified_count / max(1, self._verification_count),
            "reference_faces": len(self.store),
            "tolerance": self.tolerance
        }

    def reset(self):
        """Reset verification counters"""
        self._verification_count = 0
        self._verified_count = 0
