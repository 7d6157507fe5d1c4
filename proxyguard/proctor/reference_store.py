"""
Descriptor Store - Holds the reference face descriptors for one session
"""

import logging
from typing import Iterable, Optional, Tuple

from .errors import NoFaceFound
from .types import FaceDescriptor, SessionState, freeze_descriptor

logger = logging.getLogger(__name__)


class DescriptorStore:
    """
    Reference descriptor set captured once per session.

    A capture replaces the whole set; there is no incremental add. Only the
    session controller writes to it, the face loop only reads.
    """

    def __init__(self, state: Optional[SessionState] = None):
        self._state = state or SessionState()
        self._descriptors: Tuple[FaceDescriptor, ...] = ()

    @property
    def descriptors(self) -> Tuple[FaceDescriptor, ...]:
        return self._descriptors

    @property
    def captured(self) -> bool:
        return self._state.reference_captured

    def __len__(self) -> int:
        return len(self._descriptors)

    def __bool__(self) -> bool:
        return len(self._descriptors) > 0

    def capture(self, descriptors: Iterable[FaceDescriptor]) -> int:
        """
        Replace the reference set with the given descriptors.

        Args:
            descriptors: Descriptors of every face visible in the capture frame

        Returns:
            Number of descriptors stored

        Raises:
            NoFaceFound: if no descriptor was supplied; the store is left as is
        """
        frozen = tuple(freeze_descriptor(d) for d in descriptors)
        if not frozen:
            raise NoFaceFound("No face detected in capture frame")

        self._descriptors = frozen
        self._state.reference_captured = True
        logger.info(f"Reference set captured: {len(frozen)} face(s)")
        return len(frozen)

    def clear(self):
        """Empty the store and reset the captured flag"""
        self._descriptors = ()
        self._state.reference_captured = False
