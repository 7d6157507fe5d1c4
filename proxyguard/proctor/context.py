"""
Session Context - State shared between the controller and the two loops
"""

from dataclasses import dataclass, field
from typing import Optional

from .media import Camera, Microphone
from .metrics import VerdictAggregator
from .reference_store import DescriptorStore
from .types import SessionState
from .utils.overlay import Overlay


@dataclass
class SessionContext:
    """
    Everything the monitoring loops read.

    Written only by the session controller; the loops read the monitoring
    flag and the store, and publish into the aggregator.
    """

    session_id: str
    state: SessionState = field(default_factory=SessionState)
    store: Optional[DescriptorStore] = None
    aggregator: Optional[VerdictAggregator] = None
    overlay: Overlay = field(default_factory=Overlay)
    camera: Optional[Camera] = None
    microphone: Optional[Microphone] = None

    def __post_init__(self):
        if self.store is None:
            self.store = DescriptorStore(self.state)
        if self.aggregator is None:
            self.aggregator = VerdictAggregator(session_id=self.session_id)

    @property
    def monitoring(self) -> bool:
        return self.state.monitoring
