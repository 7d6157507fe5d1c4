"""Utility modules"""

from .logging import log_proctor_event
from .overlay import Overlay

__all__ = ["log_proctor_event", "Overlay"]
