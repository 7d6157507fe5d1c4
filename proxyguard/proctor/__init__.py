"""
Proxy Guard Proctoring Module

Flags proxies during an assessment by detecting:
- Faces that do not match the captured reference
- Background noise
- Multiple simultaneous voices

Face and audio loops run independently; their verdicts are merged into a
single alert and status message.
"""

from .api import router

__all__ = ["router"]
