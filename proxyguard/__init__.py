"""
Proxy Guard - live proxy detection for online assessments

Captures a reference face, then watches the camera and microphone for
unrecognized faces, background noise and multiple voices.
"""

__version__ = "1.0.0"
