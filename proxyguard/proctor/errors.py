"""
Proctoring errors

None of these ever escape a monitoring loop; the session controller turns
them into status messages.
"""


class ProctorError(Exception):
    """Base class for proctoring failures"""

    status_message = "Something went wrong."


class ModelLoadFailure(ProctorError):
    """Face recognition or expression models could not be loaded"""

    status_message = "Error loading models. Please reload."


class MediaAccessDenied(ProctorError):
    """Camera or microphone could not be opened"""

    status_message = "Please allow camera and microphone permissions."


class NoFaceFound(ProctorError):
    """Reference capture frame contained no face"""

    status_message = "No face detected! Please try again."


class DetectionTickFailure(ProctorError):
    """A single detection tick failed; the loop carries on"""

    status_message = "Face detection error, retrying..."
