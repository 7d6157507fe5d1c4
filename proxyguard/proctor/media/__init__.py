"""Camera and microphone acquisition"""

from .camera import Camera
from .microphone import FrequencyAnalyser, Microphone, open_microphone

__all__ = ["Camera", "FrequencyAnalyser", "Microphone", "open_microphone"]
