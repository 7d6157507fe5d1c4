"""
Audio Detector - Flags background noise and multiple voices

Works on byte frequency snapshots (one magnitude per FFT bin, 0-255):
- Loudness: RMS of all bins divided by 255
- Voices: number of bins above a peak magnitude
"""

import logging
from typing import Any, Dict

import numpy as np

from ..types import AudioVerdict

logger = logging.getLogger(__name__)

MAX_BIN_VALUE = 255.0


def normalized_loudness(bins: np.ndarray) -> float:
    """Root-mean-square of the bin magnitudes scaled to [0, 1]"""
    values = np.asarray(bins, dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(values ** 2)) / MAX_BIN_VALUE)


def count_peaks(bins: np.ndarray, peak_threshold: int) -> int:
    """Number of bins whose magnitude is strictly above peak_threshold"""
    return int(np.count_nonzero(np.asarray(bins) > peak_threshold))


class AudioDetector:
    """
    Detects suspicious audio in frequency snapshots.

    A snapshot is noisy when its normalized loudness exceeds the noise
    threshold, and carries multiple voices when more than
    ``voices_threshold`` bins peak above ``peak_threshold``.
    """

    DEFAULT_NOISE_THRESHOLD = 0.4
    DEFAULT_VOICES_THRESHOLD = 5
    DEFAULT_PEAK_THRESHOLD = 150

    def __init__(
        self,
        noise_threshold: float = DEFAULT_NOISE_THRESHOLD,
        voices_threshold: int = DEFAULT_VOICES_THRESHOLD,
        peak_threshold: int = DEFAULT_PEAK_THRESHOLD
    ):
        """
        Initialize audio detector.

        Args:
            noise_threshold: Normalized loudness above which noise is flagged
            voices_threshold: Peak count above which multiple voices are flagged
            peak_threshold: Bin magnitude (0-255) that counts as a peak
        """
        self.noise_threshold = noise_threshold
        self.voices_threshold = voices_threshold
        self.peak_threshold = peak_threshold

        self._total_samples = 0
        self._suspicious_samples = 0
        self._consecutive_suspicious = 0

    def analyze(self, bins: np.ndarray) -> AudioVerdict:
        """
        Analyze one frequency snapshot.

        Args:
            bins: Byte frequency data from the analysis node

        Returns:
            AudioVerdict with both conditions and the raw measurements
        """
        loudness = normalized_loudness(bins)
        peaks = count_peaks(bins, self.peak_threshold)

        verdict = AudioVerdict(
            noise_detected=loudness > self.noise_threshold,
            multiple_voices=peaks > self.voices_threshold,
            loudness=loudness,
            peak_count=peaks
        )

        self._total_samples += 1
        if verdict.audio_proxy:
            self._suspicious_samples += 1
            self._consecutive_suspicious += 1
        else:
            self._consecutive_suspicious = 0

        return verdict

    def get_metrics(self) -> Dict[str, Any]:
        """Get accumulated audio metrics"""
        return {
            "total_samples": self._total_samples,
            "suspicious_samples": self._suspicious_samples,
            "suspicious_ratio": self._suspicious_samples / max(1, self._total_samples),
            "current_consecutive_suspicious": self._consecutive_suspicious,
            "noise_threshold": self.noise_threshold,
            "voices_threshold": self.voices_threshold
        }

    def reset(self):
        """Reset detection counters"""
        self._total_samples = 0
        self._suspicious_samples = 0
        self._consecutive_suspicious = 0
