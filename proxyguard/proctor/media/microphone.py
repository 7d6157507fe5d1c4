"""
Microphone - PyAudio capture feeding an AnalyserNode-style frequency analyser

The analyser reproduces the byte frequency data a browser AnalyserNode
returns: Blackman-windowed FFT, magnitudes smoothed over time, converted to
decibels and mapped linearly from [min_db, max_db] onto [0, 255].
"""

import logging
import threading

import numpy as np

from ..errors import MediaAccessDenied

logger = logging.getLogger(__name__)


def blackman_window(size: int) -> np.ndarray:
    """Periodic Blackman window (alpha = 0.16)"""
    n = np.arange(size)
    return (
        0.42
        - 0.5 * np.cos(2 * np.pi * n / size)
        + 0.08 * np.cos(4 * np.pi * n / size)
    )


class FrequencyAnalyser:
    """
    Keeps the most recent ``fft_size`` samples and turns them into
    ``fft_size // 2`` byte frequency bins on demand.
    """

    def __init__(
        self,
        fft_size: int = 2048,
        smoothing: float = 0.8,
        min_db: float = -100.0,
        max_db: float = -30.0
    ):
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError("fft_size must be a power of two >= 32")
        if not min_db < max_db:
            raise ValueError("min_db must be below max_db")

        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_db = min_db
        self.max_db = max_db

        self._window = blackman_window(fft_size)
        self._buffer = np.zeros(fft_size, dtype=np.float64)
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)
        self._lock = threading.Lock()

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def push(self, samples: np.ndarray):
        """Append float samples in [-1, 1]; only the newest fft_size are kept"""
        samples = np.asarray(samples, dtype=np.float64).ravel()
        if samples.size == 0:
            return
        with self._lock:
            if samples.size >= self.fft_size:
                self._buffer[:] = samples[-self.fft_size:]
            else:
                self._buffer = np.roll(self._buffer, -samples.size)
                self._buffer[-samples.size:] = samples

    def push_int16(self, data: bytes):
        """Append raw little-endian int16 PCM"""
        samples = np.frombuffer(data, dtype=np.int16).astype(np.float64) / 32768.0
        self.push(samples)

    def get_byte_frequency_data(self) -> np.ndarray:
        """
        Compute the current frequency snapshot.

        Returns:
            uint8 array of frequency_bin_count magnitudes
        """
        with self._lock:
            frame = self._buffer * self._window

        spectrum = np.fft.rfft(frame)[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * magnitude

        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(self._smoothed)

        scaled = (255.0 / (self.max_db - self.min_db)) * (decibels - self.min_db)
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=255.0)
        return np.clip(np.floor(scaled), 0, 255).astype(np.uint8)

    def reset(self):
        with self._lock:
            self._buffer[:] = 0.0
        self._smoothed[:] = 0.0


class Microphone:
    """
    Opens the default input device with PyAudio and streams PCM chunks into
    a FrequencyAnalyser from PortAudio's callback thread.
    """

    def __init__(
        self,
        analyser: FrequencyAnalyser,
        sample_rate: int = 44100,
        chunk_size: int = 1024
    ):
        self.analyser = analyser
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size

        self._pa = None
        self._stream = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self):
        """
        Start capturing.

        Raises:
            MediaAccessDenied: if PyAudio is missing or no input device opens
        """
        try:
            import pyaudio
        except ImportError as e:
            raise MediaAccessDenied("PyAudio not installed. Run: pip install pyaudio") from e

        pa = pyaudio.PyAudio()

        def on_audio(in_data, frame_count, time_info, status):
            self.analyser.push_int16(in_data)
            return (None, pyaudio.paContinue)

        try:
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                stream_callback=on_audio
            )
        except OSError as e:
            pa.terminate()
            raise MediaAccessDenied(f"Could not open microphone: {e}") from e

        stream.start_stream()
        self._pa = pa
        self._stream = stream
        logger.info(f"Microphone opened ({self.sample_rate} Hz)")

    def get_byte_frequency_data(self) -> np.ndarray:
        return self.analyser.get_byte_frequency_data()

    def release(self):
        if self._stream is not None:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None
        self.analyser.reset()
        logger.info("Microphone released")


def open_microphone(
    sample_rate: int = 44100,
    fft_size: int = 2048,
    smoothing: float = 0.8,
    min_db: float = -100.0,
    max_db: float = -30.0
) -> Microphone:
    """Build and open a microphone with its analyser"""
    analyser = FrequencyAnalyser(fft_size, smoothing, min_db, max_db)
    microphone = Microphone(analyser, sample_rate=sample_rate)
    microphone.open()
    return microphone
