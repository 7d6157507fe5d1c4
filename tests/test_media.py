"""
Tests for the frequency analyser and camera wrapper
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest


class TestFrequencyAnalyser:
    """Tests for AnalyserNode-style byte frequency data"""

    def test_silence_gives_zero_bins(self):
        from proxyguard.proctor.media import FrequencyAnalyser

        analyser = FrequencyAnalyser()
        bins = analyser.get_byte_frequency_data()

        assert analyser.frequency_bin_count == 1024
        assert bins.shape == (1024,)
        assert bins.dtype == np.uint8
        assert not bins.any()

    def test_sine_peaks_at_its_bin(self):
        from proxyguard.proctor.media import FrequencyAnalyser

        analyser = FrequencyAnalyser(fft_size=2048)
        n = np.arange(2048)
        analyser.push(np.sin(2 * np.pi * 100 * n / 2048))

        bins = analyser.get_byte_frequency_data()

        assert bins[100] == 255
        assert int(np.argmax(bins)) in (99, 100, 101)
        assert bins[500] == 0

    def test_int16_input(self):
        from proxyguard.proctor.media import FrequencyAnalyser

        analyser = FrequencyAnalyser(fft_size=1024)
        n = np.arange(1024)
        pcm = (np.sin(2 * np.pi * 64 * n / 1024) * 30000).astype(np.int16)
        analyser.push_int16(pcm.tobytes())

        bins = analyser.get_byte_frequency_data()
        assert bins.shape == (512,)
        assert bins[64] == 255

    def test_reset_clears_history(self):
        from proxyguard.proctor.media import FrequencyAnalyser

        analyser = FrequencyAnalyser()
        analyser.push(np.ones(2048))
        analyser.get_byte_frequency_data()

        analyser.reset()
        assert not analyser.get_byte_frequency_data().any()

    @pytest.mark.parametrize("fft_size", [0, 16, 1000])
    def test_invalid_fft_size(self, fft_size):
        from proxyguard.proctor.media import FrequencyAnalyser

        with pytest.raises(ValueError):
            FrequencyAnalyser(fft_size=fft_size)

    def test_invalid_decibel_range(self):
        from proxyguard.proctor.media import FrequencyAnalyser

        with pytest.raises(ValueError):
            FrequencyAnalyser(min_db=-30.0, max_db=-100.0)


class TestCamera:
    """Tests for Camera with OpenCV mocked"""

    def test_open_failure_is_access_denied(self):
        from proxyguard.proctor.errors import MediaAccessDenied
        from proxyguard.proctor.media import Camera

        capture = MagicMock()
        capture.isOpened.return_value = False

        with patch("proxyguard.proctor.media.camera.cv2.VideoCapture", return_value=capture):
            with pytest.raises(MediaAccessDenied):
                Camera(index=3).open()

    def test_read_returns_none_on_failure(self):
        from proxyguard.proctor.media import Camera

        capture = MagicMock()
        capture.isOpened.return_value = True
        capture.read.return_value = (False, None)

        with patch("proxyguard.proctor.media.camera.cv2.VideoCapture", return_value=capture):
            camera = Camera()
            camera.open()
            assert camera.read() is None
            camera.release()

        capture.release.assert_called_once()
        assert camera.is_open is False
