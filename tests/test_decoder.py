"""Unit tests for AudioDecoder."""

import io
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from conftest import make_wav_bytes
from padsampler.audio import AudioDecoder, is_supported_audio_file
from padsampler.exceptions import SampleDecodeError


class TestDecode:
    """Test decoding encoded containers."""

    @pytest.mark.unit
    def test_decode_wav(self, wav_bytes):
        """Test decoding a mono float WAV."""
        audio = AudioDecoder().decode(wav_bytes, "kick.wav")

        assert audio.sample_rate == 8000
        assert audio.num_channels == 1
        assert audio.num_frames == 800
        assert audio.format == "WAV"
        assert audio.subtype == "FLOAT"
        assert np.allclose(audio.data, 0.5)

    @pytest.mark.unit
    def test_decode_stereo_flac(self):
        """Test decoding another container."""
        data = np.column_stack([np.full(100, 0.25), np.full(100, -0.25)])
        buffer = io.BytesIO()
        sf.write(buffer, data, 8000, format='FLAC', subtype='PCM_16')

        audio = AudioDecoder().decode(buffer.getvalue())

        assert audio.num_channels == 2
        assert audio.format == "FLAC"
        assert np.allclose(audio.data[:, 0], 0.25, atol=1e-4)

    @pytest.mark.unit
    def test_empty_bytes(self):
        with pytest.raises(SampleDecodeError) as exc_info:
            AudioDecoder().decode(b"", "empty.wav")

        assert exc_info.value.kind == "decode_failure"
        assert exc_info.value.source == "empty.wav"

    @pytest.mark.unit
    def test_garbage_bytes(self):
        with pytest.raises(SampleDecodeError, match="notes.txt"):
            AudioDecoder().decode(b"this is not audio at all", "notes.txt")

    @pytest.mark.unit
    def test_zero_frames(self):
        with pytest.raises(SampleDecodeError):
            AudioDecoder().decode(make_wav_bytes(num_frames=0))

    @pytest.mark.unit
    def test_resamples_to_target_rate(self):
        """Test linear resampling to the bus rate."""
        audio = AudioDecoder(target_sample_rate=16000).decode(make_wav_bytes(num_frames=800))

        assert audio.sample_rate == 16000
        assert audio.num_frames == 1600
        assert audio.duration == pytest.approx(0.1)
        assert np.allclose(audio.data, 0.5)

    @pytest.mark.unit
    def test_resamples_stereo(self):
        audio = AudioDecoder(target_sample_rate=4000).decode(make_wav_bytes(channels=2))
        assert audio.shape == (400, 2)

    @pytest.mark.unit
    def test_matching_rate_not_resampled(self, wav_bytes):
        audio = AudioDecoder(target_sample_rate=8000).decode(wav_bytes)
        assert audio.num_frames == 800

    @pytest.mark.unit
    def test_get_info(self, wav_bytes):
        info = AudioDecoder.get_info(wav_bytes)

        assert info['sample_rate'] == 8000
        assert info['channels'] == 1
        assert info['frames'] == 800


class TestDecodeRaw:
    """Test decoding the capture stream format."""

    @pytest.mark.unit
    def test_decode_raw_stereo(self):
        frames = np.array([[0.5, -0.5], [0.25, -0.25]], dtype="<f4")

        audio = AudioDecoder().decode_raw(frames.tobytes(), 8000, 2)

        assert audio.num_frames == 2
        assert np.array_equal(audio.data, frames)

    @pytest.mark.unit
    def test_decode_raw_empty(self):
        audio = AudioDecoder().decode_raw(b"", 8000, 2)

        assert audio.num_frames == 0
        assert audio.num_channels == 2

    @pytest.mark.unit
    def test_decode_raw_partial_frame(self):
        with pytest.raises(SampleDecodeError) as excinfo:
            AudioDecoder().decode_raw(b"\x00" * 12, 8000, 2)

        assert "multiple" in excinfo.value.technical_message


class TestSupportedFiles:
    """Test upload filtering."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["kick.wav", "SNARE.WAV", "loop.flac", "vox.mp3", "pad.aiff"])
    def test_supported_extensions(self, name):
        assert is_supported_audio_file(Path(name))

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["notes.txt", "image.png", "noext"])
    def test_unsupported_extensions(self, name):
        assert not is_supported_audio_file(Path(name))

    @pytest.mark.unit
    def test_mime_type_wins(self):
        assert is_supported_audio_file(Path("upload.bin"), mime_type="audio/x-wav")
        assert not is_supported_audio_file(Path("upload.bin"), mime_type="text/plain")
