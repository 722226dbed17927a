"""Tests for the 16-bit PCM WAV encoder."""

import io
import struct

import numpy as np
import pytest
import soundfile as sf

from padsampler.audio import AudioData, encode_channels, encode_wav, parse_header
from padsampler.audio.wav import HEADER_SIZE, build_header, float_to_pcm16
from padsampler.exceptions import EncodeError


def pcm_samples(data: bytes) -> np.ndarray:
    return np.frombuffer(data[HEADER_SIZE:], dtype="<i2")


@pytest.mark.unit
class TestKnownBuffer:
    """Two channels, two frames: [[1.0, -1.0], [0.0, 0.5]] at 44.1 kHz."""

    @pytest.fixture
    def encoded(self):
        return encode_channels([[1.0, -1.0], [0.0, 0.5]], 44100)

    def test_total_size(self, encoded):
        assert len(encoded) == 44 + 8

    def test_header_fields(self, encoded):
        header = parse_header(encoded)

        assert header.audio_format == 1
        assert header.num_channels == 2
        assert header.sample_rate == 44100
        assert header.bits_per_sample == 16
        assert header.data_size == 8
        assert header.riff_size == 36 + 8
        assert header.byte_rate == 44100 * 2 * 2
        assert header.block_align == 4
        assert header.num_frames == 2

    def test_header_tags(self, encoded):
        assert encoded[0:4] == b"RIFF"
        assert encoded[8:12] == b"WAVE"
        assert encoded[12:16] == b"fmt "
        assert encoded[36:40] == b"data"
        assert struct.unpack_from("<I", encoded, 16)[0] == 16

    def test_interleaved_samples(self, encoded):
        # frame 0: ch0=1.0, ch1=0.0; frame 1: ch0=-1.0, ch1=0.5
        assert pcm_samples(encoded).tolist() == [32767, 0, -32768, 16383]

    def test_values_within_one_step(self, encoded):
        samples = pcm_samples(encoded).astype(np.float64)
        assert abs(samples[3] / 32767 - 0.5) < 1 / 32768
        assert samples[1] == 0

    def test_readable_by_soundfile(self, encoded):
        data, sample_rate = sf.read(io.BytesIO(encoded), dtype="float32")

        assert sample_rate == 44100
        assert data.shape == (2, 2)
        assert data[1, 0] == pytest.approx(-1.0)
        assert data[1, 1] == pytest.approx(0.5, abs=2 / 32768)


@pytest.mark.unit
class TestConversion:
    """Test float to int16 conversion."""

    def test_clamps_out_of_range(self):
        assert float_to_pcm16([2.0, -3.0, 1.5]).tolist() == [32767, -32768, 32767]

    def test_negative_scale_is_32768(self):
        assert float_to_pcm16([-0.5]).tolist() == [-16384]

    def test_truncates_toward_zero(self):
        # 0.3 * 32767 = 9830.1, -0.3 * 32768 = -9830.4
        assert float_to_pcm16([0.3, -0.3]).tolist() == [9830, -9830]

    def test_tiny_values_become_zero(self):
        assert float_to_pcm16([1e-5, -1e-5]).tolist() == [0, 0]

    def test_little_endian_storage(self):
        encoded = encode_channels([[1.0]], 8000)
        assert encoded[HEADER_SIZE:] == b"\xff\x7f"


@pytest.mark.unit
class TestValidation:
    """Test rejected input."""

    def test_mismatched_channel_lengths(self):
        with pytest.raises(EncodeError, match="lengths differ"):
            encode_channels([[0.0, 0.1, 0.2], [0.0, 0.1]], 44100)

    def test_no_channels(self):
        with pytest.raises(EncodeError):
            encode_channels([], 44100)

    def test_non_positive_sample_rate(self):
        with pytest.raises(EncodeError):
            encode_channels([[0.0]], 0)

    def test_encode_error_kind(self):
        with pytest.raises(EncodeError) as exc_info:
            encode_channels([[0.0], [0.0, 0.0]], 44100)
        assert exc_info.value.kind == "encode_failure"


@pytest.mark.unit
class TestEncodeWav:
    """Test encoding AudioData buffers."""

    def test_empty_buffer_is_header_only(self):
        encoded = encode_wav(AudioData.silence(0, 44100, num_channels=2))

        assert len(encoded) == HEADER_SIZE
        header = parse_header(encoded)
        assert header.data_size == 0
        assert header.num_channels == 2

    def test_mono_buffer(self, sample_audio_array):
        audio = AudioData.from_array(sample_audio_array, sample_rate=8000)
        encoded = encode_wav(audio)

        header = parse_header(encoded)
        assert header.num_channels == 1
        assert header.num_frames == len(sample_audio_array)

    def test_stereo_buffer_matches_channels(self):
        stereo = np.column_stack([np.full(10, 0.25), np.full(10, -0.25)]).astype(np.float32)
        encoded = encode_wav(AudioData.from_array(stereo, sample_rate=8000))

        samples = pcm_samples(encoded).reshape(-1, 2)
        assert (samples[:, 0] == 8191).all()
        assert (samples[:, 1] == -8192).all()

    def test_deterministic(self, sample_audio_array):
        audio = AudioData.from_array(sample_audio_array, sample_rate=8000)
        assert encode_wav(audio) == encode_wav(audio)


@pytest.mark.unit
class TestParseHeader:
    """Test header parsing helpers."""

    def test_build_header_round_trip(self):
        header = parse_header(build_header(100, 22050, 1))
        assert header.num_frames == 100
        assert header.sample_rate == 22050

    def test_rejects_short_input(self):
        with pytest.raises(ValueError):
            parse_header(b"RIFF")

    def test_rejects_non_wav(self):
        with pytest.raises(ValueError, match="canonical"):
            parse_header(b"\x00" * HEADER_SIZE)
