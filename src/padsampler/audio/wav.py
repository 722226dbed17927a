"""16-bit PCM WAV (RIFF) encoding.

Layout of the 44-byte header (all integers little-endian):

    offset  size  field
    0       4     "RIFF"
    4       4     36 + data size
    8       4     "WAVE"
    12      4     "fmt "
    16      4     16 (fmt chunk size)
    20      2     1 (PCM)
    22      2     channel count
    24      4     sample rate
    28      4     byte rate = sample_rate * channels * 2
    32      2     block align = channels * 2
    34      2     16 (bits per sample)
    36      4     "data"
    40      4     data size = frames * channels * 2
"""

import struct
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from padsampler.exceptions import EncodeError

from .data import AudioData

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True, slots=True)
class WavHeader:
    """Fields of a parsed canonical PCM header."""

    riff_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def num_frames(self) -> int:
        if self.block_align == 0:
            return 0
        return self.data_size // self.block_align


def float_to_pcm16(samples: npt.ArrayLike) -> npt.NDArray[np.int16]:
    """
    Convert float samples to signed 16-bit integers.

    Samples are clamped to [-1, 1]; negatives scale by 32768, the rest
    by 32767, and the result is truncated toward zero.
    """
    clamped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clamped < 0, clamped * 0x8000, clamped * 0x7FFF)
    return np.trunc(scaled).astype(np.int16)


def build_header(num_frames: int, sample_rate: int, num_channels: int) -> bytes:
    """Build the 44-byte RIFF/WAVE header for 16-bit PCM."""
    block_align = num_channels * BYTES_PER_SAMPLE
    data_size = num_frames * block_align
    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        num_channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def parse_header(data: bytes) -> WavHeader:
    """
    Parse a canonical 44-byte PCM header.

    Raises:
        ValueError: If the bytes do not start with a canonical RIFF/WAVE header
    """
    if len(data) < HEADER_SIZE:
        raise ValueError(f"Need {HEADER_SIZE} bytes, got {len(data)}")

    (riff, riff_size, wave, fmt, fmt_size, audio_format, num_channels, sample_rate,
     byte_rate, block_align, bits, data_tag, data_size) = _HEADER.unpack_from(data)

    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_tag != b"data" or fmt_size != 16:
        raise ValueError("Not a canonical RIFF/WAVE PCM header")

    return WavHeader(
        riff_size=riff_size,
        audio_format=audio_format,
        num_channels=num_channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        data_size=data_size,
    )


def encode_channels(channels: Sequence[npt.ArrayLike], sample_rate: int) -> bytes:
    """
    Encode per-channel float sample arrays as a 16-bit PCM WAV byte string.

    Frames are interleaved in channel order after the header.

    Raises:
        EncodeError: If there are no channels, the channel lengths differ,
                     or the sample rate is not positive
    """
    if len(channels) == 0:
        raise EncodeError("at least one channel is required")
    if sample_rate <= 0:
        raise EncodeError(f"sample rate must be positive, got {sample_rate}")

    arrays = [np.asarray(ch, dtype=np.float64).reshape(-1) for ch in channels]
    lengths = [len(a) for a in arrays]
    if len(set(lengths)) != 1:
        raise EncodeError(f"channel lengths differ: {lengths}")

    num_frames = lengths[0]
    num_channels = len(arrays)

    interleaved = np.column_stack(arrays).reshape(-1) if num_channels > 1 else arrays[0]
    pcm = float_to_pcm16(interleaved).astype("<i2", copy=False)

    return build_header(num_frames, sample_rate, num_channels) + pcm.tobytes()


def encode_wav(audio: AudioData) -> bytes:
    """Encode a decoded audio buffer as a 16-bit PCM WAV byte string."""
    return encode_channels(audio.channels(), audio.sample_rate)
