"""Audio layer: buffers, decoding, mixing, capture and PCM WAV encoding.

AudioDevice lives in padsampler.audio.device and is imported from there
directly, since loading sounddevice requires the PortAudio library.
"""

from .capture import CaptureDestination
from .data import AudioData, Voice
from .decoder import AudioDecoder, is_supported_audio_file
from .mixer import MixingBus
from .wav import WavHeader, encode_channels, encode_wav, parse_header

__all__ = [
    "AudioData",
    "AudioDecoder",
    "CaptureDestination",
    "MixingBus",
    "Voice",
    "WavHeader",
    "encode_channels",
    "encode_wav",
    "is_supported_audio_file",
    "parse_header",
]
