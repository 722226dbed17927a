"""Audio decoder for turning encoded bytes into AudioData structures."""

import io
import logging
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf

from padsampler.exceptions import SampleDecodeError

from .data import AudioData

logger = logging.getLogger(__name__)

# Extensions accepted for user uploads
SUPPORTED_EXTENSIONS = frozenset({
    ".wav", ".wave", ".mp3", ".ogg", ".oga", ".webm", ".m4a", ".aac", ".flac", ".aif", ".aiff",
})

# MIME types accepted for user uploads
SUPPORTED_MIME_TYPES = frozenset({
    "audio/wav", "audio/wave", "audio/x-wav", "audio/mpeg", "audio/mp3", "audio/ogg",
    "audio/webm", "audio/aac", "audio/m4a", "audio/flac", "audio/aiff", "audio/x-aiff",
})


def is_supported_audio_file(path: Path, mime_type: Optional[str] = None) -> bool:
    """
    Check whether a file looks like a supported audio file.

    Args:
        path: File path (only the extension is inspected)
        mime_type: Optional MIME type reported by the caller
    """
    if mime_type is not None and mime_type.lower() in SUPPORTED_MIME_TYPES:
        return True
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


class AudioDecoder:
    """
    Decode encoded audio bytes into AudioData.

    Handles WAV, FLAC, OGG, AIFF and the other containers supported by
    libsndfile through soundfile.
    """

    def __init__(self, target_sample_rate: Optional[int] = None):
        """
        Initialize decoder.

        Args:
            target_sample_rate: If set, resample all audio to this rate.
                               If None, keep the original sample rate.
        """
        self.target_sample_rate = target_sample_rate

    def decode(self, data: bytes, source: str = "<bytes>") -> AudioData:
        """
        Decode an encoded audio container.

        Args:
            data: Encoded audio bytes
            source: Label used in error messages (URL, path, ...)

        Returns:
            AudioData containing the decoded audio

        Raises:
            SampleDecodeError: If the bytes are empty or cannot be decoded
        """
        if not data:
            raise SampleDecodeError(source, "no data")

        try:
            with sf.SoundFile(io.BytesIO(data)) as f:
                container, subtype = f.format, f.subtype
                samples = f.read(dtype='float32')
                sample_rate = f.samplerate
        except Exception as e:
            raise SampleDecodeError(source, str(e)) from e

        if len(samples) == 0:
            raise SampleDecodeError(source, "audio contains no frames")

        if self.target_sample_rate and sample_rate != self.target_sample_rate:
            logger.debug(f"Resampling {source} from {sample_rate} Hz to {self.target_sample_rate} Hz")
            samples = self._resample(samples, sample_rate, self.target_sample_rate)
            sample_rate = self.target_sample_rate

        audio = AudioData.from_array(samples, sample_rate)
        audio.format = container
        audio.subtype = subtype
        return audio

    def decode_raw(self, data: bytes, sample_rate: int, num_channels: int) -> AudioData:
        """
        Decode headerless little-endian float32 interleaved frames.

        This is the live capture format written by CaptureDestination.

        Raises:
            SampleDecodeError: If the byte stream is not a whole number of frames
        """
        frame_bytes = 4 * num_channels
        if len(data) % frame_bytes != 0:
            raise SampleDecodeError(
                "capture stream",
                f"{len(data)} bytes is not a multiple of the {frame_bytes}-byte frame size",
            )

        if not data:
            return AudioData.silence(0, sample_rate, num_channels)

        try:
            samples, _ = sf.read(
                io.BytesIO(data),
                dtype='float32',
                samplerate=sample_rate,
                channels=num_channels,
                format='RAW',
                subtype='FLOAT',
                endian='LITTLE',
            )
        except Exception as e:
            raise SampleDecodeError("capture stream", str(e)) from e

        return AudioData.from_array(samples, sample_rate)

    def _resample(
        self,
        data: np.ndarray,
        orig_sr: int,
        target_sr: int
    ) -> np.ndarray:
        """
        Simple linear resampling.

        Args:
            data: Audio data
            orig_sr: Original sample rate
            target_sr: Target sample rate

        Returns:
            Resampled audio data
        """
        if orig_sr == target_sr:
            return data

        new_length = max(1, int(len(data) * target_sr / orig_sr))

        x_old = np.linspace(0, 1, len(data))
        x_new = np.linspace(0, 1, new_length)
        if data.ndim == 1:
            return np.interp(x_new, x_old, data).astype(np.float32)

        resampled = np.zeros((new_length, data.shape[1]), dtype=np.float32)
        for ch in range(data.shape[1]):
            resampled[:, ch] = np.interp(x_new, x_old, data[:, ch])
        return resampled

    @staticmethod
    def get_info(data: bytes) -> dict:
        """
        Get container info without decoding the audio.

        Returns:
            Dictionary with 'sample_rate', 'channels', 'frames', 'duration',
            'format' and 'subtype'
        """
        info = sf.info(io.BytesIO(data))
        return {
            'sample_rate': info.samplerate,
            'channels': info.channels,
            'frames': info.frames,
            'duration': info.duration,
            'format': info.format,
            'subtype': info.subtype,
        }
