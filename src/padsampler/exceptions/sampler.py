"""Sampler exceptions: loading, playback, recording and encoding.

Load failures (decode, network, full store) are reported per item inside
a LoadOutcome and never abort a batch. Caller errors (not loaded, invalid
range, recorder misuse) are raised immediately.
"""

from .base import PadSamplerError


class SampleDecodeError(PadSamplerError):
    """Bytes could not be interpreted as audio."""

    kind = "decode_failure"

    def __init__(self, source: str, reason: str):
        super().__init__(
            user_message=f"Could not decode audio from {source}",
            technical_message=f"Decode failed for {source}: {reason}",
            recoverable=True,
            recovery_hint="Check that the file is a WAV, FLAC, OGG or other supported audio file.",
        )
        self.source = source
        self.reason = reason


class SampleFetchError(PadSamplerError):
    """Fetching sample bytes failed or returned a non-success status."""

    kind = "network_failure"

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        user_msg = f"Could not download {url}"
        if status_code is not None:
            user_msg += f" (HTTP {status_code})"
        super().__init__(
            user_message=user_msg,
            technical_message=f"Fetch failed for {url}: {reason}",
            recoverable=True,
            recovery_hint="Check that the preset server is running and reachable.",
        )
        self.url = url
        self.reason = reason
        self.status_code = status_code


class SampleNotLoadedError(PadSamplerError):
    """Playback requested on an empty or undecoded slot."""

    kind = "not_loaded"

    def __init__(self, slot: int):
        super().__init__(user_message=f"No sample loaded in slot {slot}")
        self.slot = slot


class InvalidRangeError(PadSamplerError):
    """Play range violates ordering or bounds."""

    kind = "invalid_range"

    def __init__(self, start: float, end: float, duration: float):
        super().__init__(
            user_message=(
                f"Invalid playback range {start:.3f}s - {end:.3f}s "
                f"(sample duration {duration:.3f}s)"
            ),
            recovery_hint="Start must be before end and both within the sample duration.",
        )
        self.start = start
        self.end = end
        self.duration = duration


class InvalidSlotError(PadSamplerError):
    """Slot index outside the store capacity."""

    kind = "invalid_slot"

    def __init__(self, slot: int, capacity: int):
        super().__init__(user_message=f"Invalid slot {slot} (valid: 0-{capacity - 1})")
        self.slot = slot
        self.capacity = capacity


class StoreFullError(PadSamplerError):
    """No free slot left for an appended sample."""

    kind = "store_full"

    def __init__(self, capacity: int):
        super().__init__(
            user_message=f"All {capacity} pads are already assigned",
            recovery_hint="Clear a pad before adding another sample.",
        )
        self.capacity = capacity


class PolyphonyLimitError(PadSamplerError):
    """Too many voices are already playing."""

    kind = "polyphony_limit"

    def __init__(self, max_voices: int):
        super().__init__(
            user_message=f"Polyphony limit reached ({max_voices} voices)",
            recoverable=True,
            recovery_hint="Stop some voices or raise max_polyphony in the configuration.",
        )
        self.max_voices = max_voices


class AlreadyRecordingError(PadSamplerError):
    """Recorder start requested while a session is active."""

    kind = "already_recording"

    def __init__(self):
        super().__init__(user_message="A recording is already in progress")


class NotRecordingError(PadSamplerError):
    """Recorder stop requested while idle."""

    kind = "not_recording"

    def __init__(self):
        super().__init__(user_message="No recording in progress")


class RecordingFinalizeError(PadSamplerError):
    """Captured stream could not be turned into an export file."""

    kind = "finalize_failure"

    def __init__(self, reason: str):
        super().__init__(
            user_message="Could not finalize the recording",
            technical_message=f"Recording finalize failed: {reason}",
        )
        self.reason = reason


class EncodeError(PadSamplerError):
    """Audio buffer cannot be encoded as PCM WAV."""

    kind = "encode_failure"

    def __init__(self, reason: str):
        super().__init__(
            user_message=f"Cannot encode audio: {reason}",
            technical_message=f"WAV encode rejected input: {reason}",
        )
        self.reason = reason
