"""Enumerations for the pad sampler."""

from enum import Enum


class LoadState(str, Enum):
    """Lifecycle of a sample slot."""

    EMPTY = "empty"      # Slot assigned, nothing decoded yet
    LOADING = "loading"  # Fetch or decode in progress
    LOADED = "loaded"    # Decoded audio available
    FAILED = "failed"    # Fetch or decode failed, see Sample.error


class RecorderState(str, Enum):
    """Session recorder state machine."""

    IDLE = "idle"
    RECORDING = "recording"
    FINALIZING = "finalizing"  # Decoding and encoding the capture
