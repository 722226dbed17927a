"""Data models for the pad sampler."""

from .config import AppConfig
from .enums import LoadState, RecorderState
from .preset import Preset, PresetSample
from .sample import LoadOutcome, Sample

__all__ = [
    "AppConfig",
    # Models
    "LoadOutcome",
    "Preset",
    "PresetSample",
    "Sample",
    # Enums
    "LoadState",
    "RecorderState",
]
