"""CLI commands for padsampler."""

from .audio import audio_group
from .config import config_group
from .encode import encode
from .play import play
from .presets import presets_group

__all__ = ["audio_group", "config_group", "encode", "play", "presets_group"]
