"""Generic utility modules for padsampler.

- observer: thread-safe observer registry
- persistence: Pydantic JSON load/save with backups
- formatting: sizes, times and export filenames
"""

from .formatting import format_bytes, format_time, recording_filename
from .observer import ObserverManager

__all__ = ["ObserverManager", "format_bytes", "format_time", "recording_filename"]
