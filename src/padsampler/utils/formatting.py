"""Formatting helpers for sizes, times and export filenames."""

from datetime import datetime
from typing import Optional


def format_bytes(size_bytes: int) -> str:
    """
    Format a byte count as a human-readable string.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1536)
        '1.50 KB'
    """
    if size_bytes == 0:
        return "0 B"

    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


def format_time(seconds: float) -> str:
    """
    Format seconds as MM:SS.cc.

    Examples:
        >>> format_time(65.25)
        '01:05.25'
    """
    mins, centis = divmod(int(round(seconds * 100)), 6000)
    secs, centis = divmod(centis, 100)
    return f"{mins:02d}:{secs:02d}.{centis:02d}"


def recording_filename(now: Optional[datetime] = None) -> str:
    """
    Default filename for an exported recording.

    The ISO-8601 timestamp is truncated to seconds and its ':' and '.'
    separators are replaced with '-'.

    Examples:
        >>> recording_filename(datetime(2024, 3, 5, 14, 7, 9, 123000))
        'sampler-recording-2024-03-05T14-07-09.wav'
    """
    now = now or datetime.now()
    timestamp = now.isoformat(timespec="milliseconds").replace(":", "-").replace(".", "-")[:19]
    return f"sampler-recording-{timestamp}.wav"
