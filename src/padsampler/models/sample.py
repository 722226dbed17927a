"""Sample model: one loaded sound, its trim region and load state."""

import math
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlsplit

from padsampler.audio import AudioData
from padsampler.exceptions import PadSamplerError

from .enums import LoadState


def _default_name(source_ref: str) -> str:
    """Derive a display name from a URL or path: the file stem."""
    path = unquote(urlsplit(source_ref).path) or source_ref
    stem = PurePosixPath(path.replace("\\", "/")).stem
    return stem or source_ref


@dataclass(slots=True, eq=False)
class Sample:
    """
    One sound assigned to a pad slot.

    Not a Pydantic model: it carries decoded NumPy audio. Always build it
    through Sample.create() so every creation path yields the same shape.

    Invariant when loaded: 0 <= trim_left < trim_right <= duration.
    """

    source_ref: str
    name: str
    load_state: LoadState = LoadState.EMPTY
    audio: Optional[AudioData] = None
    raw_bytes: Optional[bytes] = None
    error: Optional[PadSamplerError] = None
    trim_left: float = 0.0
    trim_right: float = 0.0

    @classmethod
    def create(cls, source_ref: str, name: Optional[str] = None) -> "Sample":
        """
        Create an empty sample for a source.

        Args:
            source_ref: URL, file path or any label identifying the origin
            name: Display name (defaults to the file stem of source_ref)
        """
        return cls(source_ref=source_ref, name=name or _default_name(source_ref))

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    def mark_loading(self) -> None:
        self.load_state = LoadState.LOADING
        self.error = None

    def mark_loaded(self, audio: AudioData, raw_bytes: Optional[bytes] = None) -> None:
        """Attach decoded audio and reset the trim to the full duration."""
        self.audio = audio
        self.raw_bytes = raw_bytes
        self.error = None
        self.load_state = LoadState.LOADED
        self.trim_left = 0.0
        self.trim_right = audio.duration

    def mark_failed(self, error: PadSamplerError) -> None:
        self.audio = None
        self.error = error
        self.load_state = LoadState.FAILED
        self.trim_left = 0.0
        self.trim_right = 0.0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self.load_state is LoadState.LOADED and self.audio is not None

    @property
    def duration(self) -> float:
        """Duration in seconds (0.0 when not loaded)."""
        return self.audio.duration if self.audio is not None else 0.0

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None

    @property
    def failure_reason(self) -> Optional[str]:
        return self.error.user_message if self.error is not None else None

    @property
    def trim(self) -> tuple[float, float]:
        return self.trim_left, self.trim_right

    def set_trim(self, left: float, right: float) -> tuple[float, float]:
        """
        Set the trim region, clamping into 0 <= left < right <= duration.

        Valid input is stored exactly. NaN bounds fall back to 0 and the
        duration. No-op when the sample is not loaded.

        Returns:
            The stored (left, right) pair
        """
        if not self.is_loaded:
            return self.trim

        duration = self.duration
        frame = 1.0 / self.audio.sample_rate

        left, right = float(left), float(right)
        if math.isnan(left):
            left = 0.0
        if math.isnan(right):
            right = duration

        right = min(right, duration)
        if right <= 0:
            right = min(frame, duration)
        left = max(left, 0.0)
        if left >= right:
            left = max(0.0, right - frame)

        self.trim_left, self.trim_right = left, right
        return self.trim

    def __repr__(self) -> str:
        return f"Sample(name={self.name!r}, state={self.load_state.value}, trim={self.trim})"


@dataclass(slots=True, frozen=True)
class LoadOutcome:
    """
    Result of one load into a slot.

    Exactly one of `sample` (success) or `error` (failure) is set. A
    superseded outcome means a newer load to the same slot started
    before this one finished, so its result was discarded.
    """

    slot: Optional[int]
    source_ref: str
    sample: Optional[Sample] = None
    error: Optional[PadSamplerError] = None
    superseded: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.superseded

    @property
    def kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None

    @property
    def reason(self) -> Optional[str]:
        return self.error.user_message if self.error is not None else None
