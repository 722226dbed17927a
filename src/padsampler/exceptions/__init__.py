"""
Custom exception hierarchy for PadSampler.

## Exception Hierarchy

```
PadSamplerError (base)
├── SampleDecodeError          kind=decode_failure
├── SampleFetchError           kind=network_failure
├── SampleNotLoadedError       kind=not_loaded
├── InvalidRangeError          kind=invalid_range
├── InvalidSlotError           kind=invalid_slot
├── StoreFullError             kind=store_full
├── PolyphonyLimitError        kind=polyphony_limit
├── AlreadyRecordingError      kind=already_recording
├── NotRecordingError          kind=not_recording
├── RecordingFinalizeError     kind=finalize_failure
├── EncodeError                kind=encode_failure
├── AudioDeviceError
│   ├── AudioDeviceInUseError
│   └── AudioDeviceNotFoundError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

Every error carries a machine-readable `kind` plus a human-readable
`user_message`; see `padsampler.exceptions.handlers` for helpers.
"""

from .audio import AudioDeviceError, AudioDeviceInUseError, AudioDeviceNotFoundError
from .base import PadSamplerError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    wrap_audio_device_error,
    wrap_pydantic_error,
)
from .sampler import (
    AlreadyRecordingError,
    EncodeError,
    InvalidRangeError,
    InvalidSlotError,
    NotRecordingError,
    PolyphonyLimitError,
    RecordingFinalizeError,
    SampleDecodeError,
    SampleFetchError,
    SampleNotLoadedError,
    StoreFullError,
)

__all__ = [
    # Sampler
    "AlreadyRecordingError",
    # Audio
    "AudioDeviceError",
    "AudioDeviceInUseError",
    "AudioDeviceNotFoundError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "EncodeError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "InvalidRangeError",
    "InvalidSlotError",
    "NotRecordingError",
    # Base
    "PadSamplerError",
    "PolyphonyLimitError",
    "RecordingFinalizeError",
    "SampleDecodeError",
    "SampleFetchError",
    "SampleNotLoadedError",
    "StoreFullError",
    "collect_errors",
    "format_error_for_display",
    "wrap_audio_device_error",
    "wrap_pydantic_error",
]
