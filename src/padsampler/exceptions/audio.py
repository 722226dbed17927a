"""Audio-related exceptions.

This module defines exceptions for audio device errors:
- AudioDeviceError: Base class for audio device errors
- AudioDeviceInUseError: Device is already in use
- AudioDeviceNotFoundError: Device was not found
"""

from .base import PadSamplerError


class AudioDeviceError(PadSamplerError):
    """Audio device initialization or operation failed."""

    kind = "audio_device"

    def __init__(self, user_message: str, device_id: int | None = None, **kwargs):
        """
        Initialize audio device error.

        Args:
            user_message: User-friendly error message
            device_id: The device ID that failed (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.device_id = device_id


class AudioDeviceInUseError(AudioDeviceError):
    """Audio device is already in use by another application."""

    def __init__(self, device_id: int | None = None, original_error: str | None = None):
        user_msg = "Audio device is already in use by another application."
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            device_id=device_id,
            recoverable=True,
            recovery_hint=(
                "Close other audio applications or pick another output. "
                "Run 'padsampler audio list' to see available devices."
            ),
        )


class AudioDeviceNotFoundError(AudioDeviceError):
    """Requested audio device was not found."""

    def __init__(self, device_id: int):
        super().__init__(
            user_message=f"Audio device {device_id} not found.",
            device_id=device_id,
            recoverable=True,
            recovery_hint="Run 'padsampler audio list' to see available devices.",
        )
