"""
Centralized error handling utilities.

Layered approach:

1. **Custom Exceptions** - Typed, user-friendly error classes (see base, audio,
   config and sampler modules)
2. **Error Context** - Preserve technical details for logging, show friendly
   messages to users
3. **Error Isolation** - One failed sample never blocks the rest of a batch

## Handling Patterns

| Pattern | Code |
|---------|------|
| Critical section with auto-logging | `with ErrorContext("start audio"): ...` |
| Summarize batch outcomes | `collector = collect_errors("load preset"); collector.add_error(...)` |
| Convert PortAudio errors | `raise wrap_audio_device_error(e, device_id) from e` |
| Convert Pydantic errors | `raise wrap_pydantic_error(e, str(path)) from e` |
"""

import logging
from typing import Optional

from .audio import AudioDeviceError, AudioDeviceInUseError, AudioDeviceNotFoundError
from .base import PadSamplerError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("start audio device") as ctx:
            device.start()
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, PadSamplerError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> PadSamplerError:
    """
    Convert Pydantic validation errors to PadSampler exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    # Valid JSON is required before field validation happens
    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def wrap_audio_device_error(error: Exception, device_id: Optional[int] = None) -> PadSamplerError:
    """
    Convert low-level audio errors to PadSampler exceptions.

    Maps error codes from PortAudio / sounddevice to our exception types.

    Args:
        error: The original exception from the audio library
        device_id: The device ID involved in the error

    Returns:
        A PadSamplerError with appropriate type and message
    """
    error_msg = str(error)

    if "PaErrorCode -9996" in error_msg or "Invalid device" in error_msg:
        return AudioDeviceInUseError(device_id=device_id, original_error=error_msg)

    if "device" in error_msg.lower() and "not found" in error_msg.lower():
        if device_id is not None:
            return AudioDeviceNotFoundError(device_id)

    return AudioDeviceError(
        user_message=f"Audio device error: {error_msg}",
        technical_message=f"Audio device {device_id} error: {error_msg}",
        device_id=device_id
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, PadSamplerError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("load preset")
        for outcome in outcomes:
            if outcome.error:
                collector.add_error(outcome.source_ref, outcome.error)
            else:
                collector.add_success()

        if collector.has_errors:
            click.echo(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def add_error(self, sub_operation: str, error: Exception) -> None:
        """Record a failed sub-operation."""
        self.errors.append((sub_operation, error))

    def add_success(self) -> None:
        """Record a successful sub-operation."""
        self.success_count += 1

    def get_summary(self) -> str:
        """
        Get a summary of collected errors.

        Returns:
            Multi-line summary string
        """
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = (
            f"Failed {self.error_count} of {self.error_count + self.success_count} "
            f"operations ({self.operation}):\n"
        )
        for sub_op, error in self.errors:
            if isinstance(error, PadSamplerError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()
