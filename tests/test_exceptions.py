"""Tests for the exception hierarchy and error handling helpers."""

import logging

import pytest
from pydantic import BaseModel, ValidationError

from padsampler.exceptions import (
    AudioDeviceError,
    AudioDeviceInUseError,
    AudioDeviceNotFoundError,
    ConfigFileInvalidError,
    ConfigValidationError,
    ErrorContext,
    InvalidRangeError,
    PadSamplerError,
    SampleDecodeError,
    SampleFetchError,
    StoreFullError,
    collect_errors,
    format_error_for_display,
    wrap_audio_device_error,
    wrap_pydantic_error,
)


class GainModel(BaseModel):
    gain: float
    slot: int


@pytest.mark.unit
class TestPadSamplerError:
    """Test base error behavior."""

    def test_str_is_user_message(self):
        error = PadSamplerError("Something broke", technical_message="stack detail")

        assert str(error) == "Something broke"
        assert error.technical_message == "stack detail"
        assert error.kind == "error"

    def test_technical_message_defaults_to_user_message(self):
        assert PadSamplerError("oops").technical_message == "oops"

    def test_full_message_includes_hint(self):
        message = StoreFullError(16).get_full_message()

        assert "All 16 pads" in message
        assert "Suggestion: Clear a pad" in message

    @pytest.mark.parametrize(
        "error,kind",
        [
            (SampleDecodeError("a.wav", "bad header"), "decode_failure"),
            (SampleFetchError("http://h/a.wav", "refused"), "network_failure"),
            (InvalidRangeError(0.5, 0.1, 1.0), "invalid_range"),
            (StoreFullError(16), "store_full"),
            (AudioDeviceNotFoundError(3), "audio_device"),
            (ConfigFileInvalidError("c.json", "Expecting value"), "configuration"),
        ],
    )
    def test_kinds(self, error, kind):
        assert error.kind == kind
        assert isinstance(error, PadSamplerError)

    def test_fetch_error_shows_status(self):
        error = SampleFetchError("http://h/a.wav", "HTTP 404 Not Found", status_code=404)
        assert "(HTTP 404)" in error.user_message


@pytest.mark.unit
class TestWrapErrors:
    """Test conversion of library errors."""

    def test_wrap_device_in_use(self):
        error = wrap_audio_device_error(Exception("PaErrorCode -9996"), device_id=2)

        assert isinstance(error, AudioDeviceInUseError)
        assert error.device_id == 2
        assert error.recoverable

    def test_wrap_device_not_found(self):
        error = wrap_audio_device_error(Exception("Device 7 not found"), device_id=7)
        assert isinstance(error, AudioDeviceNotFoundError)

    def test_wrap_generic_device_error(self):
        error = wrap_audio_device_error(Exception("underflow"))

        assert type(error) is AudioDeviceError
        assert "underflow" in error.user_message

    def test_wrap_pydantic_single_field(self):
        with pytest.raises(ValidationError) as exc_info:
            GainModel.model_validate({"gain": 1.0, "slot": "x"})

        error = wrap_pydantic_error(exc_info.value, "config.json")

        assert isinstance(error, ConfigValidationError)
        assert error.field == "slot"
        assert "config.json" in error.recovery_hint

    def test_wrap_pydantic_multiple_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            GainModel.model_validate({"gain": "loud", "slot": "x"})

        error = wrap_pydantic_error(exc_info.value, "config.json")

        assert error.field == "multiple fields"
        assert "2 validation errors" in error.user_message

    def test_wrap_pydantic_invalid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            GainModel.model_validate_json("{not json")

        assert isinstance(wrap_pydantic_error(exc_info.value, "c.json"), ConfigFileInvalidError)


@pytest.mark.unit
class TestErrorContext:
    """Test the logging context manager."""

    def test_re_raises_by_default(self, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoreFullError):
                with ErrorContext("load sample"):
                    raise StoreFullError(16)

        assert "Failed to load sample" in caplog.text

    def test_suppresses_when_asked(self):
        with ErrorContext("load sample", re_raise=False) as ctx:
            raise ValueError("bad")

        assert isinstance(ctx.error, ValueError)

    def test_success_records_no_error(self):
        with ErrorContext("noop") as ctx:
            pass
        assert ctx.error is None


@pytest.mark.unit
class TestErrorCollector:
    """Test batch error collection."""

    def test_summary_lists_failures(self):
        collector = collect_errors("load preset")
        collector.add_success()
        collector.add_error("kick.wav", SampleDecodeError("kick.wav", "bad header"))
        collector.add_error("snare.wav", RuntimeError("boom"))

        summary = collector.get_summary()

        assert collector.has_errors
        assert collector.error_count == 2
        assert summary.startswith("Failed 2 of 3 operations (load preset)")
        assert "kick.wav: Could not decode audio from kick.wav" in summary
        assert "snare.wav: boom" in summary

    def test_all_succeeded(self):
        collector = collect_errors("load preset")
        collector.add_success()

        assert collector.get_summary() == "All operations completed successfully (1 total)"

    def test_format_error_for_display(self):
        assert format_error_for_display(StoreFullError(4))[1] is not None
        assert format_error_for_display(KeyError("x")) == ("KeyError: 'x'", None)
