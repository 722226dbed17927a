"""Unit tests for the mixing bus."""

from unittest.mock import Mock

import numpy as np
import pytest

from padsampler.audio import AudioData, MixingBus, Voice


def constant_voice(value, num_frames=100, num_channels=1, voice_id=1):
    if num_channels == 1:
        data = np.full(num_frames, value, dtype=np.float32)
    else:
        data = np.full((num_frames, num_channels), value, dtype=np.float32)
    audio = AudioData.from_array(data, sample_rate=8000)
    return Voice(voice_id=voice_id, slot=0, audio_data=audio, start_frame=0, end_frame=num_frames)


@pytest.mark.unit
class TestMixingBus:
    """Test summing, gain and clipping."""

    def test_empty_mix_is_silence(self, bus):
        block = bus.mix([], 32)

        assert block.shape == (32, 2)
        assert block.dtype == np.float32
        assert not block.any()

    def test_sums_voices(self, bus):
        block = bus.mix([constant_voice(0.25), constant_voice(0.125, voice_id=2)], 16)
        assert np.allclose(block, 0.375)

    def test_advances_voices(self, bus):
        voice = constant_voice(0.1)
        bus.mix([voice], 40)
        assert voice.position == 40

    def test_short_voice_is_zero_padded(self, bus):
        voice = constant_voice(0.5, num_frames=10)

        block = bus.mix([voice], 16)

        assert np.allclose(block[:10], 0.5)
        assert not block[10:].any()
        assert not voice.is_playing

    def test_gain_then_clip(self):
        bus = MixingBus(gain=4.0)
        block = bus.mix([constant_voice(0.5), constant_voice(-0.1, voice_id=2)], 8)
        assert np.allclose(block, 1.0)

    def test_negative_clip(self, bus):
        block = bus.mix([constant_voice(-0.75), constant_voice(-0.75, voice_id=2)], 8)
        assert np.allclose(block, -1.0)

    def test_gain_clamped_to_zero(self, bus):
        bus.gain = -1.0
        assert bus.gain == 0.0
        assert not bus.mix([constant_voice(0.5)], 8).any()

    def test_stereo_to_mono(self):
        bus = MixingBus(num_channels=1)
        data = np.column_stack([np.full(8, 0.2), np.full(8, 0.4)]).astype(np.float32)
        voice = Voice(
            voice_id=1,
            slot=0,
            audio_data=AudioData.from_array(data, sample_rate=8000),
            start_frame=0,
            end_frame=8,
        )

        assert np.allclose(bus.mix([voice], 8), 0.3)

    def test_stereo_to_more_channels_pads_silence(self):
        bus = MixingBus(num_channels=4)
        block = bus.mix([constant_voice(0.5, num_channels=2)], 8)

        assert np.allclose(block[:, :2], 0.5)
        assert not block[:, 2:].any()


@pytest.mark.unit
class TestTaps:
    """Test output taps."""

    def test_tap_receives_post_gain_block(self):
        bus = MixingBus(gain=0.5)
        tap = Mock()
        bus.add_tap(tap)

        block = bus.mix([constant_voice(0.5)], 8)

        tap.assert_called_once()
        tapped = tap.call_args.args[0]
        assert np.array_equal(tapped, block)
        assert np.allclose(tapped, 0.25)

    def test_tap_registered_once(self, bus):
        tap = Mock()
        bus.add_tap(tap)
        bus.add_tap(tap)

        assert bus.tap_count == 1

    def test_remove_tap(self, bus):
        tap = Mock()
        bus.add_tap(tap)
        bus.remove_tap(tap)
        bus.remove_tap(tap)

        bus.mix([], 8)

        tap.assert_not_called()

    def test_failing_tap_does_not_break_mix(self, bus):
        broken = Mock(side_effect=RuntimeError("disk full"))
        healthy = Mock()
        bus.add_tap(broken)
        bus.add_tap(healthy)

        block = bus.mix([constant_voice(0.5)], 8)

        healthy.assert_called_once()
        assert np.allclose(block, 0.5)
