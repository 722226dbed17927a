"""Audio command implementations."""

import click

from .common import fail


@click.group(name="audio")
def audio_group():
    """Audio device commands."""
    pass


def _display_device_details(info: dict, indent: str = "    ") -> None:
    """Display device details with specified indentation."""
    click.echo(f"{indent}Channels: {info['max_output_channels']} out")
    click.echo(f"{indent}Sample Rate: {info['default_samplerate']} Hz")
    if 'default_low_output_latency' in info:
        latency_ms = info['default_low_output_latency'] * 1000
        click.echo(f"{indent}Latency: {latency_ms:.1f} ms")


@audio_group.command(name="list")
@click.pass_context
def list_audio(ctx):
    """List available audio output devices."""
    try:
        from padsampler.audio.device import AudioDevice
    except OSError as e:
        # sounddevice raises OSError when the PortAudio library is missing
        fail(e, ctx)

    devices, api_names = AudioDevice.list_output_devices()
    default_device_id = AudioDevice.get_default_device()

    click.echo(f"Available audio output devices (preferred: {api_names}):\n")

    if not devices:
        click.echo("No output devices found.")
        return

    for device_id, name, host_api, info in devices:
        if device_id == default_device_id:
            click.echo(f"[{device_id}] {name}  [Default]")
        else:
            click.echo(f"[{device_id}] {name}")
        click.echo(f"    Host API: {host_api}")
        _display_device_details(info)
        click.echo()
