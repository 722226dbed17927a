"""Play command: load a preset, trigger pads and optionally record."""

import asyncio
import logging
from pathlib import Path

import click

from padsampler.catalog import PresetCatalogClient
from padsampler.exceptions import PadSamplerError, collect_errors
from padsampler.utils import format_bytes, format_time

from .common import fail, load_config

logger = logging.getLogger(__name__)


async def _run_session(sampler, client, preset, pads, gap, record):
    """Load, play and record. Returns the export bytes when recording."""
    outcomes = await sampler.load_preset(preset, client)

    collector = collect_errors(f"load preset '{preset.name}'")
    for outcome in outcomes:
        if outcome.error is not None:
            collector.add_error(outcome.source_ref, outcome.error)
        else:
            collector.add_success()
    if collector.has_errors:
        click.echo(collector.get_summary(), err=True)

    if not pads:
        pads = sampler.store.loaded_slots()

    if record:
        sampler.recorder.start()

    for pad in pads:
        try:
            voice = sampler.engine.play(pad)
        except PadSamplerError as e:
            click.echo(f"[{pad:2d}] skipped: {e.user_message}", err=True)
            continue
        click.echo(f"[{pad:2d}] {sampler.store.get(pad).name} ({format_time(voice.time_remaining)})")
        await asyncio.sleep(gap)

    # Let the last voices ring out
    while sampler.engine.active_voices:
        await asyncio.sleep(0.05)

    if record:
        return await sampler.recorder.stop()
    return None


@click.command(name="play")
@click.argument("preset_name")
@click.option("--pad", "-p", "pads", type=int, multiple=True, help="Pad to trigger (repeatable, default: all)")
@click.option("--gap", "-g", type=float, default=0.5, show_default=True, help="Seconds between pads")
@click.option(
    "--record", "-r",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Record the session to this WAV file",
)
@click.pass_context
def play(ctx, preset_name: str, pads: tuple[int, ...], gap: float, record: Path | None):
    """Load PRESET_NAME from the catalog and play its pads."""
    from padsampler.core import Sampler, SessionRecorder

    config = load_config(ctx)

    try:
        with PresetCatalogClient.from_config(config) as client:
            preset = client.fetch_preset(preset_name)
            with Sampler(config) as sampler:
                data = asyncio.run(
                    _run_session(sampler, client, preset, list(pads), gap, record is not None)
                )
    except KeyError:
        raise click.BadParameter(f"Preset '{preset_name}' not found", param_hint="PRESET_NAME")
    except KeyboardInterrupt:
        logger.info("Playback interrupted by user")
        click.echo("\nStopped.", err=True)
        return
    except (PadSamplerError, OSError) as e:
        fail(e, ctx)

    if data is not None:
        path = SessionRecorder.save(data, record.parent, record.name)
        click.echo(f"Recorded {format_bytes(len(data))} to {path}")
