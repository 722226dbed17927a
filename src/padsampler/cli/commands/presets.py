"""Preset catalog commands."""

import click

from padsampler.catalog import PresetCatalogClient
from padsampler.exceptions import PadSamplerError

from .common import fail, load_config


@click.group(name="presets")
def presets_group():
    """Preset catalog commands."""
    pass


@presets_group.command(name="list")
@click.option("--samples", is_flag=True, help="Also list the samples of each preset")
@click.pass_context
def list_presets(ctx, samples: bool):
    """List presets available on the catalog server."""
    config = load_config(ctx)

    try:
        with PresetCatalogClient.from_config(config) as client:
            presets = client.fetch_presets()
    except PadSamplerError as e:
        fail(e, ctx)

    if not presets:
        click.echo(f"No presets found at {config.presets_url}")
        return

    click.echo(f"Presets at {config.presets_url}:\n")
    for preset in presets:
        meta = preset.metadata()
        factory = "  [factory]" if meta["isFactoryPresets"] else ""
        kind = f" ({meta['type']})" if meta["type"] else ""
        click.echo(f"{preset.name}{kind}: {meta['sampleCount']} samples{factory}")
        if samples:
            for i, sample in enumerate(preset.samples):
                click.echo(f"    [{i:2d}] {sample.name}")
