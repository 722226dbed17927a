"""Configuration commands."""

import json

import click

from padsampler.exceptions import PadSamplerError
from padsampler.models import AppConfig
from padsampler.models.config import DEFAULT_CONFIG_PATH

from .common import fail, load_config


@click.group(name="config")
def config_group():
    """Inspect or reset the configuration."""
    pass


@config_group.command(name="show")
@click.option("--field", "-f", type=str, default=None, help="Show a single field")
@click.pass_context
def show(ctx, field: str | None):
    """Display the current configuration."""
    try:
        config = load_config(ctx)
    except PadSamplerError as e:
        fail(e, ctx)

    values = json.loads(config.model_dump_json())

    if field is not None:
        if field not in values:
            raise click.BadParameter(f"Unknown field '{field}'", param_hint="--field")
        click.echo(f"{field}: {values[field]}")
        return

    for name, value in values.items():
        click.echo(f"{name}: {value}")


@config_group.command(name="path")
@click.pass_context
def path(ctx):
    """Print the config file location."""
    click.echo(str((ctx.obj or {}).get('config_path') or DEFAULT_CONFIG_PATH))


@config_group.command(name="reset")
@click.confirmation_option(prompt="Reset configuration to defaults?")
@click.pass_context
def reset(ctx):
    """Reset the configuration file to defaults (keeps a .bak backup)."""
    config_path = (ctx.obj or {}).get('config_path') or DEFAULT_CONFIG_PATH
    try:
        AppConfig().save(config_path)
    except (PadSamplerError, OSError) as e:
        fail(e, ctx)
    click.echo(f"Configuration reset: {config_path}")
