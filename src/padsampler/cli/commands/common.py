"""Helpers shared by CLI commands."""

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from padsampler.exceptions import format_error_for_display
from padsampler.models import AppConfig

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context) -> AppConfig:
    """Load the config selected by the --config option."""
    path: Optional[Path] = (ctx.obj or {}).get('config_path')
    return AppConfig.load_or_default(path)


def fail(error: Exception, ctx: Optional[click.Context] = None) -> NoReturn:
    """Show a clean error message without traceback and exit with code 1."""
    logger.exception("Command failed")

    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    log_path = (ctx.obj or {}).get('log_path') if ctx is not None else None
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)

    sys.exit(1)
