"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from .commands import audio_group, config_group, encode, play, presets_group

logger = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".padsampler" / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Log file used for the given flags."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "padsampler-debug.log"
    return LOG_DIR / "padsampler.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug:
        level = logging.DEBUG
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Explicit log level wins when logging to a custom file
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Keeps last 5 files, max 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version="0.1.0", prog_name="padsampler")
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.padsampler/config.json)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./padsampler-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    config_path: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    Pad Sampler - 16-pad drum sampler with preset loading and session recording.

    \b
    Examples:
      # List presets on the catalog server
      padsampler presets list

      # Play pads 0-3 of a preset and record the session
      padsampler play "808" --pad 0 --pad 1 --pad 2 --pad 3 --record session.wav

      # Re-export any audio file as 16-bit PCM WAV
      padsampler encode loop.flac loop.wav

      # List audio devices
      padsampler audio list
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_path'] = setup_logging(verbose, debug, log_file, log_level)


cli.add_command(presets_group)
cli.add_command(play)
cli.add_command(audio_group)
cli.add_command(config_group)
cli.add_command(encode)

if __name__ == "__main__":
    cli()
