"""Encode command: re-export an audio file as 16-bit PCM WAV."""

from pathlib import Path

import click

from padsampler.audio import AudioDecoder, encode_wav
from padsampler.exceptions import PadSamplerError
from padsampler.utils import format_bytes, format_time

from .common import fail


@click.command(name="encode")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--sample-rate", "-r", type=int, default=None, help="Resample to this rate")
@click.pass_context
def encode(ctx, input_path: Path, output_path: Path, sample_rate: int | None):
    """Decode INPUT_PATH and write it to OUTPUT_PATH as 16-bit PCM WAV."""
    try:
        audio = AudioDecoder(target_sample_rate=sample_rate).decode(
            input_path.read_bytes(), str(input_path)
        )
        data = encode_wav(audio)
    except PadSamplerError as e:
        fail(e, ctx)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    click.echo(
        f"Wrote {output_path}: {audio.num_channels} ch, {audio.sample_rate} Hz, "
        f"{format_time(audio.duration)}, {format_bytes(len(data))}"
    )
