"""Basic example: upload a folder of samples, play them in turn and record the session."""

import asyncio
import sys
from pathlib import Path

from padsampler import Sampler
from padsampler.models import AppConfig


async def run(sampler: Sampler, sample_files: list[Path]) -> bytes:
    print("Loading samples...")
    outcomes = await sampler.upload_files(sample_files)
    for outcome in outcomes:
        if outcome.ok:
            print(f"  Loaded pad {outcome.slot}: {outcome.sample.name} ({outcome.sample.duration:.2f}s)")
        else:
            print(f"  Skipped {outcome.source_ref}: {outcome.reason}")

    sampler.recorder.start()

    for slot in sampler.store.loaded_slots():
        print(f"Playing pad {slot}")
        sampler.engine.play(slot, volume=0.7)
        await asyncio.sleep(0.6)

    # Wait for the last voices to finish
    while sampler.engine.active_voices:
        await asyncio.sleep(0.05)

    return await sampler.recorder.stop()


def main():
    """Load samples and play them back one after the other."""
    samples_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("test_samples")

    if not samples_dir.exists():
        print(f"Error: {samples_dir} directory not found!")
        return

    sample_files = sorted(samples_dir.glob("*.wav"))
    if not sample_files:
        print(f"No WAV files found in {samples_dir}")
        return

    print(f"Found {len(sample_files)} samples")

    print("\nStarting audio engine...")
    config = AppConfig.load_or_default()
    with Sampler(config) as sampler:
        data = asyncio.run(run(sampler, sample_files))
        path = sampler.save_recording(data)

    print(f"\nPlayback complete! Recording saved to {path}")


if __name__ == "__main__":
    main()
