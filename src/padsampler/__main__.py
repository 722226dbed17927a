"""Main entry point for padsampler."""

from padsampler.cli.main import cli

if __name__ == "__main__":
    cli()
