"""Command-line interface for padsampler."""
