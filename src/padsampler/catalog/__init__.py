"""Preset catalog server client."""

from .client import PresetCatalogClient, build_audio_url

__all__ = ["PresetCatalogClient", "build_audio_url"]
