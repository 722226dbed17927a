"""Preset models for the catalog server's JSON."""

from pydantic import BaseModel, ConfigDict, Field


class PresetSample(BaseModel):
    """One sample reference inside a preset."""

    name: str = Field(description="Sample display name")
    url: str = Field(description="Sample URL, relative to the file-serving base path")


class Preset(BaseModel):
    """A named collection of sample references assigned to pads in order."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Preset name")
    type: str | None = Field(default=None, description="Preset category (e.g. 'Drumkit')")
    is_factory_presets: bool = Field(
        default=False,
        alias="isFactoryPresets",
        description="True for presets shipped with the server",
    )
    samples: list[PresetSample] = Field(default_factory=list, description="Samples in pad order")

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def metadata(self) -> dict:
        """Summary without the sample list."""
        return {
            "name": self.name,
            "type": self.type,
            "isFactoryPresets": self.is_factory_presets,
            "sampleCount": self.sample_count,
        }
