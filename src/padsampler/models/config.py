"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from padsampler.utils.persistence import PydanticPersistence

CONFIG_DIR = Path.home() / ".padsampler"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.json"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Preset catalog server
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the preset catalog server",
    )
    presets_endpoint: str = Field(default="/api/presets", description="Preset listing endpoint")
    files_endpoint: str = Field(default="/presets", description="Static audio file base path")

    # Audio
    sample_rate: int | None = Field(
        default=None,
        gt=0,
        description="Output sample rate in Hz (None = device default)",
    )
    default_audio_device: int | None = Field(
        default=None,
        description="Default audio output device ID (None = system default)",
    )
    default_buffer_size: int = Field(default=512, gt=0, description="Audio buffer size in frames")
    num_channels: int = Field(default=2, ge=1, le=8, description="Output channel count")
    max_polyphony: int | None = Field(
        default=16,
        ge=1,
        description="Maximum simultaneous voices (None = unlimited)",
    )
    master_gain: float = Field(default=1.0, ge=0.0, description="Mixing bus gain")

    # Recording
    recording_flush_interval: float = Field(
        default=1.0,
        gt=0.0,
        description="Seconds of audio per capture chunk",
    )
    recordings_dir: Path = Field(
        default_factory=lambda: Path.home() / "padsampler-recordings",
        description="Directory where session recordings are saved",
    )

    # Downloads
    download_timeout: float = Field(default=30.0, gt=0.0, description="HTTP timeout in seconds")
    download_retries: int = Field(default=3, ge=0, description="Retries after a failed download")
    download_retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds to wait between download attempts",
    )

    @field_serializer("recordings_dir")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @property
    def presets_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.presets_endpoint

    @property
    def files_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.files_endpoint

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.padsampler/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file (atomic, with .bak backup)."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        PydanticPersistence.save_json(self, path)
