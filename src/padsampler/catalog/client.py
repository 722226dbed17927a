"""HTTP client for the preset catalog server."""

import logging
import time
from typing import Optional
from urllib.parse import quote

import requests

from padsampler.exceptions import SampleFetchError
from padsampler.models import Preset

logger = logging.getLogger(__name__)

# Characters left unescaped by JavaScript's encodeURI, besides alphanumerics
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"


def build_audio_url(relative_url: str, base_url: str) -> str:
    """
    Resolve a preset sample URL against the file-serving base path.

    A leading "./" is stripped, then the joined URL is percent-encoded the
    way encodeURI does (spaces and non-ASCII encoded, URI delimiters kept).

    Examples:
        >>> build_audio_url("./808/Kick 1.wav", "http://localhost:3000/presets")
        'http://localhost:3000/presets/808/Kick%201.wav'
    """
    clean_path = relative_url[2:] if relative_url.startswith("./") else relative_url
    full_url = f"{base_url.rstrip('/')}/{clean_path}"
    return quote(full_url, safe=_URI_SAFE)


class PresetCatalogClient:
    """
    Client for the REST preset catalog.

    Consumes:
        GET {base_url}{presets_endpoint}  -> JSON array of presets
        GET {base_url}{files_endpoint}/<path> -> audio bytes
    """

    def __init__(
        self,
        base_url: str,
        presets_endpoint: str = "/api/presets",
        files_endpoint: str = "/presets",
        timeout: float = 30.0,
        retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Server root, e.g. "http://localhost:3000"
            presets_endpoint: Path of the preset listing
            files_endpoint: Base path for sample files
            timeout: Per-request timeout in seconds
            retries: Extra attempts after a failed sample download
            retry_delay: Seconds to wait between attempts
            session: Optional requests session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.presets_url = self.base_url + presets_endpoint
        self.files_url = self.base_url + files_endpoint
        self.timeout = timeout
        self.retries = max(0, retries)
        self.retry_delay = retry_delay
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> "PresetCatalogClient":
        """Build a client from an AppConfig."""
        return cls(
            base_url=config.api_base_url,
            presets_endpoint=config.presets_endpoint,
            files_endpoint=config.files_endpoint,
            timeout=config.download_timeout,
            retries=config.download_retries,
            retry_delay=config.download_retry_delay,
        )

    def fetch_presets(self) -> list[Preset]:
        """
        Fetch every preset from the catalog.

        Raises:
            SampleFetchError: On transport failure or non-2xx status
        """
        response = self._get(self.presets_url)
        try:
            payload = response.json()
        except ValueError as e:
            raise SampleFetchError(self.presets_url, f"invalid JSON: {e}") from e

        presets = [Preset.model_validate(item) for item in payload]
        logger.info(f"Fetched {len(presets)} presets from {self.presets_url}")
        return presets

    def fetch_preset(self, name: str) -> Preset:
        """
        Fetch one preset by name (case-insensitive).

        Raises:
            KeyError: If no preset has that name
            SampleFetchError: If the catalog cannot be fetched
        """
        wanted = name.lower()
        for preset in self.fetch_presets():
            if preset.name.lower() == wanted:
                return preset
        raise KeyError(f"Preset '{name}' not found")

    def sample_urls(self, preset: Preset) -> list[str]:
        """Absolute URLs of a preset's samples, in pad order."""
        return [build_audio_url(sample.url, self.files_url) for sample in preset.samples]

    def presets_metadata(self, presets: Optional[list[Preset]] = None) -> list[dict]:
        """Name, type, factory flag and sample count for each preset."""
        if presets is None:
            presets = self.fetch_presets()
        return [preset.metadata() for preset in presets]

    def is_reachable(self) -> bool:
        """Check the catalog answers a HEAD request with a 2xx status."""
        try:
            response = self.session.head(self.presets_url, timeout=self.timeout)
            return response.ok
        except requests.RequestException as e:
            logger.warning(f"Catalog not reachable at {self.presets_url}: {e}")
            return False

    def fetch_bytes(self, url: str) -> bytes:
        """
        Download a sample file.

        Failed attempts are retried `retries` times, `retry_delay` seconds apart.

        Raises:
            SampleFetchError: If every attempt fails
        """
        attempt = 0
        while True:
            try:
                response = self._get(url)
                logger.debug(f"Downloaded {len(response.content)} bytes from {url}")
                return response.content
            except SampleFetchError as e:
                logger.warning(f"Download attempt {attempt + 1} failed: {e.technical_message}")
                if attempt >= self.retries:
                    raise

            attempt += 1
            logger.debug(f"Retrying {url} ({attempt}/{self.retries})")
            time.sleep(self.retry_delay)

    def _get(self, url: str) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SampleFetchError(url, str(e)) from e

        if not response.ok:
            raise SampleFetchError(
                url,
                f"HTTP {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
