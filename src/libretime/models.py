"""Data models for LibreTime API integration."""

import warnings
from dataclasses import dataclass


@dataclass
class LibreTimeConfig:
    """Configuration for connecting to a LibreTime v2 API.

    Attributes:
        url: Base server URL (e.g., "https://radio.example.com")
        api_key: LibreTime API key, sent as ``Authorization: Api-Key <key>``
        timeout: Read timeout in seconds
    """

    url: str
    api_key: str
    timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.url or not self.url.startswith(("http://", "https://")):
            raise ValueError("url must be a valid HTTP/HTTPS URL")
        if not self.api_key:
            raise ValueError("api_key is required")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.url.startswith("https://"):
            warnings.warn(
                "Using HTTP instead of HTTPS for LibreTime connection. "
                "The API key will be transmitted insecurely.",
                UserWarning,
                stacklevel=2,
            )

    @property
    def api_base_url(self) -> str:
        return f"{self.url.rstrip('/')}/api/v2"

    def __repr__(self) -> str:
        """Return string representation with the API key masked."""
        return f"LibreTimeConfig(url='{self.url}', api_key='***', timeout={self.timeout})"
