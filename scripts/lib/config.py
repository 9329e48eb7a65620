"""
Scanner configuration.

The Helius endpoint and API key are resolved once at startup into a
ScannerConfig and passed explicitly to the client and scanner.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError


DEFAULT_ENDPOINT = "https://api.helius.xyz/v0"
PLACEHOLDER_API_KEY = "YOUR_HELIUS_API_KEY"
DEFAULT_TIMEOUT = 30.0  # seconds

API_KEY_ENV = "HELIUS_API_KEY"
ENDPOINT_ENV = "HELIUS_ENDPOINT"


@dataclass(frozen=True)
class ScannerConfig:
    """Connection settings for the Helius indexing API."""

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        api_key = (self.api_key or "").strip()
        if not api_key or api_key == PLACEHOLDER_API_KEY:
            raise ConfigurationError("Please configure your Helius API key")

        endpoint = (self.endpoint or "").strip().rstrip("/")
        if not endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid Helius endpoint: {self.endpoint!r}")

        if self.timeout <= 0:
            raise ConfigurationError("Request timeout must be positive")

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "api_key", api_key)
        object.__setattr__(self, "endpoint", endpoint)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> "ScannerConfig":
        """
        Build a config from environment variables, with explicit overrides.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            api_key: Overrides HELIUS_API_KEY when given
            endpoint: Overrides HELIUS_ENDPOINT when given

        Returns:
            A validated ScannerConfig

        Raises:
            ConfigurationError: If the resulting key or endpoint is unusable
        """
        if environ is None:
            environ = os.environ

        return cls(
            api_key=api_key or environ.get(API_KEY_ENV, ""),
            endpoint=endpoint or environ.get(ENDPOINT_ENV, DEFAULT_ENDPOINT),
        )
