"""
Configuration for the authenticated REST client.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "https://api.bitfinex.com/v2/"
DEFAULT_TIMEOUT = 15.0


@dataclass
class RestConfig:
    """
    Connection settings for RestClient.

    Attributes:
        api_key: API key sent in the bfx-apikey header
        api_secret: Secret used to sign requests
        base_url: API root; authenticated paths are resolved against it
        timeout: Per-request timeout in seconds
    """
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RestConfig":
        """
        Load settings from environment variables.

        Reads BFX_API_KEY, BFX_API_SECRET, BFX_API_URL and BFX_API_TIMEOUT.
        Unset variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("BFX_API_KEY"),
            api_secret=env.get("BFX_API_SECRET"),
            base_url=env.get("BFX_API_URL", DEFAULT_BASE_URL),
            timeout=float(env.get("BFX_API_TIMEOUT", DEFAULT_TIMEOUT)),
        )

    def __repr__(self) -> str:
        # Never print credentials
        return (
            f"RestConfig(base_url={self.base_url}, timeout={self.timeout}, "
            f"api_key={'set' if self.api_key else 'unset'})"
        )
