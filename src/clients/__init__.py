"""
Infrastructure Layer - authenticated REST executor and its configuration
"""

from .config import RestConfig
from .rest_client import APIError, ConfigurationError, RestClient, RestClientError, TransportError

__all__ = [
    "RestConfig",
    "RestClient",
    "RestClientError",
    "APIError",
    "ConfigurationError",
    "TransportError",
]
