"""Shared services used across providers."""

from .http_client import HTTPClient, HTTPClientError

__all__ = [
    "HTTPClient",
    "HTTPClientError",
]
