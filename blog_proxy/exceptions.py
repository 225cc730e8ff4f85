"""Custom exceptions for the blog proxy.

Upstream-origin failures are split by how the API layer has to answer them:
absence maps to 404, everything else the upstream causes maps to 500.
"""

from typing import Dict, Optional


class BlogProxyError(Exception):
    """Base exception for all blog proxy operations."""
    pass


class ValidationError(BlogProxyError):
    """Inbound parameters failed validation. Never reaches the gateway."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFound(BlogProxyError):
    """The upstream confirmed the requested resource does not exist."""
    pass


class UpstreamUnavailable(BlogProxyError):
    """Network failure, timeout or non-2xx answer from the upstream API."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class InvalidResponse(BlogProxyError):
    """The upstream answered with a payload that could not be parsed."""
    pass


class ConfigurationError(BlogProxyError):
    """A required setting is missing for the requested operation."""
    pass


class CacheUnavailable(BlogProxyError):
    """The cache backend failed to read or write."""
    pass
