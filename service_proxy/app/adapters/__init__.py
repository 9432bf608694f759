"""
Adapters package for the proxy service.

Contains the HTTP client wrapper for upstream fetches. Adapters map
library failures onto shared error kinds and hold no request state.
"""

from .upstream_client import UpstreamClient

__all__ = ["UpstreamClient"]
