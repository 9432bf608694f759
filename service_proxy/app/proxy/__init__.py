"""
Read-through orchestration for the proxy endpoint.
"""

from .service import SOURCE_CACHE, SOURCE_UPSTREAM, ReadThroughProxy

__all__ = ["ReadThroughProxy", "SOURCE_CACHE", "SOURCE_UPSTREAM"]
