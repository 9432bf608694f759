"""
Domain types for the proxy: what clients ask for and what gets recorded.
"""

from .models import CachedResponse, RequestDescription
from .decoder import decode_request

__all__ = ["CachedResponse", "RequestDescription", "decode_request"]
