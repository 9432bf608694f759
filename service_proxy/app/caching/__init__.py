"""
Proxy caching package.

- store: KeyValueStore protocol and the Redis implementation
- codec: JSON wire format for cached responses
- response_cache: fingerprint-keyed lookup and store
"""

from .codec import deserialize_response, serialize_response
from .response_cache import ResponseCache
from .store import KeyValueStore, RedisStore

__all__ = [
    "KeyValueStore",
    "RedisStore",
    "ResponseCache",
    "deserialize_response",
    "serialize_response",
]
