"""
Fingerprint-keyed response cache on top of a KeyValueStore.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from shared.logging import get_logger

from ..domain.models import CachedResponse
from ..fingerprint import fingerprint_key
from .codec import deserialize_response, serialize_response
from .store import KeyValueStore


class ResponseCache:
    """Reads and writes CachedResponses under hex fingerprint keys.

    Expiry belongs to the store: every write carries the same TTL and no
    age checks happen here.
    """

    def __init__(self, store: KeyValueStore, ttl: timedelta):
        self.store = store
        self.ttl = ttl
        self.logger = get_logger("proxy.cache")

    async def lookup(self, fingerprint: int) -> Optional[CachedResponse]:
        """Return the cached response, or None when the key is absent.

        Raises StoreUnavailable on transport failure and StoreCorrupt when
        the stored entry cannot be decoded.
        """
        key = fingerprint_key(fingerprint)
        raw = await self.store.get(key)
        if raw is None:
            return None
        return deserialize_response(raw)

    async def store_response(self, fingerprint: int, response: CachedResponse) -> None:
        """Write ``response`` under ``fingerprint`` with the configured TTL.

        Raises StoreUnavailable when the write fails.
        """
        key = fingerprint_key(fingerprint)
        await self.store.set(key, serialize_response(response), self.ttl)
        self.logger.debug("Cached response", key=key, ttl_seconds=self.ttl.total_seconds())
