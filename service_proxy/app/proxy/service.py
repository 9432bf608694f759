"""
Read-through proxy: decode, fingerprint, replay or fetch-and-record.
"""

from __future__ import annotations

from typing import Optional, Tuple, TYPE_CHECKING

from shared.errors import StoreError
from shared.logging import get_logger, set_fingerprint

from ..adapters.upstream_client import UpstreamClient
from ..caching.response_cache import ResponseCache
from ..domain.decoder import decode_request
from ..domain.models import CachedResponse
from ..fingerprint import fingerprint, fingerprint_key

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector

SOURCE_CACHE = "cache"
SOURCE_UPSTREAM = "upstream"


class ReadThroughProxy:
    """Coordinates the response cache and the upstream client.

    Store failures never fail a request: a failed lookup is treated as a
    miss and a failed write is only logged. Decoding, fingerprinting and
    upstream failures propagate to the caller.
    """

    def __init__(
        self,
        cache: ResponseCache,
        upstream: UpstreamClient,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.cache = cache
        self.upstream = upstream
        self.metrics = metrics
        self.logger = get_logger("proxy.read_through")

    async def handle(self, raw_body: bytes) -> Tuple[CachedResponse, str]:
        """
        Serve one request body.

        Returns the response to replay and where it came from:
        SOURCE_CACHE or SOURCE_UPSTREAM.
        """
        description = decode_request(raw_body)
        digest = fingerprint(description)
        key = fingerprint_key(digest)
        set_fingerprint(key)

        cached = await self._lookup(digest, key)
        if cached is not None:
            self.logger.info("Serving response from cache", fingerprint=key)
            self._count("cache_hits_total")
            return cached, SOURCE_CACHE

        self._count("cache_misses_total")
        self.logger.info("Performing upstream request", fingerprint=key, url=description.url)
        response = await self.upstream.fetch(description)

        try:
            await self.cache.store_response(digest, response)
        except StoreError as exc:
            self.logger.error("Error setting cache", fingerprint=key, **exc.to_log_fields())
            self._count("cache_store_errors_total")

        return response, SOURCE_UPSTREAM

    async def _lookup(self, digest: int, key: str) -> Optional[CachedResponse]:
        """Cache lookup where any store failure reads as a miss."""
        try:
            return await self.cache.lookup(digest)
        except StoreError as exc:
            self.logger.warning("Error retrieving cache", fingerprint=key, **exc.to_log_fields())
            self._count("cache_lookup_errors_total", kind=exc.code)
            return None

    def _count(self, metric_name: str, **labels) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)
