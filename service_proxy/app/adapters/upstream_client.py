"""
Async HTTP client used to fetch upstream responses on cache misses.
"""

from __future__ import annotations

import time
from typing import Optional, TYPE_CHECKING

import httpx

from shared.errors import UpstreamError
from shared.logging import get_logger

from ..domain.models import CachedResponse, RequestDescription

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class UpstreamClient:
    """Performs one GET per request description.

    Any completed exchange is returned, whatever its status code. Only
    failures to issue the request or to read the body raise UpstreamError.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        metrics: Optional["MetricsCollector"] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.logger = get_logger("proxy.upstream")
        self.metrics = metrics
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch(self, description: RequestDescription) -> CachedResponse:
        """GET ``description.url`` and record its body and content type."""
        url = description.url
        start = time.perf_counter()
        try:
            response = await self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UpstreamError("Upstream request failed", details={"url": url}) from exc

        duration = time.perf_counter() - start
        if self.metrics:
            self.metrics.increment_counter(
                "upstream_fetches_total",
                status_class=f"{response.status_code // 100}xx",
            )
            self.metrics.observe_histogram("upstream_fetch_duration_seconds", duration)

        self.logger.info(
            "Upstream responded",
            url=url,
            status_code=response.status_code,
            bytes=len(response.content),
            duration_ms=round(duration * 1000, 2),
        )
        return CachedResponse(
            body=response.content,
            content_type=response.headers.get("content-type", ""),
        )
