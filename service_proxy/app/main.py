"""
Caching HTTP proxy service.

POST (or send with any method) ``{"url": "..."}`` to ``/``. The response is
the upstream body with its content type, replayed from the store when an
equivalent request was recorded within the cache TTL.
"""

import asyncio
from typing import Dict, Optional

from fastapi import Request, Response
from starlette.requests import ClientDisconnect

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import MalformedInput, ResponseWriteError, StoreError, UpstreamError

from service_proxy.app.adapters.upstream_client import UpstreamClient
from service_proxy.app.caching.response_cache import ResponseCache
from service_proxy.app.caching.store import KeyValueStore, RedisStore
from service_proxy.app.domain.models import CachedResponse
from service_proxy.app.proxy.service import SOURCE_CACHE, ReadThroughProxy

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CACHE_SOURCE_HEADER = "X-Cache"


class ProxyService(BaseService):
    """Caching proxy service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        store: Optional[KeyValueStore] = None,
        upstream: Optional[UpstreamClient] = None,
    ):
        super().__init__("proxy", config)
        self.store = store if store is not None else RedisStore.from_url(
            self.config.redis_url,
            password=self.config.redis_password,
            db=self.config.redis_db,
            socket_timeout=self.config.store_socket_timeout_seconds,
        )
        self.upstream = upstream if upstream is not None else UpstreamClient(
            timeout=self.config.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.response_cache = ResponseCache(self.store, self.config.cache_ttl)
        self.read_through = ReadThroughProxy(self.response_cache, self.upstream, metrics=self.metrics)

        @self.app.on_event("startup")
        async def _startup():
            # Fail fast when the store is unreachable at boot
            await self.store.ping()
            self.logger.info(
                "Proxy started",
                redis_url=self.config.redis_url,
                redis_db=self.config.redis_db,
                cache_ttl_seconds=self.config.cache_ttl.total_seconds(),
            )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.upstream.close()
            await self.store.close()

        self._setup_proxy_routes()

        self.app.state.proxy_service = self

    def _setup_proxy_routes(self):
        """Register the proxy endpoint."""

        @self.app.api_route("/", methods=PROXY_METHODS, include_in_schema=False)
        async def proxy(request: Request):
            """Replay or fetch the upstream response described by the body."""
            try:
                body = await request.body()
            except ClientDisconnect as exc:
                raise MalformedInput("Request body could not be read") from exc

            response, source = await self._serve(body)
            return self._write_response(response, source)

    async def _serve(self, body: bytes):
        """Run the read-through pipeline under the optional request deadline."""
        deadline = self.config.request_timeout_seconds
        if deadline is None:
            return await self.read_through.handle(body)
        try:
            return await asyncio.wait_for(self.read_through.handle(body), timeout=deadline)
        except asyncio.TimeoutError as exc:
            raise UpstreamError("Request deadline exceeded", details={"timeout_seconds": deadline}) from exc

    def _write_response(self, cached: CachedResponse, source: str) -> Response:
        """Build the client reply carrying the recorded content type."""
        headers = {CACHE_SOURCE_HEADER: "HIT" if source == SOURCE_CACHE else "MISS"}
        content_type = cached.content_type
        if content_type:
            if "\r" in content_type or "\n" in content_type:
                raise ResponseWriteError("Content type contains line breaks")
            try:
                content_type.encode("latin-1")
            except UnicodeEncodeError as exc:
                raise ResponseWriteError("Content type is not a valid header value") from exc
            headers["Content-Type"] = content_type
        return Response(content=cached.body, status_code=200, headers=headers)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report store reachability."""
        try:
            await self.store.ping()
            return {"redis": "ok"}
        except StoreError as exc:
            self.logger.error("Store health check failed", **exc.to_log_fields())
            return {"redis": "error"}


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = ProxyService(config)
    return service.app


def main():
    """Console entry point."""
    service = ProxyService()
    service.run()


if __name__ == "__main__":
    main()
