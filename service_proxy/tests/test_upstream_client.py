"""
Unit tests for the upstream HTTP client.
"""

import httpx
import pytest

from service_proxy.app.adapters import UpstreamClient
from service_proxy.app.domain import CachedResponse, RequestDescription
from shared.errors import UpstreamError
from shared.metrics import MetricsCollector
from shared.test_helpers import UpstreamStub


@pytest.fixture
def upstream():
    stub = UpstreamStub()
    stub.add("http://u/a", b"A", "text/plain")
    stub.add("http://u/missing", b"not found", "text/html", status_code=404)
    stub.add("http://u/bare", b"\x00\x01", content_type=None)
    return stub


class TestUpstreamClient:
    """Test cases for UpstreamClient."""

    @pytest.mark.asyncio
    async def test_fetch_records_body_and_content_type(self, upstream):
        client = UpstreamClient(transport=upstream.transport)
        try:
            response = await client.fetch(RequestDescription(url="http://u/a"))
        finally:
            await client.close()

        assert response == CachedResponse(body=b"A", content_type="text/plain")
        assert upstream.call_count("http://u/a") == 1

    @pytest.mark.asyncio
    async def test_error_statuses_are_returned(self, upstream):
        client = UpstreamClient(transport=upstream.transport)
        try:
            response = await client.fetch(RequestDescription(url="http://u/missing"))
        finally:
            await client.close()

        assert response.body == b"not found"
        assert response.content_type == "text/html"

    @pytest.mark.asyncio
    async def test_missing_content_type_is_empty(self, upstream):
        client = UpstreamClient(transport=upstream.transport)
        try:
            response = await client.fetch(RequestDescription(url="http://u/bare"))
        finally:
            await client.close()

        assert response == CachedResponse(body=b"\x00\x01", content_type="")

    @pytest.mark.asyncio
    async def test_connection_failure_raises_upstream_error(self, upstream):
        client = UpstreamClient(transport=upstream.transport)
        try:
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch(RequestDescription(url="http://unreachable"))
        finally:
            await client.close()

        assert exc_info.value.code == "UPSTREAM_ERROR"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_read_failure_raises_upstream_error(self):
        def handler(request):
            raise httpx.ReadError("connection reset", request=request)

        client = UpstreamClient(transport=httpx.MockTransport(handler))
        try:
            with pytest.raises(UpstreamError):
                await client.fetch(RequestDescription(url="http://u/a"))
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "http://u/new"})
            return httpx.Response(200, content=b"moved", headers={"Content-Type": "text/plain"})

        client = UpstreamClient(transport=httpx.MockTransport(handler))
        try:
            response = await client.fetch(RequestDescription(url="http://u/old"))
        finally:
            await client.close()

        assert response.body == b"moved"

    @pytest.mark.asyncio
    async def test_records_fetch_metrics(self, upstream):
        metrics = MetricsCollector("proxy")
        client = UpstreamClient(transport=upstream.transport, metrics=metrics)
        try:
            await client.fetch(RequestDescription(url="http://u/a"))
            await client.fetch(RequestDescription(url="http://u/missing"))
        finally:
            await client.close()

        assert metrics.registry.get_sample_value("upstream_fetches_total", {"status_class": "2xx"}) == 1.0
        assert metrics.registry.get_sample_value("upstream_fetches_total", {"status_class": "4xx"}) == 1.0
        assert metrics.registry.get_sample_value("upstream_fetch_duration_seconds_count") == 2.0
