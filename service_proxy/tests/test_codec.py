"""
Unit tests for the cached response wire format.
"""

import json

import pytest

from service_proxy.app.caching import deserialize_response, serialize_response
from service_proxy.app.domain import CachedResponse
from shared.errors import StoreCorrupt


class TestSerializeResponse:
    """Test cases for serialize_response."""

    def test_text_body_uses_reference_layout(self):
        raw = serialize_response(CachedResponse(body=b"hello", content_type="text/plain"))

        assert json.loads(raw) == {"string": "hello", "ContentType": "text/plain"}

    def test_binary_body_is_base64_flagged(self):
        raw = serialize_response(CachedResponse(body=b"\x89PNG\xff\x00", content_type="image/png"))
        payload = json.loads(raw)

        assert payload["Encoding"] == "base64"
        assert payload["string"] == "iVBOR/8A"
        assert payload["ContentType"] == "image/png"


class TestDeserializeResponse:
    """Test cases for deserialize_response."""

    def test_reads_reference_layout(self):
        response = deserialize_response('{"string":"hello","ContentType":"text/plain"}')

        assert response == CachedResponse(body=b"hello", content_type="text/plain")

    def test_tolerates_additional_fields(self):
        response = deserialize_response('{"string":"hi","ContentType":"text/html","StoredAt":"2024-01-01"}')

        assert response == CachedResponse(body=b"hi", content_type="text/html")

    def test_missing_fields_default_to_empty(self):
        assert deserialize_response("{}") == CachedResponse(body=b"", content_type="")

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2]",
            '"hello"',
            '{"string": 5, "ContentType": "text/plain"}',
            '{"string": "x", "ContentType": null}',
            '{"string": "%%%", "Encoding": "base64"}',
            '{"string": "x", "Encoding": "rot13"}',
            '{"string": "\\ud800"}',
        ],
    )
    def test_corrupt_entries_raise(self, raw):
        with pytest.raises(StoreCorrupt):
            deserialize_response(raw)


class TestRoundTrip:
    """deserialize(serialize(x)) == x for every body."""

    @pytest.mark.parametrize(
        "response",
        [
            CachedResponse(body=b"", content_type=""),
            CachedResponse(body=b"A", content_type="text/plain"),
            CachedResponse(body="héllo ☃ \U0001f600".encode("utf-8"), content_type="text/plain; charset=utf-8"),
            CachedResponse(body=b'{"nested": "<json> & \\"quotes\\""}\n', content_type="application/json"),
            CachedResponse(body=b"line1\r\nline2\x00tail", content_type="application/octet-stream"),
            CachedResponse(body=bytes(range(256)), content_type="application/octet-stream"),
        ],
    )
    def test_round_trip_is_byte_identical(self, response):
        restored = deserialize_response(serialize_response(response))

        assert restored == response
        assert restored.body == response.body
