"""
Wire format for cached responses.

Entries are compact JSON objects::

    {"string": "<body>", "ContentType": "<content type>"}

Bodies that are not valid UTF-8 are base64 encoded and flagged with an
extra ``"Encoding": "base64"`` field. Unknown fields are ignored on read.
"""

import base64
import binascii
import json
from typing import Any, Dict

from shared.errors import StoreCorrupt

from ..domain.models import CachedResponse

BODY_FIELD = "string"
CONTENT_TYPE_FIELD = "ContentType"
ENCODING_FIELD = "Encoding"
BASE64_ENCODING = "base64"


def serialize_response(response: CachedResponse) -> str:
    """Serialize a CachedResponse for the store."""
    payload: Dict[str, Any] = {}
    try:
        payload[BODY_FIELD] = response.body.decode("utf-8")
    except UnicodeDecodeError:
        payload[BODY_FIELD] = base64.b64encode(response.body).decode("ascii")
        payload[ENCODING_FIELD] = BASE64_ENCODING
    payload[CONTENT_TYPE_FIELD] = response.content_type
    return json.dumps(payload, separators=(",", ":"))


def deserialize_response(raw: str) -> CachedResponse:
    """Rebuild a CachedResponse from its stored form.

    Raises StoreCorrupt for anything that is not a well-formed entry.
    """
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise StoreCorrupt("Cached entry is not valid JSON") from exc

    if not isinstance(payload, dict):
        raise StoreCorrupt("Cached entry is not a JSON object", details={"type": type(payload).__name__})

    text = payload.get(BODY_FIELD, "")
    content_type = payload.get(CONTENT_TYPE_FIELD, "")
    encoding = payload.get(ENCODING_FIELD)
    if not isinstance(text, str) or not isinstance(content_type, str):
        raise StoreCorrupt("Cached entry has non-string fields")

    if encoding is None:
        try:
            body = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise StoreCorrupt("Cached body is not representable as UTF-8") from exc
    elif encoding == BASE64_ENCODING:
        try:
            body = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise StoreCorrupt("Cached body is not valid base64") from exc
    else:
        raise StoreCorrupt("Unknown body encoding", details={"encoding": encoding})

    return CachedResponse(body=body, content_type=content_type)
