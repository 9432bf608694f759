"""
Data models for the caching proxy.
"""

from dataclasses import dataclass
from typing import Any, Dict
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SUPPORTED_SCHEMES = ("http", "https")


class RequestDescription(BaseModel):
    """Outbound request a client asks the proxy to perform.

    Only ``url`` is recognized today. Unknown attributes are accepted and
    dropped, so they never reach the fingerprint.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str = Field(..., description="Absolute http(s) URL, used verbatim")

    @field_validator("url")
    @classmethod
    def _require_absolute_http_url(cls, value: str) -> str:
        if not value:
            raise ValueError("url must not be empty")
        parts = urlsplit(value)
        if parts.scheme.lower() not in _SUPPORTED_SCHEMES:
            raise ValueError("url must use http or https")
        if not parts.netloc:
            raise ValueError("url must be absolute")
        return value

    def fingerprint_fields(self) -> Dict[str, Any]:
        """Recognized attributes that define request identity."""
        return self.model_dump()


@dataclass(frozen=True)
class CachedResponse:
    """Recorded upstream response replayed on cache hits."""

    body: bytes
    content_type: str = ""
