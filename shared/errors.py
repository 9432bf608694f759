"""
Shared error handling for the caching proxy.

Every failure the proxy can observe is mapped onto one of the kinds below.
Whether a kind reaches the client or is absorbed by the read-through policy
is decided by the caller, not by the exception itself.
"""

from typing import Dict, Any, Optional


class ProxyError(Exception):
    """Base exception for proxy services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_log_fields(self) -> Dict[str, Any]:
        """Flatten the error into structured log fields."""
        fields: Dict[str, Any] = {"code": self.code, "error": self.message}
        if self.details:
            fields["details"] = self.details
        cause = self.__cause__
        if cause is not None:
            fields["cause"] = f"{type(cause).__name__}: {cause}"
        return fields


class MalformedInput(ProxyError):
    """The inbound body is not a valid request description."""

    def __init__(self, message: str = "Malformed request description", details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_INPUT", message, details)


class FingerprintError(ProxyError):
    """A request description could not be reduced to a fingerprint."""

    def __init__(self, message: str = "Unable to fingerprint request", details: Optional[Dict[str, Any]] = None):
        super().__init__("FINGERPRINT_ERROR", message, details)


class StoreError(ProxyError):
    """Key-value store failures."""


class StoreUnavailable(StoreError):
    """The store could not be reached or rejected the command."""

    def __init__(self, message: str = "Store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class StoreCorrupt(StoreError):
    """A stored entry could not be deserialized."""

    def __init__(self, message: str = "Stored entry is corrupt", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_CORRUPT", message, details)


class UpstreamError(ProxyError):
    """The upstream request could not be issued or its body not read."""

    def __init__(self, message: str = "Upstream request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_ERROR", message, details)


class ResponseWriteError(ProxyError):
    """The reply to the client could not be produced."""

    def __init__(self, message: str = "Unable to write response", details: Optional[Dict[str, Any]] = None):
        super().__init__("RESPONSE_WRITE_ERROR", message, details)
