"""
Request fingerprinting.

A request description is walked into a canonical, tagged byte encoding and
digested with BLAKE2b truncated to 64 bits. The encoding:

- prefixes every value with a one-byte type tag and a length, so nested
  structures cannot be confused with flat ones;
- sorts mapping entries by their encoded key, so field order is irrelevant;
- encodes both the key and the value of every field.

The digest is keyed with a version personalisation string. Changing the
encoding must bump FINGERPRINT_VERSION, which starts a fresh keyspace.
"""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Mapping
from typing import Any, List, Set

from shared.errors import FingerprintError

from ..domain.models import RequestDescription

FINGERPRINT_VERSION = 1
FINGERPRINT_BITS = 64

_PERSON = f"reqfp-v{FINGERPRINT_VERSION}".encode("ascii")

_TAG_NONE = b"N"
_TAG_TRUE = b"T"
_TAG_FALSE = b"F"
_TAG_INT = b"I"
_TAG_FLOAT = b"D"
_TAG_STR = b"S"
_TAG_BYTES = b"B"
_TAG_SEQUENCE = b"L"
_TAG_SET = b"U"
_TAG_MAPPING = b"M"


def fingerprint(description: RequestDescription) -> int:
    """Reduce a request description to a stable 64-bit fingerprint."""
    return fingerprint_value(description.fingerprint_fields())


def fingerprint_value(value: Any) -> int:
    """Fingerprint an arbitrary structure of plain values."""
    encoded = _encode(value, set())
    digest = hashlib.blake2b(encoded, digest_size=FINGERPRINT_BITS // 8, person=_PERSON).digest()
    return int.from_bytes(digest, "big")


def fingerprint_key(value: int) -> str:
    """Render a fingerprint as a store key: lowercase hex, no padding."""
    if value < 0 or value >= 1 << FINGERPRINT_BITS:
        raise FingerprintError("Fingerprint out of range", details={"value": value})
    return format(value, "x")


def _frame(tag: bytes, payload: bytes) -> bytes:
    return tag + struct.pack(">Q", len(payload)) + payload


def _encode(value: Any, active: Set[int]) -> bytes:
    # bool is an int subclass; test it first
    if value is None:
        return _frame(_TAG_NONE, b"")
    if value is True:
        return _frame(_TAG_TRUE, b"")
    if value is False:
        return _frame(_TAG_FALSE, b"")
    if isinstance(value, int):
        return _frame(_TAG_INT, str(value).encode("ascii"))
    if isinstance(value, float):
        return _frame(_TAG_FLOAT, value.hex().encode("ascii"))
    if isinstance(value, str):
        try:
            return _frame(_TAG_STR, value.encode("utf-8"))
        except UnicodeEncodeError as exc:
            raise FingerprintError("String value is not encodable as UTF-8") from exc
    if isinstance(value, (bytes, bytearray)):
        return _frame(_TAG_BYTES, bytes(value))
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return _encode_container(value, active)

    raise FingerprintError(
        "Unsupported value in request description",
        details={"type": type(value).__name__},
    )


def _encode_container(value: Any, active: Set[int]) -> bytes:
    marker = id(value)
    if marker in active:
        raise FingerprintError("Cyclic structure in request description")
    active.add(marker)
    try:
        if isinstance(value, Mapping):
            entries = sorted(
                _encode(key, active) + _encode(item, active)
                for key, item in value.items()
            )
            return _frame(_TAG_MAPPING, b"".join(entries))
        if isinstance(value, (set, frozenset)):
            members = sorted(_encode(item, active) for item in value)
            return _frame(_TAG_SET, b"".join(members))
        items: List[bytes] = [_encode(item, active) for item in value]
        return _frame(_TAG_SEQUENCE, b"".join(items))
    finally:
        active.discard(marker)
