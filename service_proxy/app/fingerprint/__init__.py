"""
Fingerprinting of request descriptions into 64-bit cache keys.
"""

from .hasher import FINGERPRINT_VERSION, fingerprint, fingerprint_key, fingerprint_value

__all__ = ["FINGERPRINT_VERSION", "fingerprint", "fingerprint_key", "fingerprint_value"]
