"""
Signing key package.

Fetches and caches the X.509 certificates the identity provider publishes
for its token signing keys. The whole key set shares one expiry taken from
the response's Cache-Control max-age.
"""

from .cache import KeyFetchError, KeyNotFoundError, PublicKeyCache, SigningKey, parse_max_age

__all__ = [
    "KeyFetchError",
    "KeyNotFoundError",
    "PublicKeyCache",
    "SigningKey",
    "parse_max_age",
]
