"""
Public signing key cache for the Google Secure Token identity provider.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import httpx
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from shared.config import GOOGLE_CERTS_URL
from shared.errors import ExternalServiceError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

DEFAULT_MAX_AGE_SECONDS = 3600


class KeyNotFoundError(LookupError):
    """No signing key is published under the requested key id."""

    def __init__(self, kid: str, refreshed: bool = False):
        self.kid = kid
        self.refreshed = refreshed
        where = "after refresh" if refreshed else "in cache"
        super().__init__(f"key id {kid!r} not found {where}")


class KeyFetchError(ExternalServiceError):
    """The certificate endpoint could not produce a usable key set."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__("google-certs", message, details)


@dataclass(frozen=True)
class SigningKey:
    """RSA public key published under a key id."""

    kid: str
    public_key: rsa.RSAPublicKey = field(repr=False)
    pem: str = field(repr=False, compare=False)

    @classmethod
    def from_certificate(cls, kid: str, certificate_pem: str) -> "SigningKey":
        """Extract the RSA public key from a PEM-encoded X.509 certificate."""
        try:
            certificate = x509.load_pem_x509_certificate(certificate_pem.encode("utf-8"))
        except ValueError as exc:
            raise KeyFetchError(f"invalid certificate for key {kid!r}", {"kid": kid}) from exc

        public_key = certificate.public_key()
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise KeyFetchError(f"key {kid!r} is not RSA", {"kid": kid})

        pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")
        return cls(kid=kid, public_key=public_key, pem=pem)


def parse_max_age(cache_control: Optional[str], default: int = DEFAULT_MAX_AGE_SECONDS) -> int:
    """Return the ``max-age`` directive of a Cache-Control header in seconds.

    The last parseable directive wins; anything else falls back to ``default``.
    """
    max_age = default
    if not cache_control:
        return max_age

    for directive in cache_control.split(","):
        directive = directive.strip()
        if not directive.lower().startswith("max-age="):
            continue
        value = directive[len("max-age="):].strip().strip('"')
        if value.isdigit():
            max_age = int(value)
    return max_age


class PublicKeyCache:
    """Process-wide cache of the identity provider's signing keys.

    The provider republishes its full key set together, so one expiry covers
    every key. Lookups against a fresh cache never touch the network. An
    expired (or empty) cache is refreshed under a lock; the refresher checks
    expiry again once it holds the lock so that callers racing into the same
    expiry trigger a single fetch.

    A failed refresh keeps the previous keys and leaves the cache expired, so
    the next lookup tries again.
    """

    def __init__(
        self,
        certs_url: str = GOOGLE_CERTS_URL,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        http_timeout: float = 10.0,
        clock: Callable[[], float] = time.time,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.certs_url = certs_url
        self.logger = get_logger("identity.keys")
        self.metrics = metrics

        self._clock = clock
        self._keys: Dict[str, SigningKey] = {}
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=http_timeout)

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def is_expired(self) -> bool:
        return self._clock() >= self._expires_at

    def key_ids(self) -> List[str]:
        return sorted(self._keys)

    async def get_key(self, kid: str) -> SigningKey:
        """Return the signing key for ``kid``.

        Raises:
            KeyNotFoundError: the current key set has no such key id.
            KeyFetchError: the cache was expired and could not be refreshed.
        """
        if not self.is_expired():
            key = self._keys.get(kid)
            if key is None:
                # A fresh cache missing the kid means a forged or tampered
                # token, not a rotation.
                raise KeyNotFoundError(kid)
            return key

        await self.refresh()

        key = self._keys.get(kid)
        if key is None:
            raise KeyNotFoundError(kid, refreshed=True)
        return key

    async def refresh(self) -> None:
        """Fetch the published key set if the cache is expired."""
        async with self._lock:
            if not self.is_expired():
                return

            started = time.perf_counter()
            try:
                keys, max_age = await self._fetch()
            except KeyFetchError as exc:
                self._record_refresh("error", started)
                self.logger.error(
                    "Failed to refresh signing keys",
                    error=exc.message,
                    stale_keys=len(self._keys),
                )
                raise

            # Replace, never merge: the provider always publishes the full set.
            self._keys = keys
            self._expires_at = self._clock() + max_age
            self._record_refresh("success", started)
            self.logger.info(
                "Refreshed signing keys",
                count=len(keys),
                expires_in_seconds=max_age,
            )

    async def _fetch(self):
        try:
            response = await self._client.get(self.certs_url)
        except httpx.HTTPError as exc:
            raise KeyFetchError(f"request failed: {exc.__class__.__name__}") from exc

        if response.status_code != 200:
            raise KeyFetchError(
                f"certificate endpoint returned status {response.status_code}",
                {"status_code": str(response.status_code)},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise KeyFetchError("certificate response is not valid JSON") from exc

        if not isinstance(payload, dict):
            raise KeyFetchError("certificate response is not a JSON object")

        keys: Dict[str, SigningKey] = {}
        for kid, certificate_pem in payload.items():
            if not isinstance(certificate_pem, str):
                raise KeyFetchError(f"certificate for key {kid!r} is not a string", {"kid": kid})
            keys[kid] = SigningKey.from_certificate(kid, certificate_pem)

        return keys, parse_max_age(response.headers.get("Cache-Control"))

    def _record_refresh(self, status: str, started: float) -> None:
        if self.metrics is not None:
            self.metrics.record_key_refresh(status, time.perf_counter() - started)

    def clear(self) -> None:
        """Drop all keys and mark the cache expired."""
        self._keys = {}
        self._expires_at = 0.0
        self.logger.info("Signing key cache cleared")

    async def aclose(self) -> None:
        """Close the HTTP client if this cache created it."""
        if self._owns_client:
            await self._client.aclose()
