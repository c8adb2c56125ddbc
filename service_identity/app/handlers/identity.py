"""
Identity endpoint handler.
"""

from typing import Optional

from shared.errors import AuthenticationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..validation import NormalizedIdentity, TokenVerifier, VerificationError

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    A missing header, another scheme or an empty token all raise the same
    AuthenticationError.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError(details={"reason": "missing_bearer_token"})

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError(details={"reason": "empty_bearer_token"})
    return token


class IdentityHandler:
    """Resolves the caller's identity from the request's bearer token."""

    def __init__(
        self,
        verifier: TokenVerifier,
        expected_audience: str,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.verifier = verifier
        self.expected_audience = expected_audience
        self.metrics = metrics
        self.logger = get_logger("identity.handler")

    async def authenticate(self, authorization: Optional[str]) -> NormalizedIdentity:
        try:
            token = extract_bearer_token(authorization)
        except AuthenticationError:
            self._record("missing_token")
            raise

        try:
            identity = await self.verifier.verify(token, self.expected_audience)
        except VerificationError as exc:
            self._record(exc.kind.value)
            self.logger.warning(
                "Token verification failed",
                mode=self.verifier.mode,
                reason=exc.kind.value,
                detail=exc.detail,
            )
            raise

        self._record("success")
        self.logger.info("Token verified", mode=self.verifier.mode, uid=identity.uid)
        return identity

    def _record(self, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.record_token_verification(outcome)
