"""
Production verifier for Secure Token ID tokens.
"""

import time
from typing import Any, Dict

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from ..keys import KeyFetchError, KeyNotFoundError, PublicKeyCache, SigningKey
from .base import TokenVerifier, parse_claims, read_unverified_header
from .errors import VerificationError, VerificationErrorKind
from .models import IdentityClaims, NormalizedIdentity

ISSUER_PREFIX = "https://securetoken.google.com/"
PINNED_ALGORITHM = ALGORITHMS.RS256


def expected_issuer(project_id: str) -> str:
    return ISSUER_PREFIX + project_id


class ProductionTokenVerifier(TokenVerifier):
    """Checks signature, lifetime, subject, issuer and audience.

    The algorithm is pinned to RS256: the header's ``alg`` only decides
    whether a token is rejected, never whether its signature is checked.
    No claim is trusted before the signature has been verified.
    """

    mode = "production"

    def __init__(self, key_cache: PublicKeyCache, *, clock_skew_seconds: int = 0) -> None:
        self.key_cache = key_cache
        self.clock_skew_seconds = clock_skew_seconds

    async def verify(self, token: str, expected_audience: str) -> NormalizedIdentity:
        header = read_unverified_header(token)

        algorithm = header.get("alg")
        if algorithm != PINNED_ALGORITHM:
            raise VerificationError(
                VerificationErrorKind.UNSUPPORTED_ALGORITHM,
                f"token declares algorithm {algorithm!r}",
            )

        kid = header.get("kid")
        if not isinstance(kid, str) or not kid:
            raise VerificationError(VerificationErrorKind.MISSING_KEY_ID, "token header has no kid")

        signing_key = await self._resolve_key(kid)
        claims = parse_claims(self._decode(token, signing_key))
        self._check_lifetime(claims)

        if not claims.sub:
            raise VerificationError(VerificationErrorKind.MISSING_SUBJECT, "token subject (uid) is empty")

        issuer = expected_issuer(expected_audience)
        if claims.iss != issuer:
            raise VerificationError(
                VerificationErrorKind.BAD_ISSUER,
                f"got {claims.iss!r}, want {issuer!r}",
            )

        if expected_audience not in claims.audiences:
            raise VerificationError(
                VerificationErrorKind.BAD_AUDIENCE,
                f"{claims.audiences!r} does not contain {expected_audience!r}",
            )

        return NormalizedIdentity.from_claims(claims)

    async def _resolve_key(self, kid: str) -> SigningKey:
        try:
            return await self.key_cache.get_key(kid)
        except KeyNotFoundError as exc:
            raise VerificationError(VerificationErrorKind.UNKNOWN_KEY, str(exc)) from exc
        except KeyFetchError as exc:
            raise VerificationError(VerificationErrorKind.KEY_UNAVAILABLE, exc.message) from exc

    def _decode(self, token: str, signing_key: SigningKey) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                signing_key.pem,
                algorithms=[PINNED_ALGORITHM],
                options={
                    "verify_aud": False,
                    "verify_at_hash": False,
                    "leeway": self.clock_skew_seconds,
                },
            )
        except ExpiredSignatureError as exc:
            raise VerificationError(VerificationErrorKind.EXPIRED, str(exc)) from exc
        except JWTClaimsError as exc:
            raise VerificationError(VerificationErrorKind.INVALID_CLAIMS, str(exc)) from exc
        except JWTError as exc:
            raise VerificationError(VerificationErrorKind.BAD_SIGNATURE, str(exc)) from exc

    def _check_lifetime(self, claims: IdentityClaims) -> None:
        if claims.exp is None or claims.iat is None:
            raise VerificationError(VerificationErrorKind.INVALID_CLAIMS, "token lacks exp or iat")
        if claims.iat > time.time() + self.clock_skew_seconds:
            raise VerificationError(VerificationErrorKind.INVALID_CLAIMS, "token issued in the future")
