"""
Common verifier interface and token parsing helpers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from jose import jwt
from jose.exceptions import JWTError
from pydantic import ValidationError

from .errors import VerificationError, VerificationErrorKind
from .models import IdentityClaims, NormalizedIdentity


class TokenVerifier(ABC):
    """Turns a bearer token into a normalized identity or raises VerificationError."""

    mode: str

    @abstractmethod
    async def verify(self, token: str, expected_audience: str) -> NormalizedIdentity:
        """Verify ``token`` for ``expected_audience``."""


def read_unverified_header(token: str) -> Dict[str, Any]:
    """Decode the JOSE header without checking the signature."""
    try:
        return jwt.get_unverified_header(token)
    except JWTError as exc:
        raise VerificationError(VerificationErrorKind.MALFORMED_TOKEN, str(exc)) from exc


def parse_claims(payload: Dict[str, Any]) -> IdentityClaims:
    try:
        return IdentityClaims.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise VerificationError(
            VerificationErrorKind.INVALID_CLAIMS,
            f"claims have unexpected types: {fields}",
        ) from exc
