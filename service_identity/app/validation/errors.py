"""
Verification failure taxonomy.
"""

from enum import Enum

from shared.errors import AuthenticationError


class VerificationErrorKind(str, Enum):
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    MALFORMED_TOKEN = "malformed_token"
    MISSING_KEY_ID = "missing_key_id"
    UNKNOWN_KEY = "unknown_key"
    KEY_UNAVAILABLE = "key_unavailable"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    INVALID_CLAIMS = "invalid_claims"
    MISSING_SUBJECT = "missing_subject"
    BAD_ISSUER = "bad_issuer"
    BAD_AUDIENCE = "bad_audience"


class VerificationError(AuthenticationError):
    """A token failed verification.

    The caller-visible message is always the generic UNAUTHENTICATED one;
    ``kind`` and ``detail`` are for server-side logs. ``detail`` must never
    carry the token itself.
    """

    def __init__(self, kind: VerificationErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(details={"reason": kind.value, "detail": detail})

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}" if self.detail else self.kind.value
