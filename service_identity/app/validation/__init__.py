"""
Token validation package.

Verifies ID tokens issued by the Google Secure Token service and shapes
their claims into a ``NormalizedIdentity``:

- Production verifier: RS256 signature against the cached provider keys,
  expiry and issuance time, subject, issuer and audience.
- Emulator verifier: unsigned tokens from the local Auth emulator; only a
  non-empty subject is enforced.

Every failure is a ``VerificationError`` carrying a ``VerificationErrorKind``
for the logs; callers only ever see a generic UNAUTHENTICATED error.
"""

from .base import TokenVerifier
from .emulator import EmulatorTokenVerifier
from .errors import VerificationError, VerificationErrorKind
from .factory import build_verifier
from .models import IdentityClaims, NormalizedIdentity
from .token_verifier import ISSUER_PREFIX, ProductionTokenVerifier, expected_issuer

__all__ = [
    "EmulatorTokenVerifier",
    "ISSUER_PREFIX",
    "IdentityClaims",
    "NormalizedIdentity",
    "ProductionTokenVerifier",
    "TokenVerifier",
    "VerificationError",
    "VerificationErrorKind",
    "build_verifier",
    "expected_issuer",
]
