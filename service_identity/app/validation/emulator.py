"""
Verifier for tokens minted by the local Auth emulator.

The emulator signs nothing (``alg: none``), so this path reads claims
without any signature check. It is only ever constructed when an emulator
host is configured for the whole process; see ``factory.build_verifier``.
"""

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import JWTError

from .base import TokenVerifier, parse_claims, read_unverified_header
from .errors import VerificationError, VerificationErrorKind
from .models import NormalizedIdentity

EMULATOR_ALGORITHMS = frozenset({ALGORITHMS.NONE, ALGORITHMS.RS256})


class EmulatorTokenVerifier(TokenVerifier):
    """Accepts unsigned emulator tokens; enforces only a non-empty subject."""

    mode = "emulator"

    def __init__(self, emulator_host: str) -> None:
        self.emulator_host = emulator_host

    async def verify(self, token: str, expected_audience: str) -> NormalizedIdentity:
        header = read_unverified_header(token)

        algorithm = header.get("alg")
        if not isinstance(algorithm, str) or algorithm not in EMULATOR_ALGORITHMS:
            raise VerificationError(
                VerificationErrorKind.UNSUPPORTED_ALGORITHM,
                f"emulator token declares algorithm {algorithm!r}",
            )

        try:
            payload = jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise VerificationError(VerificationErrorKind.MALFORMED_TOKEN, str(exc)) from exc

        claims = parse_claims(payload)
        if not claims.sub:
            raise VerificationError(
                VerificationErrorKind.MISSING_SUBJECT,
                "emulator token subject (uid) is empty",
            )

        return NormalizedIdentity.from_claims(claims)
