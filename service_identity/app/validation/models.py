"""
Claim and identity models for verified tokens.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict


class IdentityClaims(BaseModel):
    """Claims carried by a Secure Token ID token."""

    model_config = ConfigDict(extra="ignore")

    iss: Optional[str] = None
    aud: Union[str, List[str], None] = None
    sub: Optional[str] = None
    exp: Optional[float] = None
    iat: Optional[float] = None
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None

    @property
    def audiences(self) -> List[str]:
        if self.aud is None:
            return []
        if isinstance(self.aud, str):
            return [self.aud]
        return list(self.aud)


class NormalizedIdentity(BaseModel):
    """Identity returned to callers of the identity endpoint."""

    uid: str
    email: str = ""
    name: str = ""
    picture: str = ""

    @classmethod
    def from_claims(cls, claims: IdentityClaims) -> "NormalizedIdentity":
        return cls(
            uid=claims.sub or "",
            email=claims.email or "",
            name=claims.name or "",
            picture=claims.picture or "",
        )
