"""
Claims principal built from an Authware profile, for use with
claims/role based authorization in web frameworks.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .types import Profile

AUTHENTICATION_TYPE = "authware"


class ClaimTypes:
    """Standard claim type URIs."""

    EMAIL = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress"
    NAME_IDENTIFIER = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"
    NAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"
    AUTHENTICATION_METHOD = "http://schemas.microsoft.com/ws/2008/06/identity/claims/authenticationmethod"
    WEBPAGE = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/webpage"
    ROLE = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


@dataclass
class AuthwarePrincipal:
    """An authenticated identity together with the profile it came from."""

    profile: Profile
    claims: List[Claim] = field(default_factory=list)
    authentication_type: str = AUTHENTICATION_TYPE

    def find_first(self, claim_type: str) -> Optional[Claim]:
        return next((c for c in self.claims if c.type == claim_type), None)

    def find_all(self, claim_type: str) -> List[Claim]:
        return [c for c in self.claims if c.type == claim_type]

    def is_in_role(self, role: str) -> bool:
        return any(c.value == role for c in self.find_all(ClaimTypes.ROLE))

    @property
    def identity_name(self) -> Optional[str]:
        claim = self.find_first(ClaimTypes.NAME)
        return claim.value if claim else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.authentication_type)


def to_claims_principal(profile: Profile) -> AuthwarePrincipal:
    """Convert a profile to a principal with email, id, name and role claims."""
    claims = [
        Claim(ClaimTypes.EMAIL, profile.email),
        Claim(ClaimTypes.NAME_IDENTIFIER, str(profile.id)),
        Claim(ClaimTypes.NAME, profile.username),
        Claim(ClaimTypes.AUTHENTICATION_METHOD, "Authware"),
        Claim(ClaimTypes.WEBPAGE, "https://authware.org"),
    ]
    if profile.role is not None:
        claims.append(Claim(ClaimTypes.ROLE, profile.role.name))

    return AuthwarePrincipal(profile=profile, claims=claims)
