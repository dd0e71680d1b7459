"""Identity claims returned by the external OAuth provider."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GoogleProfile:
    """Subset of the OpenID Connect userinfo the shop needs.

    Attributes:
        google_id: The provider's stable subject identifier (``sub``).
        email: Address Google has verified for the account.
        given_name / family_name: Name parts, possibly missing.
        display_name: Full name, used when the parts are missing.
    """

    google_id: str
    email: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_userinfo(cls, userinfo: Dict[str, Any]) -> "GoogleProfile":
        """Build a profile from a userinfo payload.

        Raises:
            ValueError: If the subject or the email is missing.
        """
        google_id = userinfo.get("sub") or userinfo.get("id")
        email = userinfo.get("email")
        if not google_id or not email:
            raise ValueError("Google profile is missing its subject or email")
        return cls(
            google_id=str(google_id),
            email=email.strip().lower(),
            given_name=userinfo.get("given_name"),
            family_name=userinfo.get("family_name"),
            display_name=userinfo.get("name"),
        )

    @property
    def first_name(self) -> str:
        if self.given_name:
            return self.given_name
        if self.display_name:
            return self.display_name.split(" ")[0]
        return self.email.split("@")[0]

    @property
    def last_name(self) -> str:
        if self.family_name:
            return self.family_name
        if self.display_name and " " in self.display_name:
            return " ".join(self.display_name.split(" ")[1:])
        return "User"
