"""Auth domain type definitions for type safety."""

from typing import Optional

from pydantic import BaseModel, Field


class JwtPayload(BaseModel):
    """Access token payload structure."""

    # Standard JWT claims
    sub: Optional[str] = Field(None, description="Subject (user ID)")
    iss: Optional[str] = Field(None, description="Token issuer")
    aud: Optional[str | list[str]] = Field(None, description="Token audience")
    exp: Optional[float] = Field(None, description="Expiration timestamp")
    iat: Optional[float] = Field(None, description="Issued at timestamp")
    jti: Optional[str] = Field(None, description="JWT ID")

    email: Optional[str] = Field(None, description="User email address")

    model_config = {"extra": "allow"}

    def claim(self, name: str) -> Optional[str]:
        """Return an extra claim as a string, or None if absent."""
        value = getattr(self, name, None)
        if value is None and self.model_extra:
            value = self.model_extra.get(name)
        return str(value) if value not in (None, "") else None
