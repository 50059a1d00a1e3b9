"""Account and session models for the API under test."""

import random
import re
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^test\d{4}@example\.com$")
PASSWORD_PATTERN = re.compile(r"^\d{6}$")


class Account(BaseModel):
    """Credentials registered once per run."""

    email: str
    password: str

    model_config = {"frozen": True}

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email matches the generated pattern."""
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Email must look like test<4 digits>@example.com")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password is a 6-digit numeric string."""
        if not PASSWORD_PATTERN.match(v):
            raise ValueError("Password must be a 6-digit numeric string")
        return v

    @classmethod
    def generate(cls, rng: Optional[random.Random] = None) -> "Account":
        """Generate a random account.

        Args:
            rng: Random source. Uses the module-level generator if None.

        Returns:
            New account with a 4-digit email suffix and 6-digit password
        """
        rng = rng or random
        return cls(
            email=f"test{rng.randint(1000, 9999)}@example.com",
            password=str(rng.randint(100000, 999999)),
        )

    def credentials(self) -> Dict[str, str]:
        """Request body for register and login."""
        return {"email": self.email, "password": self.password}


class Session(BaseModel):
    """Authenticated session obtained from login."""

    access_token: str = Field(..., min_length=1)
    user: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def auth_headers(self) -> Dict[str, str]:
        """Headers that authenticate a request with this session."""
        return {"Authorization": f"Bearer {self.access_token}"}

    def claims(self) -> Dict[str, Any]:
        """Decode the token claims without verifying the signature.

        The signing secret belongs to the server, so the claims are only
        useful for diagnostics (subject, email, expiry).

        Returns:
            Token claims, or an empty dict if the token is not a JWT
        """
        try:
            return jwt.decode(self.access_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return {}

    @property
    def user_id(self) -> Optional[int]:
        """ID of the logged in user, if the server reported it."""
        if "id" in self.user:
            return self.user["id"]
        sub = self.claims().get("sub")
        if sub is not None and str(sub).isdigit():
            return int(sub)
        return None
