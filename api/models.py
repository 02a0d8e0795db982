"""
API request and response models for TokenAuth REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

A body that fails validation here never reaches AuthFlow; api/main.py turns
RequestValidationError into 400 {"error": "invalid input"}.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import TokenPair
from auth.passwords import MAX_PASSWORD_BYTES

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /register and POST /login.

    Only username is whitespace-stripped; a password is used byte for byte.
    """

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """bcrypt reads at most 72 bytes; reject rather than silently truncate."""
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class RefreshRequest(BaseModel):
    """Request body for POST /refresh."""

    refresh_token: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class TokenPairResponse(BaseModel):
    """Response for POST /login and POST /refresh.

    expires_in is the access token lifetime in seconds, matching the OAuth 2.0
    token response field of the same name.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenPairResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=pair.access_claims.expires_at - pair.access_claims.issued_at,
        )


class ProfileResponse(BaseModel):
    """Response for GET /api/profile."""

    model_config = ConfigDict(frozen=True)

    user: str


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    users: int
