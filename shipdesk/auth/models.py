"""Authentication models for ShipDesk."""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

ADMIN_ROLE = "admin"


class Admin(BaseModel):
    """Admin account as stored."""

    id: str
    name: str
    email: str
    password_hash: str
    created_at: str


class Identity(BaseModel):
    """Caller identity attached to a request by the auth gate."""

    subject_id: str = Field(..., description="Admin or user id from the token subject")
    role: Optional[str] = Field(None, description="Role claim from the token")

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class TokenPayload(BaseModel):
    """JWT token payload issued by /login."""

    sub: str = Field(..., description="Subject (admin id)")
    role: Optional[str] = None
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = None


class RegisterRequest(BaseModel):
    """Request model for admin registration."""

    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Admin email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        # bcrypt only looks at the first 72 bytes
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class LoginRequest(BaseModel):
    """Request model for admin login."""

    email: EmailStr = Field(..., description="Admin email address")
    password: str = Field(..., min_length=1, description="Admin password")


class TokenResponse(BaseModel):
    """Response model for /login."""

    token: str


class MessageResponse(BaseModel):
    """Generic message response."""

    msg: str
