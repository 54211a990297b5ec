"""Request/response schemas for auth endpoints."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from jewelry_api.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    password_too_long,
)

Role = Literal["user", "admin"]

_PHONE_RE = re.compile(r"^[0-9]{10}$")
# Login only bounds input size; anything bcrypt cannot have hashed simply fails to verify.
LOGIN_PASSWORD_MAX_LEN = 1024


class RegisterRequest(BaseModel):
    """New account details. The password is hashed before it reaches the store."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    phone: str = Field(..., description="10-digit phone number")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < NAME_MIN_LEN:
            raise ValueError(
                f"Name must be between {NAME_MIN_LEN} and {NAME_MAX_LEN} characters"
            )
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        v = v.strip()
        if not _PHONE_RE.match(v):
            raise ValueError("Phone number must be 10 digits")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes (UTF-8)")
        if not (
            any(c.islower() for c in v)
            and any(c.isupper() for c in v)
            and any(c.isdigit() for c in v)
        ):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=LOGIN_PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class Principal(BaseModel):
    """Authenticated user handed to route handlers. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    email: str
    phone: str
    role: Role
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthResponse(BaseModel):
    """Returned by register and login."""

    user: Principal
    access_token: str = Field(..., description="Bearer token")
    token_type: str = Field(default="bearer", description="Token type")


class MeResponse(BaseModel):
    user: Principal
