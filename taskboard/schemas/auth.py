"""Pydantic schemas for authentication."""

from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, field_validator

from taskboard.security import BCRYPT_MAX_BYTES


class RegisterRequest(BaseModel):
    """Schema for user registration."""

    email: EmailStr
    password: Annotated[str, Field(min_length=6)]

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        """bcrypt rejects secrets longer than 72 bytes, whatever the character count."""
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    token: str


class LoginResponse(BaseModel):
    token: str
