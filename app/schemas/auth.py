"""Pydantic schemas for authentication and profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

PASSWORD_MIN_LENGTH = 8
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str | None) -> str | None:
    if value is not None and len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"The password must not be longer than {PASSWORD_MAX_BYTES} bytes.")
    return value


def _check_confirmation(value: str | None, info: ValidationInfo) -> str | None:
    password = info.data.get("password")
    if password is not None and value != password:
        raise ValueError("The password confirmation does not match.")
    return value


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: str

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return _check_password_bytes(value)

    @field_validator("password_confirmation")
    @classmethod
    def password_confirmed(cls, value: str | None, info: ValidationInfo) -> str | None:
        return _check_confirmation(value, info)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    device_name: str = Field(default="auth_token", min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class ProfileUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password_current: str | None = None
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    password_confirmation: str | None = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return _check_password_bytes(value)

    @field_validator("password_confirmation")
    @classmethod
    def password_confirmed(cls, value: str | None, info: ValidationInfo) -> str | None:
        return _check_confirmation(value, info)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    email_verified_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    user: UserResponse


class ProfileResponse(BaseModel):
    detail: str
    user: UserResponse


class LogoutAllResponse(BaseModel):
    detail: str
    revoked: int
