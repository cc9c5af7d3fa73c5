from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, field_validator

from tasky.schemas.base import CamelModel, require_text

MIN_PASSWORD_LENGTH = 6


def _check_email(v: str) -> str:
    # 형식만 검사하고 입력한 문자열 그대로 저장한다 (정규화 X)
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please provide a valid email address")
    return v


EmailAddress = Annotated[str, AfterValidator(_check_email)]


# ===== 요청 =====

class UserRegister(CamelModel):
    first_name: str
    last_name: str
    username: str
    email_address: EmailAddress
    password: str

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return require_text(v, "First name is required")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return require_text(v, "Last name is required")

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return require_text(v, "Username is required")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v or "") < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class LoginRequest(CamelModel):
    identifier: str
    password: str

    @field_validator("identifier")
    @classmethod
    def _identifier(cls, v: str) -> str:
        return require_text(v, "Email or username is required")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class PasswordUpdate(CamelModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    @classmethod
    def _current(cls, v: str) -> str:
        if not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        if len(v or "") < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Your new password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


class ProfileUpdate(CamelModel):
    """Partial update; omitted fields stay as they are."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email_address: Optional[EmailAddress] = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "First name cannot be empty")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "Last name cannot be empty")

    @field_validator("username")
    @classmethod
    def _username(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else require_text(v, "Username cannot be empty")


# ===== 응답 =====

class UserRead(CamelModel):
    id: UUID
    first_name: str
    last_name: str
    username: str
    email_address: str
    avatar: str = ""
    date_joined: datetime
    last_profile_update: Optional[datetime] = None


class UserResponse(CamelModel):
    user: UserRead


class UserMessageResponse(CamelModel):
    message: str
    user: UserRead


class LoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserRead


class OAuthTokenResponse(BaseModel):
    # OAuth2 password flow keeps its snake_case field names
    access_token: str
    token_type: str = "bearer"
