"""Pydantic models for API request/response."""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from adapter.hashing.bcrypt_hasher import BCRYPT_MAX_PASSWORD_BYTES
from domain.model.user import Gender, User, UserBrief

# Logins and passwords: Latin letters and digits only
LATIN_AND_DIGITS = r'^[a-zA-Z0-9]+$'
# Names: Latin or Cyrillic letters
LATIN_AND_CYRILLIC = r'^[a-zA-Zа-яА-ЯёЁ]+$'

LOGIN_MAX_LENGTH = 100
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
# Passwords are ASCII-only, so characters equal bytes
PASSWORD_MAX_LENGTH = BCRYPT_MAX_PASSWORD_BYTES


# ── requests ─────────────────────────────────────────────


class PersonalInfoRequest(BaseModel):
    """Profile fields shared by create and personal-info update."""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, pattern=LATIN_AND_CYRILLIC)
    gender: Gender
    birthday: Optional[date] = Field(None, description="Birth date (YYYY-MM-DD)")


class CreateUserRequest(PersonalInfoRequest):
    """Request model for user creation."""
    login: str = Field(..., min_length=1, max_length=LOGIN_MAX_LENGTH, pattern=LATIN_AND_DIGITS)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH, pattern=LATIN_AND_DIGITS)
    is_admin: bool = False


class UpdatePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH, pattern=LATIN_AND_DIGITS)


class UpdateLoginRequest(BaseModel):
    new_login: str = Field(..., min_length=1, max_length=LOGIN_MAX_LENGTH, pattern=LATIN_AND_DIGITS)


class AuthenticateRequest(BaseModel):
    """Request model for self-authentication (no acting-user header)."""
    login: str = Field(..., min_length=1, pattern=LATIN_AND_DIGITS)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH, pattern=LATIN_AND_DIGITS)


# ── responses ────────────────────────────────────────────


class UserResponse(BaseModel):
    """Full user view. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    login: str
    name: str
    gender: Gender
    birthday: Optional[date] = None
    is_admin: bool
    created_on: datetime
    created_by: str
    modified_on: Optional[datetime] = None
    modified_by: Optional[str] = None
    revoked_on: Optional[datetime] = None
    revoked_by: Optional[str] = None
    is_active: bool

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            login=user.login,
            name=user.name,
            gender=user.gender,
            birthday=user.birthday,
            is_admin=user.is_admin,
            created_on=user.created_on,
            created_by=user.created_by,
            modified_on=user.modified_on,
            modified_by=user.modified_by,
            revoked_on=user.revoked_on,
            revoked_by=user.revoked_by,
            is_active=user.is_active,
        )


class UserBriefResponse(BaseModel):
    """Brief user view: profile and active flag, no audit fields or ID."""
    name: str
    gender: Gender
    birthday: Optional[date] = None
    is_active: bool

    @classmethod
    def from_domain(cls, brief: UserBrief) -> 'UserBriefResponse':
        return cls(name=brief.name, gender=brief.gender, birthday=brief.birthday, is_active=brief.is_active)


class ProblemResponse(BaseModel):
    """Error body for failed operations."""
    detail: str
    status: int
    kind: str
