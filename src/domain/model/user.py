# domain/model/user.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum

# Reserved creator identity for records made by the bootstrap routine.
# Logins are alphanumeric-only and this value is never persisted as a user.
SYSTEM_ACTOR = 'SYSTEM'


class Gender(str, Enum):
    """Enumeration of user genders."""
    MALE = 'male'
    FEMALE = 'female'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class UserBrief:
    """Reduced user view: profile and active flag only."""
    name: str
    gender: Gender
    birthday: date | None
    is_active: bool


# ── User Domain Model ────────────────────────────────────


@dataclass
class User:
    """Domain model representing a directory user."""
    id: str
    login: str
    password_hash: str
    name: str
    gender: Gender
    is_admin: bool
    created_on: datetime
    created_by: str

    birthday: date | None = None
    modified_on: datetime | None = None
    modified_by: str | None = None
    revoked_on: datetime | None = None
    revoked_by: str | None = None

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(
        login: str,
        password_hash: str,
        name: str,
        gender: Gender,
        created_by: str,
        birthday: date | None = None,
        is_admin: bool = False,
    ) -> 'User':
        """Create a new active User with a generated ID."""
        return User(
            id=str(uuid.uuid4()),
            login=login,
            password_hash=password_hash,
            name=name,
            gender=gender,
            is_admin=is_admin,
            created_on=datetime.now(timezone.utc),
            created_by=created_by,
            birthday=birthday,
        )

    # ── queries ───────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self.revoked_on is None

    def to_brief(self) -> UserBrief:
        return UserBrief(
            name=self.name,
            gender=self.gender,
            birthday=self.birthday,
            is_active=self.is_active,
        )

    # ── state transitions ─────────────────────────────────

    def touch(self, actor_login: str) -> None:
        """Stamp the modification audit fields."""
        self.modified_on = datetime.now(timezone.utc)
        self.modified_by = actor_login

    def update_personal_info(self, name: str, gender: Gender, birthday: date | None, actor_login: str) -> None:
        self.name = name
        self.gender = gender
        self.birthday = birthday
        self.touch(actor_login)

    def change_password(self, password_hash: str, actor_login: str) -> None:
        self.password_hash = password_hash
        self.touch(actor_login)

    def change_login(self, new_login: str, actor_login: str) -> None:
        self.login = new_login
        self.touch(actor_login)

    def revoke(self, actor_login: str) -> None:
        """Soft-delete the user. Revocation fields are always set together."""
        now = datetime.now(timezone.utc)
        self.revoked_on = now
        self.revoked_by = actor_login
        self.modified_on = now
        self.modified_by = actor_login

    def restore(self, actor_login: str) -> None:
        """Clear revocation and stamp the modification."""
        self.revoked_on = None
        self.revoked_by = None
        self.touch(actor_login)
