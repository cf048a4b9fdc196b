"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace
from datetime import date

from domain.model.errors import DuplicateError, NotFoundError
from domain.model.user import User
from port.user_repository import UserOrder


class FakeUserRepository:
    def __init__(self):
        # Stored by id; reads and writes copy so callers must go through update().
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def insert(self, user: User) -> None:
        if self._login_taken(user.login, exclude_id=None):
            raise DuplicateError(user.login)
        self.store[user.id] = replace(user)

    def update(self, user: User) -> None:
        if user.id not in self.store:
            raise NotFoundError(f"User {user.id} not found")
        if self._login_taken(user.login, exclude_id=user.id):
            raise DuplicateError(user.login)
        self.store[user.id] = replace(user)

    def delete(self, user: User) -> None:
        if self.store.pop(user.id, None) is None:
            raise NotFoundError(f"User {user.id} not found")

    # ── read operations ──────────────────────────────────────

    def get_by_login(self, login: str) -> User | None:
        for user in self.store.values():
            if user.login == login:
                return replace(user)
        return None

    def exists_by_login(self, login: str) -> bool:
        return self._login_taken(login, exclude_id=None)

    def find_many(
        self,
        active_only: bool = False,
        born_on_or_before: date | None = None,
        order_by: UserOrder = 'created_on',
    ) -> list[User]:
        results = list(self.store.values())

        if active_only:
            results = [u for u in results if u.is_active]
        if born_on_or_before is not None:
            results = [u for u in results if u.birthday is not None and u.birthday <= born_on_or_before]

        if order_by == 'birthday':
            results.sort(key=lambda u: (u.birthday is None, u.birthday or date.min))
        else:
            results.sort(key=lambda u: u.created_on)
        return [replace(u) for u in results]

    # ── helpers ──────────────────────────────────────────────

    def _login_taken(self, login: str, exclude_id: str | None) -> bool:
        return any(u.login == login and u.id != exclude_id for u in self.store.values())
