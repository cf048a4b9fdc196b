from datetime import date
from typing import Literal, Protocol

from domain.model.user import User

UserOrder = Literal['created_on', 'birthday']


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Login is a hard unique constraint: insert() and update() raise
    DuplicateError when another record already holds the login.
    """
    def get_by_login(self, login: str) -> User | None:
        """Find a user by login (case-sensitive). Return User or None if not found."""
        ...

    def exists_by_login(self, login: str) -> bool:
        """Return True if any user, active or revoked, holds this login."""
        ...

    def insert(self, user: User) -> None:
        """Persist a new user. Raise DuplicateError on login collision."""
        ...

    def update(self, user: User) -> None:
        """Replace a stored user by id. Raise DuplicateError or NotFoundError."""
        ...

    def delete(self, user: User) -> None:
        """Remove a user permanently. Raise NotFoundError if already gone."""
        ...

    def find_many(
        self,
        active_only: bool = False,
        born_on_or_before: date | None = None,
        order_by: UserOrder = 'created_on',
    ) -> list[User]:
        """List users matching the filters, ascending by order_by.

        A born_on_or_before filter excludes users without a birthday.
        """
        ...
