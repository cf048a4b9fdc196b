"""Domain-level exceptions.

Repositories raise these errors when the store rejects a write.
The user service turns them into failure results; route handlers never see them.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""

    def __init__(self, login: str):
        self.login = login
        super().__init__(f"Login '{login}' is already taken")
