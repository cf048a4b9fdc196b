from typing import Protocol


class PasswordHasher(Protocol):
    """One-way credential hashing. Both methods raise ValueError on an empty password."""
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, hashed: str) -> bool: ...
