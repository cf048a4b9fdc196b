"""Reversible stand-in for PasswordHasher so service tests skip bcrypt's cost."""


class FakePasswordHasher:
    PREFIX = 'hashed:'

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        return f"{self.PREFIX}{password}"

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            raise ValueError("Password and hash must not be empty")
        return hashed == f"{self.PREFIX}{password}"
