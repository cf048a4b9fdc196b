"""bcrypt implementation of PasswordHasher."""

import bcrypt

# Using 12 rounds (2^12 = 4096 iterations) for secure password hashing
BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes; longer input is rejected, not truncated
BCRYPT_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    if not password:
        raise ValueError("Password must not be empty")
    encoded = password.encode('utf-8')
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes")
    return encoded


class BcryptPasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hashed password as string

        Raises:
            ValueError: password is empty or longer than 72 bytes
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode('utf-8')

    def verify(self, password: str, hashed: str) -> bool:
        """Verify password against hash.

        Args:
            password: Plain text password
            hashed: Bcrypt hashed password (string format)

        Returns:
            True if password matches, False otherwise
        """
        if not hashed:
            raise ValueError("Hash must not be empty")
        return bcrypt.checkpw(_encode(password), hashed.encode('utf-8'))
