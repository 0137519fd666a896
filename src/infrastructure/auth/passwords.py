"""Password hashing with bcrypt."""

import bcrypt

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Hash and verify passwords with bcrypt."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds
        # Checked against when the account does not exist, so login takes
        # the same time either way.
        self._dummy_hash = self.hash("not-a-real-password")

    def hash(self, password: str) -> str:
        """Hash a password."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a stored hash (constant time)."""
        if not password_hash:
            bcrypt.checkpw(self._encode(password), self._dummy_hash.encode("utf-8"))
            return False
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
