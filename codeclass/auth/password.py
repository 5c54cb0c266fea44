"""Password hashing and verification.

Uses bcrypt: every hash carries its own random salt and a configurable work
factor, and ``checkpw`` compares in constant time.
"""

import logging

import bcrypt

from codeclass.auth.errors import InternalError

logger = logging.getLogger(__name__)

# bcrypt ignores (or, in newer releases, rejects) anything past 72 bytes.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"codeclass-dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, plaintext: str) -> str:
        try:
            hashed = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError, MemoryError) as exc:
            logger.exception("Password hashing failed.")
            raise InternalError() from exc
        return hashed.decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        # Passwords that could never have been stored still cost one full check.
        try:
            password = plaintext.encode("utf-8")
        except UnicodeEncodeError:
            return self.dummy_verify(plaintext)
        if len(password) > MAX_PASSWORD_BYTES:
            return self.dummy_verify(plaintext)

        try:
            return bcrypt.checkpw(password, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, plaintext: str) -> bool:
        """Spend the same time as a real check when there is no stored hash."""
        password = plaintext.encode("utf-8", errors="surrogatepass")[:MAX_PASSWORD_BYTES]
        bcrypt.checkpw(password, self._dummy_hash)
        return False
