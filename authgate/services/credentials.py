"""Password hashing and verification with bcrypt."""

import bcrypt

from authgate.config import get_settings

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


class CredentialCodec:
    """Hashes and verifies passwords. Never stores or logs plaintext."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS
        # Built up front so the first unknown-email login costs one checkpw, like every other.
        self._dummy_hash: bytes = bcrypt.hashpw(b"authgate-timing-dummy", bcrypt.gensalt(rounds=self.rounds))

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt hash. Each call uses a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        """Return True if the plaintext matches the hash; False on mismatch or a malformed hash."""
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(self._encode(plaintext), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, plaintext: str) -> None:
        """Spend the same bcrypt work as a real check, for unknown accounts."""
        try:
            bcrypt.checkpw(self._encode(plaintext or ""), self._dummy_hash)
        except (ValueError, TypeError):
            pass

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
