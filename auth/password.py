"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import secrets

import bcrypt

from auth.errors import CryptoFailure

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt hasher bound to a cost factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        self._decoy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt; the result embeds salt and cost."""
        try:
            return bcrypt.hashpw(
                password.encode(), bcrypt.gensalt(rounds=self.rounds)
            ).decode()
        except (ValueError, TypeError) as exc:
            raise CryptoFailure(f"password hashing failed: {type(exc).__name__}") from exc

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError) as exc:
            raise CryptoFailure(f"password verification failed: {type(exc).__name__}") from exc

    def verify_decoy(self, password: str) -> bool:
        """Spend one verification's worth of work without a real hash.  Always False."""
        if self._decoy_hash is None:
            self._decoy_hash = self.hash(secrets.token_hex(16))
        self.verify(password, self._decoy_hash)
        return False
