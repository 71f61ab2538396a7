"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON claim sets signed with HMAC-SHA256::

    <base64url(claims)>.<hex signature>

Claims are ``sub`` (user id), ``iat`` and ``exp``.  The secret comes from
``Settings.jwt_secret`` (env var: ``JWT_SECRET``) and is handed to the
issuer once at startup.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Callable, Dict

from auth.errors import ConfigurationError, InvalidToken

DEFAULT_EXPIRY_SECONDS = 3600


class TokenIssuer:
    """Signs and checks compact tokens with a process-wide secret."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        if not self._secret:
            raise ConfigurationError("JWT_SECRET is not set")
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, subject: str) -> str:
        """Create a signed token for ``subject`` expiring after the configured TTL."""
        now = int(self._clock())
        claims = {
            "sub": subject,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(claims, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidToken`` on malformed, tampered or expired tokens.
        """
        parts = token.split(".", 1)
        if len(parts) != 2:
            raise InvalidToken("bad format")
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except ValueError as exc:
            raise InvalidToken("bad encoding") from exc

        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise InvalidToken("bad signature")

        claims = json.loads(raw)
        if claims.get("exp", 0) <= self._clock():
            raise InvalidToken("token expired")
        return claims
