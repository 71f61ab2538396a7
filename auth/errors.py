"""
Exceptions raised by the auth core.

Only internal faults are exceptions.  User-facing outcomes (duplicate email,
unknown email, wrong password) are reported through
:class:`auth.service.AuthOutcome` instead.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for auth-core failures."""


class CryptoFailure(AuthError):
    """The password-hashing primitive failed (e.g. malformed stored hash)."""


class ConfigurationError(AuthError):
    """Required process configuration is missing or empty."""


class InvalidToken(AuthError):
    """A token is malformed, tampered with, or expired."""
