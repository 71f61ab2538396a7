"""
Auth context — the settings-derived services shared by both handlers.

Built once at startup and treated as immutable for the process lifetime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from auth.errors import ConfigurationError
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from config.settings import Settings
from database.session import create_engine
from database.user_store import SqlUserStore, UserStore


@dataclass(frozen=True)
class AuthContext:
    hasher: PasswordHasher
    issuer: TokenIssuer
    store: UserStore
    unify_signin_failures: bool = False
    engine: Optional[AsyncEngine] = None


def build_auth_context(
    settings: Settings,
    *,
    store: Optional[UserStore] = None,
) -> AuthContext:
    """
    Validate configuration and assemble the auth services.

    Raises ``ConfigurationError`` if ``JWT_SECRET`` or ``DB_URI`` is missing,
    so a misconfigured process fails before accepting traffic.  Pass
    ``store`` to skip engine creation (``DB_URI`` is then not required).
    """
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not set")

    engine = None
    if store is None:
        if not settings.db_uri:
            raise ConfigurationError("DB_URI is not set")
        engine = create_engine(settings.db_uri)
        store = SqlUserStore(engine)

    return AuthContext(
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        issuer=TokenIssuer(
            settings.jwt_secret,
            expiry_seconds=settings.token_expiry_seconds,
        ),
        store=store,
        unify_signin_failures=settings.unify_signin_failures,
        engine=engine,
    )
