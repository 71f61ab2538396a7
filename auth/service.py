"""
Sign-up / sign-in handlers.

Both handlers return an :class:`AuthOutcome` instead of raising for
expected results.  Anything unexpected (store down, ``CryptoFailure``,
``ConfigurationError``) is logged here and collapsed into a single
``INTERNAL_ERROR`` outcome with a generic message.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from auth.context import AuthContext
from database.user_store import UserRecord

logger = logging.getLogger(__name__)

MSG_USER_EXISTS = "L'utilisateur existe déjà"
MSG_USER_NOT_FOUND = "Utilisateur non trouvé"
MSG_INVALID_CREDENTIALS = "Identifiants invalides"
MSG_INTERNAL_ERROR = "Quelque chose s'est mal passé"


class OutcomeKind(str, Enum):
    CREATED = "created"
    AUTHENTICATED = "authenticated"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class AuthOutcome:
    kind: OutcomeKind
    user: Optional[UserRecord] = None
    token: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind in (OutcomeKind.CREATED, OutcomeKind.AUTHENTICATED)

    @property
    def is_fault(self) -> bool:
        return self.kind is OutcomeKind.INTERNAL_ERROR


def _internal_error() -> AuthOutcome:
    return AuthOutcome(OutcomeKind.INTERNAL_ERROR, message=MSG_INTERNAL_ERROR)


async def sign_up(
    ctx: AuthContext,
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
) -> AuthOutcome:
    """Register a new user and issue a token for it."""
    try:
        if await ctx.store.find_by_email(email) is not None:
            logger.info("Sign-up rejected, email already registered: %s", email)
            return AuthOutcome(OutcomeKind.CONFLICT, message=MSG_USER_EXISTS)

        password_hash = await asyncio.to_thread(ctx.hasher.hash, password)
        user = await ctx.store.insert_if_absent(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
        )
        if user is None:
            # Lost a race with a concurrent sign-up for the same email
            logger.info("Sign-up rejected, email registered concurrently: %s", email)
            return AuthOutcome(OutcomeKind.CONFLICT, message=MSG_USER_EXISTS)

        token = ctx.issuer.issue(user.id)
    except Exception:
        logger.exception("Sign-up failed for %s", email)
        return _internal_error()

    logger.info("Registered user %s (%s)", user.email, user.id)
    return AuthOutcome(OutcomeKind.CREATED, user=user, token=token)


async def sign_in(
    ctx: AuthContext,
    *,
    email: str,
    password: str,
) -> AuthOutcome:
    """Check credentials and issue a token on success."""
    try:
        user = await ctx.store.find_by_email(email)
        if user is None:
            if ctx.unify_signin_failures:
                await asyncio.to_thread(ctx.hasher.verify_decoy, password)
                logger.info("Sign-in failed for %s", email)
                return AuthOutcome(
                    OutcomeKind.INVALID_CREDENTIALS, message=MSG_INVALID_CREDENTIALS
                )
            logger.info("Sign-in for unknown email: %s", email)
            return AuthOutcome(OutcomeKind.NOT_FOUND, message=MSG_USER_NOT_FOUND)

        matches = await asyncio.to_thread(
            ctx.hasher.verify, password, user.password_hash
        )
        if not matches:
            logger.warning("Sign-in with wrong password for %s (%s)", email, user.id)
            return AuthOutcome(
                OutcomeKind.INVALID_CREDENTIALS, message=MSG_INVALID_CREDENTIALS
            )

        token = ctx.issuer.issue(user.id)
    except Exception:
        logger.exception("Sign-in failed for %s", email)
        return _internal_error()

    logger.info("Login: %s (%s)", user.email, user.id)
    return AuthOutcome(OutcomeKind.AUTHENTICATED, user=user, token=token)
