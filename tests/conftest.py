"""
Shared pytest fixtures for the auth service tests.

Stores run against a throwaway SQLite file through ``aiosqlite`` and bcrypt
uses its minimum cost factor so the suite stays fast.
"""

import pytest

from auth.context import build_auth_context
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from config.settings import Settings
from database.session import create_engine, init_db
from database.user_store import SqlUserStore

TEST_SECRET = "test-jwt-secret"


@pytest.fixture
def test_settings(tmp_path):
    """Settings that ignore the environment and point at a temp database."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        db_uri=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}",
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
async def engine(test_settings):
    engine = create_engine(test_settings.db_uri)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def store(engine):
    return SqlUserStore(engine)


@pytest.fixture
async def auth_context(test_settings, store):
    return build_auth_context(test_settings, store=store)
