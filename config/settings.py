"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""                # HMAC secret for auth tokens (required)
    token_expiry_seconds: int = 3600    # 1 hour
    bcrypt_rounds: int = 12             # bcrypt cost factor

    # Report unknown emails as invalid credentials instead of 404
    unify_signin_failures: bool = False

    # ── Database ─────────────────────────────────────────────────────────
    db_uri: str = ""                    # e.g. postgresql+asyncpg://user:pw@localhost:5432/auth

    # ── Server ───────────────────────────────────────────────────────────
    server_port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
