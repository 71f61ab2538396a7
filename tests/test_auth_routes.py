"""
HTTP tests for /api/auth/signup and /api/auth/signin.
"""

import pytest
from fastapi.testclient import TestClient

from auth.errors import ConfigurationError
from auth.jwt import TokenIssuer
from config.settings import Settings
from main import create_app

SIGNUP_BODY = {"fname": "A", "lname": "B", "email": "a@b.com", "password": "secret1"}


@pytest.fixture
def client(test_settings):
    with TestClient(create_app(test_settings)) as client:
        yield client


class TestSignUpRoute:
    def test_signup_returns_201_with_user_and_token(self, client):
        response = client.post("/api/auth/signup", json=SIGNUP_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "a@b.com"
        assert body["user"]["fname"] == "A"
        assert body["user"]["lname"] == "B"
        assert body["user"]["id"]
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]

    def test_signup_twice_returns_400(self, client):
        assert client.post("/api/auth/signup", json=SIGNUP_BODY).status_code == 201

        response = client.post("/api/auth/signup", json=SIGNUP_BODY)
        assert response.status_code == 400
        assert response.json() == {"message": "L'utilisateur existe déjà"}

    def test_missing_field_is_validation_error(self, client):
        body = {k: v for k, v in SIGNUP_BODY.items() if k != "lname"}
        assert client.post("/api/auth/signup", json=body).status_code == 422

    def test_overlong_password_is_validation_error(self, client):
        body = {**SIGNUP_BODY, "password": "é" * 40}
        assert client.post("/api/auth/signup", json=body).status_code == 422

    def test_process_time_header(self, client):
        response = client.post("/api/auth/signup", json=SIGNUP_BODY)
        assert "x-process-time" in response.headers


class TestSignInRoute:
    def test_example_flow(self, client, test_settings):
        assert client.post("/api/auth/signup", json=SIGNUP_BODY).status_code == 201
        assert client.post("/api/auth/signup", json=SIGNUP_BODY).status_code == 400

        wrong = client.post(
            "/api/auth/signin", json={"email": "a@b.com", "password": "wrong"}
        )
        assert wrong.status_code == 400
        assert wrong.json() == {"message": "Identifiants invalides"}

        ok = client.post(
            "/api/auth/signin", json={"email": "a@b.com", "password": "secret1"}
        )
        assert ok.status_code == 200
        body = ok.json()
        claims = TokenIssuer(test_settings.jwt_secret).decode(body["token"])
        assert claims["sub"] == body["user"]["id"]
        assert claims["exp"] - claims["iat"] == 3600

    def test_unknown_email_returns_404(self, client):
        response = client.post(
            "/api/auth/signin", json={"email": "nobody@b.com", "password": "x"}
        )
        assert response.status_code == 404
        assert response.json() == {"message": "Utilisateur non trouvé"}

    def test_unknown_email_returns_400_when_failures_unified(self, test_settings):
        settings = test_settings.model_copy(update={"unify_signin_failures": True})
        with TestClient(create_app(settings)) as client:
            response = client.post(
                "/api/auth/signin", json={"email": "nobody@b.com", "password": "x"}
            )
        assert response.status_code == 400
        assert response.json() == {"message": "Identifiants invalides"}

    def test_internal_error_returns_generic_500(self, client, monkeypatch):
        ctx = client.app.state.auth_context

        async def _boom(email):
            raise RuntimeError("connection refused: postgres://admin@db")

        monkeypatch.setattr(ctx.store, "find_by_email", _boom)
        response = client.post(
            "/api/auth/signin", json={"email": "a@b.com", "password": "secret1"}
        )
        assert response.status_code == 500
        assert response.json() == {"message": "Quelque chose s'est mal passé"}


class TestStartup:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["jwt_secret", "db_uri"])
    async def test_missing_configuration_aborts_startup(self, test_settings, missing):
        settings = test_settings.model_copy(update={missing: ""})
        app = create_app(settings)

        with pytest.raises(ConfigurationError):
            async with app.router.lifespan_context(app):
                pass

    def test_settings_read_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-env")
        monkeypatch.setenv("DB_URI", "sqlite+aiosqlite:///env.db")
        monkeypatch.setenv("SERVER_PORT", "5050")

        settings = Settings(_env_file=None)

        assert settings.jwt_secret == "from-env"
        assert settings.db_uri == "sqlite+aiosqlite:///env.db"
        assert settings.server_port == 5050
        assert settings.bcrypt_rounds == 12
        assert settings.token_expiry_seconds == 3600
