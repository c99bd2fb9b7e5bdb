"""
test_config_routes.py - Config Routes 유닛 테스트

검증 포인트:
1. GET → current + providers + storage
2. POST 검증 순서: ADMIN_PASSWORD 미설정(500) → 비밀번호(401) → provider/model(400)
3. 성공한 POST 이후 GET이 새 값을 반환
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from estimate_proxy.app.routes.config import (
    api_router,
    check_admin_password,
    parse_selection,
    require_admin_password,
)
from estimate_proxy.app.services.config_store import MemoryConfigStore
from estimate_proxy.domain.errors import (
    AdminPasswordNotConfiguredError,
    UnauthorizedError,
    UnknownModelError,
    UnknownProviderError,
)
from estimate_proxy.domain.schemas import SelectedConfig

ADMIN_PASSWORD = "s3cret"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture
def app(store: MemoryConfigStore) -> FastAPI:
    """테스트용 FastAPI 앱."""
    app = FastAPI()
    app.include_router(api_router, prefix="/api/config")

    app.state.config_store = store
    app.state.environ = {"ADMIN_PASSWORD": ADMIN_PASSWORD}
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """테스트 클라이언트."""
    return TestClient(app)


# =============================================================================
# Helpers
# =============================================================================


class TestRequireAdminPassword:
    """require_admin_password 테스트."""

    def test_configured(self):
        assert require_admin_password({"ADMIN_PASSWORD": "x"}) == "x"

    @pytest.mark.parametrize("environ", [{}, {"ADMIN_PASSWORD": ""}])
    def test_not_configured(self, environ):
        with pytest.raises(AdminPasswordNotConfiguredError):
            require_admin_password(environ)


class TestCheckAdminPassword:
    """check_admin_password 테스트."""

    def test_match(self):
        check_admin_password("pw", "pw")

    @pytest.mark.parametrize("password", ["PW", "", None, 123])
    def test_mismatch(self, password):
        with pytest.raises(UnauthorizedError):
            check_admin_password(password, "pw")


class TestParseSelection:
    """parse_selection 테스트."""

    def test_valid(self):
        assert parse_selection({"provider": "openai", "model": "gpt-4o-mini"}) == (
            SelectedConfig(provider="openai", model="gpt-4o-mini")
        )

    def test_missing_provider(self):
        with pytest.raises(UnknownProviderError):
            parse_selection({"model": "gpt-4o"})

    def test_missing_model(self):
        with pytest.raises(UnknownModelError):
            parse_selection({"provider": "openai"})


# =============================================================================
# GET /api/config
# =============================================================================


class TestGetConfig:
    """설정 조회."""

    def test_cold_start(self, client):
        response = client.get("/api/config")

        assert response.status_code == 200
        data = response.json()
        assert data["current"] == {
            "provider": "anthropic",
            "model": "claude-sonnet-4-20250514",
        }
        assert set(data["providers"]) == {"anthropic", "google", "openai"}
        assert data["providers"]["google"]["envKey"] == "GOOGLE_API_KEY"
        assert data["storage"] == "memory"

    def test_no_password_required(self, app, client):
        """조회는 ADMIN_PASSWORD 없이도 가능."""
        app.state.environ = {}

        assert client.get("/api/config").status_code == 200


# =============================================================================
# POST /api/config
# =============================================================================


class TestSetConfig:
    """설정 변경."""

    def test_success_then_get(self, client):
        response = client.post(
            "/api/config",
            json={
                "password": ADMIN_PASSWORD,
                "provider": "google",
                "model": "gemini-1.5-pro",
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "config": {"provider": "google", "model": "gemini-1.5-pro"},
        }

        current = client.get("/api/config").json()["current"]
        assert current == {"provider": "google", "model": "gemini-1.5-pro"}

    def test_admin_password_not_configured(self, app, client):
        app.state.environ = {}

        response = client.post(
            "/api/config",
            json={"password": "anything", "provider": "google", "model": "gemini-1.5-pro"},
        )

        assert response.status_code == 500
        assert "ADMIN_PASSWORD" in response.json()["error"]

    def test_wrong_password(self, client, caplog):
        response = client.post(
            "/api/config",
            json={"password": "wrong", "provider": "google", "model": "gemini-1.5-pro"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}
        assert "invalid password" in caplog.text

    def test_password_checked_before_selection(self, client):
        """비밀번호 오류가 provider 오류보다 우선."""
        response = client.post(
            "/api/config",
            json={"password": "wrong", "provider": "mistral", "model": "x"},
        )

        assert response.status_code == 401

    def test_unknown_provider(self, client):
        response = client.post(
            "/api/config",
            json={"password": ADMIN_PASSWORD, "provider": "mistral", "model": "mistral-large"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown provider: mistral"}

    def test_unknown_model(self, client):
        response = client.post(
            "/api/config",
            json={"password": ADMIN_PASSWORD, "provider": "anthropic", "model": "gpt-4o"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Unknown model: gpt-4o for provider anthropic"
        }

    def test_rejected_update_keeps_value(self, client):
        """실패한 변경은 저장소에 반영되지 않음."""
        client.post(
            "/api/config",
            json={"password": "wrong", "provider": "openai", "model": "gpt-4o"},
        )

        assert client.get("/api/config").json()["current"] == {
            "provider": "anthropic",
            "model": "claude-sonnet-4-20250514",
        }


class TestConfigMethods:
    """메서드 처리."""

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    def test_method_not_allowed(self, client, method):
        response = client.request(method, "/api/config")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_options(self, client):
        assert client.options("/api/config").status_code == 200
