"""
test_api_admin_content.py - 관리자 세션 + 인라인 CMS E2E 테스트

엔드포인트:
- POST /api/admin/login
- POST /api/admin/logout
- GET  /api/admin/status
- GET  /api/content
- POST /api/content
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.app.main import app

# =============================================================================
# Admin session
# =============================================================================

class TestAdminLogin:

    def test_login_sets_cookie(self, client: TestClient, admin_password: str):
        response = client.post("/api/admin/login", json={"password": admin_password})

        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"]
        assert "admin=true" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "samesite=strict" in set_cookie.lower()
        assert "Max-Age=3600" in set_cookie

    def test_wrong_password(self, client: TestClient):
        response = client.post("/api/admin/login", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "INVALID_PASSWORD"
        assert "set-cookie" not in response.headers

    def test_missing_password(self, client: TestClient):
        response = client.post("/api/admin/login", json={})

        assert response.status_code == 401

    def test_login_disabled_without_admin_password(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ):
        """ADMIN_PASSWORD 미설정 → 어떤 비밀번호도 거부."""
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
        monkeypatch.setenv("CONTENT_DIR", str(tmp_path / "content"))

        with TestClient(app) as client:
            assert client.app.state.admin_password == ""
            for password in ("", "admin123", "2468"):
                response = client.post("/api/admin/login", json={"password": password})

                assert response.status_code == 401
                assert response.json()["detail"]["code"] == "INVALID_PASSWORD"

            assert client.get("/api/admin/status").json() == {"isAdmin": False}


class TestAdminStatus:

    def test_anonymous(self, client: TestClient):
        assert client.get("/api/admin/status").json() == {"isAdmin": False}

    def test_logged_in(self, admin_client: TestClient):
        assert admin_client.get("/api/admin/status").json() == {"isAdmin": True}

    def test_logout(self, admin_client: TestClient):
        response = admin_client.post("/api/admin/logout")

        assert response.status_code == 200
        assert admin_client.get("/api/admin/status").json() == {"isAdmin": False}


# =============================================================================
# Content
# =============================================================================

class TestContent:

    def test_default_content(self, client: TestClient):
        response = client.get("/api/content")

        assert response.status_code == 200
        assert "welcomeTitle" in response.json()

    def test_update_requires_admin(self, client: TestClient):
        response = client.post("/api/content", json={"welcomeTitle": "Hi"})

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "FORBIDDEN"

    def test_update_as_admin(self, admin_client: TestClient):
        response = admin_client.post("/api/content", json={"welcomeTitle": "Привет"})

        assert response.status_code == 200
        assert response.json()["content"]["welcomeTitle"] == "Привет"

        content = admin_client.get("/api/content").json()
        assert content["welcomeTitle"] == "Привет"
        assert "siteTitle" in content

    def test_update_writes_backup(self, admin_client: TestClient):
        admin_client.post("/api/content", json={"siteTitle": "New"})

        store = admin_client.app.state.content_store
        assert len(store.list_backups()) == 1
