"""
E2E 테스트용 앱 클라이언트.

- 관리자 비밀번호/콘텐츠 디렉터리는 환경변수로 고정
- Telegram 자격 증명 제거 후 FakeNotifier 주입
"""

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.app.main import app

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    notifier,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient (lifespan 실행)."""
    for name in (
        "TELEGRAM_BOT_TOKEN",
        "VITE_TELEGRAM_BOT_TOKEN",
        "TELEGRAM_CHAT_ID",
        "VITE_TELEGRAM_CHAT_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("CONTENT_DIR", str(tmp_path / "content"))

    with TestClient(app) as client:
        client.app.state.submissions.notifier = notifier
        yield client


@pytest.fixture
def admin_password() -> str:
    return ADMIN_PASSWORD


@pytest.fixture
def admin_client(client: TestClient, admin_password: str) -> TestClient:
    """관리자 로그인된 클라이언트."""
    response = client.post("/api/admin/login", json={"password": admin_password})
    assert response.status_code == 200
    return client
