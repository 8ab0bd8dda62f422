"""
Pytest fixtures for the intake service tests.

테스트 구성:
- 정상 제출, 필수 답변 누락, 후속 입력 누락, 연락처 누락 케이스 분리
- 채널 호출은 FakeNotifier로 대체 (네트워크 없음)
"""

from pathlib import Path

import pytest
import yaml

from src.app.providers.base import NotificationProvider, NotifyResult
from src.app.services.definitions import DefinitionService
from src.core.store import QuestionnaireStore
from src.domain.errors import ErrorCodes
from src.domain.schemas import ContactData

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def definition_path(project_root: Path) -> Path:
    """definition.yaml 경로."""
    return project_root / "definition.yaml"


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def definitions(definition_path: Path) -> DefinitionService:
    return DefinitionService(definition_path)


@pytest.fixture
def store() -> QuestionnaireStore:
    return QuestionnaireStore()


class FakeNotifier(NotificationProvider):
    """
    테스트용 채널.

    sent/deleted에 호출 기록. fail=True면 채널 에러를 흉내냄.
    """

    def __init__(self, configured: bool = True, fail: bool = False, first_id: int = 100):
        self.configured = configured
        self.fail = fail
        self.next_id = first_id
        self.sent: list[str] = []
        self.deleted: list[int] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send_message(self, text: str) -> NotifyResult:
        self.sent.append(text)
        if self.fail:
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message="Telegram API error: Bad Request: chat not found",
                status_code=400,
            )
        message_id = self.next_id
        self.next_id += 1
        return NotifyResult(success=True, message_id=message_id, status_code=200)

    async def delete_message(self, message_id: int) -> NotifyResult:
        self.deleted.append(message_id)
        if self.fail:
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message="Telegram API error: Bad Request: message to delete not found",
                status_code=400,
            )
        return NotifyResult(success=True, message_id=message_id, status_code=200)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_notifier() -> type[FakeNotifier]:
    """설정 누락/실패 채널이 필요한 테스트용 팩토리."""
    return FakeNotifier


# =============================================================================
# Answer Fixtures
# =============================================================================

@pytest.fixture
def woman_form_data() -> dict:
    """
    정상 케이스: woman 설문 필수 답변 전부.

    후속 입력이 필요 없는 답변만 사용.
    """
    return {
        "name": "Анна",
        "age": "34",
        "weight": "61.5",
        "height": "168",
        "main_complaints": "Усталость",
        "operations": "no",
        "injuries": ["no_issues"],
        "allergies": ["pollen"],
        "cycle": "regular",
        "digestion": ["bloating"],
        "stool_frequency": "daily",
        "sleep": "good",
        "skin_condition": ["dry"],
        "stress": "medium",
        "how_learned": "instagram",
    }


@pytest.fixture
def contact() -> ContactData:
    return ContactData(telegram="@Anna_K")
