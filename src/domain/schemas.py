"""
Data schemas for the intake service.

규칙:
- 질문 ID는 definition.yaml 키와 동일하게 사용
- 후속 입력 키: <question_id>_additional
- JSON 응답 키는 camelCase (클라이언트 계약 유지)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.constants import ADDITIONAL_SUFFIX

# 답변 값: 단일 선택/텍스트는 str, 체크박스는 list[str]
AnswerValue = str | list[str]
FormData = dict[str, AnswerValue]
AdditionalData = dict[str, str]
FormErrors = dict[str, str]


# =============================================================================
# Enums
# =============================================================================

class QuestionnaireType(str, Enum):
    """설문 카테고리."""
    INFANT = "infant"
    CHILD = "child"
    WOMAN = "woman"
    MAN = "man"


class QuestionType(str, Enum):
    """질문 입력 타입."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    RADIO = "radio"
    SELECT = "select"
    CHECKBOX = "checkbox"


class ContactMethod(str, Enum):
    """연락 수단 (렌더링/검색 순서 고정)."""
    TELEGRAM = "telegram"
    INSTAGRAM = "instagram"
    PHONE = "phone"


class FollowupCondition(str, Enum):
    """
    후속 입력 필수 조건.

    equals: 답변 == value
    any_except: value 이외의 선택이 하나라도 있음
    includes: 선택 목록에 value 포함
    """
    EQUALS = "equals"
    ANY_EXCEPT = "any_except"
    INCLUDES = "includes"


# =============================================================================
# Definition Schemas (definition.yaml)
# =============================================================================

@dataclass
class Option:
    """선택지."""
    value: str
    label: dict[str, str] = field(default_factory=dict)


@dataclass
class Question:
    """질문 정의."""
    id: str
    type: QuestionType
    label: dict[str, str] = field(default_factory=dict)
    required: bool = False
    options: list[Option] | None = None

    def option_label(self, value: str, lang: str) -> str:
        """선택지 value → 현지화 라벨 (미등록 값은 원문)."""
        for opt in self.options or []:
            if opt.value == value:
                return opt.label.get(lang, value)
        return value


@dataclass
class Section:
    """설문 섹션."""
    id: str
    title: dict[str, str] = field(default_factory=dict)
    questions: list[Question] = field(default_factory=list)


@dataclass
class FollowupRule:
    """후속 입력(additional) 필수 규칙."""
    question: str
    condition: FollowupCondition
    value: str

    @property
    def additional_key(self) -> str:
        return f"{self.question}{ADDITIONAL_SUFFIX}"


# =============================================================================
# Submission Schemas
# =============================================================================

@dataclass
class ContactData:
    """연락처. 최소 하나는 비어 있지 않아야 함."""
    telegram: str | None = None
    instagram: str | None = None
    phone: str | None = None

    def get(self, method: ContactMethod) -> str | None:
        return getattr(self, method.value)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "telegram": self.telegram,
            "instagram": self.instagram,
            "phone": self.phone,
        }


@dataclass
class QuestionnaireRecord:
    """
    저장된 설문.

    id는 유일 (uuid4). telegram_message_id는 채널 전송 성공 후 기록.
    """
    id: str
    type: str
    form_data: FormData
    contact_data: ContactData
    markdown: str
    created_at: str  # ISO 8601
    language: str = "ru"
    additional_data: AdditionalData = field(default_factory=dict)
    telegram_message_id: int | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (camelCase)."""
        return {
            "id": self.id,
            "type": self.type,
            "formData": self.form_data,
            "additionalData": self.additional_data,
            "contactData": self.contact_data.to_dict(),
            "markdown": self.markdown,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "language": self.language,
            "telegramMessageId": self.telegram_message_id,
        }

    def to_summary(self) -> dict[str, Any]:
        """조회 목록용 요약 (답변/본문 제외)."""
        return {
            "id": self.id,
            "type": self.type,
            "createdAt": self.created_at,
            "contactData": self.contact_data.to_dict(),
        }


# =============================================================================
# Delivery Log (채널 전송 기록)
# =============================================================================

@dataclass
class DeliveryEvent:
    """
    채널 전송 이벤트.

    action: send, delete
    """
    action: str
    success: bool
    timestamp: str  # ISO 8601
    message_id: int | None = None
    error_code: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "success": self.success,
            "timestamp": self.timestamp,
            "messageId": self.message_id,
            "errorCode": self.error_code,
            "error": self.error_message,
        }


@dataclass
class DeliveryLog:
    """설문 1건에 대한 채널 전송 기록."""
    questionnaire_id: str
    started_at: str
    finished_at: str | None = None
    result: str = "pending"  # pending, delivered, failed, skipped
    events: list[DeliveryEvent] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return self.result == "delivered"
