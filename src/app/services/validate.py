"""
Validation Service: definition.yaml 기반 답변 검증.

검증 순서:
1. 필수 질문 (checkbox / number / 기타 타입별 규칙)
2. 후속 입력 규칙 (followups) - additional_data가 주어진 경우에만
3. 연락처 - telegram/instagram/phone 중 최소 하나

결과: {필드 ID: 현지화 메시지}. 비어 있으면 유효.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from src.app.services.definitions import DefinitionService
from src.core.contacts import has_any_contact, is_blank
from src.domain.schemas import (
    AdditionalData,
    ContactData,
    FollowupCondition,
    FollowupRule,
    FormData,
    FormErrors,
    Question,
    QuestionType,
)

# 연락처 누락 에러 키
CONTACT_ERROR_KEY = "contact_method"


def _as_list(value: Any) -> list[str]:
    """단일 값도 1개짜리 목록으로."""
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def is_valid_number(value: Any) -> bool:
    """
    숫자 답변 검증.

    - 앞뒤 공백 허용
    - NaN/Inf 거절
    """
    if value is None or isinstance(value, (list, dict, bool)):
        return False
    try:
        decimal_value = Decimal(str(value).strip())
    except InvalidOperation:
        return False
    return decimal_value.is_finite()


def is_answered(value: Any) -> bool:
    """답변 존재 여부: 비어 있지 않은 목록 또는 공백이 아닌 문자열."""
    if isinstance(value, list):
        return len(value) > 0
    return not is_blank(value)


class AnswerValidationService:
    """
    답변 검증 서비스.

    Usage:
        service = AnswerValidationService(DefinitionService(path))
        errors = service.validate("woman", form_data, contact, "ru", additional)
    """

    def __init__(self, definitions: DefinitionService):
        self.definitions = definitions

    def validate(
        self,
        questionnaire_type: str,
        form_data: FormData,
        contact_data: ContactData,
        lang: str,
        additional_data: AdditionalData | None = None,
    ) -> FormErrors:
        """
        전체 검증.

        Args:
            questionnaire_type: infant, child, woman, man
            form_data: {질문 ID: 답변}
            contact_data: 연락처
            lang: 메시지 언어
            additional_data: {<질문 ID>_additional: 텍스트}

        Returns:
            FormErrors (유효하면 빈 dict)

        Raises:
            IntakeError: UNKNOWN_QUESTIONNAIRE_TYPE
        """
        lang = self.definitions.resolve_language(lang)
        errors: FormErrors = {}

        for section in self.definitions.get_sections(questionnaire_type):
            for question in section.questions:
                if not question.required:
                    continue
                message_key = self._check_required(question, form_data.get(question.id))
                if message_key:
                    errors[question.id] = self.definitions.get_message(message_key, lang)

        if additional_data is not None:
            for rule in self.definitions.get_followups():
                if not self._followup_triggered(rule, form_data.get(rule.question)):
                    continue
                if is_blank(additional_data.get(rule.additional_key)):
                    errors[rule.additional_key] = self.definitions.get_message(
                        "required", lang
                    )

        if not has_any_contact(contact_data):
            errors[CONTACT_ERROR_KEY] = self.definitions.get_message("required", lang)

        return errors

    def _check_required(self, question: Question, value: Any) -> str | None:
        """
        필수 질문 검사.

        Returns:
            메시지 키 (문제 없으면 None)
        """
        if question.type == QuestionType.CHECKBOX:
            if not is_answered(value):
                return "select_at_least_one"
            return None

        if question.type == QuestionType.NUMBER:
            if is_blank(value) or not is_valid_number(value):
                return "required"
            return None

        if not is_answered(value):
            return "required"
        return None

    def _followup_triggered(self, rule: FollowupRule, value: Any) -> bool:
        """후속 입력이 필요한 답변인지."""
        if rule.condition == FollowupCondition.EQUALS:
            return isinstance(value, str) and value == rule.value

        if not is_answered(value):
            return False

        selected = _as_list(value)
        if rule.condition == FollowupCondition.ANY_EXCEPT:
            return any(v != rule.value for v in selected)
        if rule.condition == FollowupCondition.INCLUDES:
            return rule.value in selected
        return False
