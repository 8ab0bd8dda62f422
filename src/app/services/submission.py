"""
Submission Service: 검증 → 렌더 → 저장 → 채널 전송.

규칙:
- 검증 실패 시 저장하지 않음 (VALIDATION_FAILED, errors 포함)
- 채널 전송 실패는 저장을 되돌리지 않음 → DeliveryLog에 기록
- 삭제 시 채널 메시지 삭제는 best-effort (실패해도 설문은 삭제)
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from src.app.providers.base import NotificationProvider, NotifyResult
from src.app.services.definitions import DefinitionService
from src.app.services.render import MessageRenderer
from src.app.services.validate import AnswerValidationService
from src.core.contacts import has_any_contact
from src.core.ids import generate_questionnaire_id
from src.core.logging import (
    complete_delivery_log,
    create_delivery_log,
    emit_delivery_event,
)
from src.core.store import QuestionnaireStore
from src.domain.errors import ErrorCodes, IntakeError
from src.domain.schemas import (
    AdditionalData,
    ContactData,
    DeliveryLog,
    FormData,
    QuestionnaireRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """제출 결과."""
    record: QuestionnaireRecord
    delivery: DeliveryLog

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "id": self.record.id,
            "telegramMessageId": self.record.telegram_message_id,
            "notification": {
                "delivered": self.delivery.delivered,
                "result": self.delivery.result,
                "error": next(
                    (e.error_message for e in reversed(self.delivery.events) if not e.success),
                    None,
                ),
                "events": [e.to_dict() for e in self.delivery.events],
            },
        }


class SubmissionService:
    """
    설문 제출/조회/삭제 오케스트레이션.

    Usage:
        service = SubmissionService(definitions, store, notifier)
        result = await service.submit("woman", form_data, additional, contact, "ru")
    """

    def __init__(
        self,
        definitions: DefinitionService,
        store: QuestionnaireStore,
        notifier: NotificationProvider,
        validator: AnswerValidationService | None = None,
        renderer: MessageRenderer | None = None,
    ):
        self.definitions = definitions
        self.store = store
        self.notifier = notifier
        self.validator = validator or AnswerValidationService(definitions)
        self.renderer = renderer or MessageRenderer(definitions)

    # =========================================================================
    # Submit
    # =========================================================================

    async def submit(
        self,
        questionnaire_type: str,
        form_data: FormData,
        additional_data: AdditionalData | None,
        contact_data: ContactData,
        language: str | None = None,
    ) -> SubmissionResult:
        """
        설문 제출 전체 흐름.

        Raises:
            IntakeError: UNKNOWN_QUESTIONNAIRE_TYPE, VALIDATION_FAILED
        """
        lang = self.definitions.resolve_language(language)
        additional = dict(additional_data or {})

        errors = self.validator.validate(
            questionnaire_type, form_data, contact_data, lang, additional
        )
        if errors:
            raise IntakeError(ErrorCodes.VALIDATION_FAILED, errors=errors)

        markdown = self.renderer.render(
            questionnaire_type, form_data, additional, contact_data, lang
        )

        record = self.store.save(
            QuestionnaireRecord(
                id=generate_questionnaire_id(),
                type=questionnaire_type,
                form_data=form_data,
                additional_data=additional,
                contact_data=contact_data,
                markdown=markdown,
                created_at=datetime.now(UTC).isoformat(),
                language=lang,
            )
        )

        delivery = await self.notify(record)
        return SubmissionResult(record=record, delivery=delivery)

    async def notify(self, record: QuestionnaireRecord) -> DeliveryLog:
        """
        채널 전송 + message_id 기록.

        실패해도 예외 없이 DeliveryLog로 반환.
        """
        log = create_delivery_log(record.id)

        if not self.notifier.is_configured:
            emit_delivery_event(
                log,
                "send",
                success=False,
                error_code=ErrorCodes.NOTIFIER_NOT_CONFIGURED,
                error_message="Notifier not configured",
            )
            complete_delivery_log(log, "skipped")
            logger.warning(f"Notifier not configured, questionnaire {record.id} stored only")
            return log

        try:
            result = await self.notifier.send_message(record.markdown)
        except Exception as e:
            # 저장은 이미 완료 → 제출은 성공으로 유지
            logger.exception(f"Notifier raised while delivering questionnaire {record.id}")
            emit_delivery_event(
                log,
                "send",
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message=f"Notifier error: {type(e).__name__}",
            )
            complete_delivery_log(log, "failed")
            return log

        emit_delivery_event(
            log,
            "send",
            success=result.success,
            message_id=result.message_id,
            error_code=result.error_code,
            error_message=result.error_message,
        )

        if result.success and result.message_id is not None:
            self.store.update_message_id(record.id, result.message_id)
            complete_delivery_log(log, "delivered")
        elif result.success:
            complete_delivery_log(log, "delivered")
        else:
            logger.warning(
                f"Failed to deliver questionnaire {record.id}: {result.error_message}"
            )
            complete_delivery_log(log, "failed")

        return log

    # =========================================================================
    # Pre-rendered Save
    # =========================================================================

    def save_prerendered(
        self,
        questionnaire_type: str | None,
        form_data: FormData | None,
        contact_data: ContactData | None,
        markdown: str | None,
        additional_data: AdditionalData | None = None,
        language: str | None = None,
        telegram_message_id: int | None = None,
    ) -> QuestionnaireRecord:
        """
        클라이언트가 렌더링한 설문 저장 (검증/전송 없음).

        Raises:
            IntakeError: MISSING_REQUIRED_FIELDS
        """
        missing = [
            name
            for name, value in (
                ("type", questionnaire_type),
                ("formData", form_data),
                ("contactData", contact_data),
                ("markdown", markdown),
            )
            if not value
        ]
        if missing:
            raise IntakeError(ErrorCodes.MISSING_REQUIRED_FIELDS, fields=missing)

        return self.store.save(
            QuestionnaireRecord(
                id=generate_questionnaire_id(),
                type=str(questionnaire_type),
                form_data=dict(form_data or {}),
                additional_data=dict(additional_data or {}),
                contact_data=contact_data or ContactData(),
                markdown=str(markdown),
                created_at=datetime.now(UTC).isoformat(),
                language=self.definitions.resolve_language(language),
                telegram_message_id=telegram_message_id or None,
            )
        )

    # =========================================================================
    # Lookup / Update
    # =========================================================================

    def get(self, questionnaire_id: str) -> QuestionnaireRecord:
        return self.store.require(questionnaire_id)

    def list_by_ids(self, ids: list[str] | None) -> list[dict[str, Any]]:
        if not ids:
            return []
        return self.store.list_by_ids(ids)

    def search(self, query: ContactData) -> list[dict[str, Any]]:
        """
        연락처 조회.

        Raises:
            IntakeError: CONTACT_REQUIRED
        """
        if not has_any_contact(query):
            raise IntakeError(ErrorCodes.CONTACT_REQUIRED)
        return self.store.search_by_contact(query)

    def update_message_id(self, questionnaire_id: str, message_id: Any) -> QuestionnaireRecord:
        """
        Raises:
            IntakeError: INVALID_MESSAGE_ID, QUESTIONNAIRE_NOT_FOUND
        """
        if not _is_message_id(message_id):
            raise IntakeError(ErrorCodes.INVALID_MESSAGE_ID, value=message_id)
        return self.store.update_message_id(questionnaire_id, int(message_id))

    # =========================================================================
    # Delete
    # =========================================================================

    async def delete(self, questionnaire_id: str) -> NotifyResult | None:
        """
        설문 삭제 (+ 채널 메시지 삭제 시도).

        Returns:
            채널 삭제 결과 (메시지 없음/미설정이면 None)

        Raises:
            IntakeError: QUESTIONNAIRE_NOT_FOUND
        """
        record = self.store.require(questionnaire_id)

        channel_result = None
        if record.telegram_message_id and self.notifier.is_configured:
            channel_result = await self.notifier.delete_message(record.telegram_message_id)
            if channel_result.success:
                logger.info(
                    f"Deleted channel message {record.telegram_message_id} "
                    f"for questionnaire {questionnaire_id}"
                )
            else:
                logger.warning(
                    f"Failed to delete channel message {record.telegram_message_id}: "
                    f"{channel_result.error_message}"
                )

        self.store.delete(questionnaire_id)
        return channel_result

    async def delete_channel_message(self, message_id: Any) -> NotifyResult:
        """
        채널 메시지 직접 삭제.

        Raises:
            IntakeError: INVALID_MESSAGE_ID, NOTIFIER_NOT_CONFIGURED
        """
        if not _is_message_id(message_id):
            raise IntakeError(ErrorCodes.INVALID_MESSAGE_ID, value=message_id)
        if not self.notifier.is_configured:
            raise IntakeError(ErrorCodes.NOTIFIER_NOT_CONFIGURED)
        return await self.notifier.delete_message(int(message_id))


def _is_message_id(value: Any) -> bool:
    """양의 정수 (bool 제외)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
