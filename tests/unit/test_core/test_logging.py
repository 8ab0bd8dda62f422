"""
test_logging.py - DeliveryLog 관리 테스트

DoD:
- 전송 이벤트 기록 (성공/실패)
- 완료 시 result, finished_at 설정
"""

import logging
from datetime import UTC, datetime

from src.core.logging import (
    complete_delivery_log,
    configure_logging,
    create_delivery_log,
    emit_delivery_event,
    mask_chat_id,
)
from src.domain.errors import ErrorCodes

# =============================================================================
# create_delivery_log 테스트
# =============================================================================

class TestCreateDeliveryLog:
    """create_delivery_log 함수 테스트."""

    def test_creates_pending(self):
        log = create_delivery_log("q-1")

        assert log.questionnaire_id == "q-1"
        assert log.result == "pending"
        assert log.events == []
        assert not log.delivered

    def test_has_started_at(self):
        """started_at 타임스탬프 포함."""
        before = datetime.now(UTC)
        log = create_delivery_log("q-1")
        after = datetime.now(UTC)

        started = datetime.fromisoformat(log.started_at)
        assert before <= started <= after


# =============================================================================
# emit_delivery_event 테스트
# =============================================================================

class TestEmitDeliveryEvent:

    def test_success_event(self):
        log = create_delivery_log("q-1")

        event = emit_delivery_event(log, "send", success=True, message_id=42)

        assert log.events == [event]
        assert event.message_id == 42
        assert event.error_code is None

    def test_failure_event(self):
        log = create_delivery_log("q-1")

        emit_delivery_event(
            log,
            "send",
            success=False,
            error_code=ErrorCodes.NOTIFICATION_FAILED,
            error_message="Telegram API error: Forbidden",
        )

        data = log.events[0].to_dict()
        assert data["errorCode"] == ErrorCodes.NOTIFICATION_FAILED
        assert data["error"] == "Telegram API error: Forbidden"
        assert data["success"] is False


class TestCompleteDeliveryLog:

    def test_delivered(self):
        log = create_delivery_log("q-1")

        complete_delivery_log(log, "delivered")

        assert log.delivered
        assert log.finished_at is not None


# =============================================================================
# Process logging
# =============================================================================

class TestConfigureLogging:

    def test_httpx_logger_quieted(self):
        """봇 토큰이 담긴 요청 URL 로그 차단."""
        configure_logging({"logging": {"level": "DEBUG"}})

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_mask_chat_id(self):
        assert mask_chat_id("-1001234567890") == "-100..."
        assert mask_chat_id(None) == "<unset>"
