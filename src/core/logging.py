"""
Delivery logging: 채널 전송 기록 + 프로세스 로깅 설정.

규칙:
- 채널 전송 실패는 저장을 막지 않음 → DeliveryLog에 기록
- 이벤트 필수 컨텍스트: action, success, timestamp, error_code/message(실패 시)
- 봇 토큰은 절대 로그에 남기지 않음
"""

import logging
from datetime import UTC, datetime
from typing import Any

from src.domain.schemas import DeliveryEvent, DeliveryLog

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# =============================================================================
# Process Logging
# =============================================================================


def configure_logging(config: dict[str, Any] | None = None) -> None:
    """
    default.yaml의 logging 섹션으로 루트 로거 설정.

    Args:
        config: 전체 설정 dict (logging.level, logging.format 사용)
    """
    log_config = (config or {}).get("logging", {}) or {}
    level_name = str(log_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_config.get("format", DEFAULT_LOG_FORMAT),
    )
    # httpx 요청 로그에는 봇 토큰이 URL에 포함됨
    logging.getLogger("httpx").setLevel(logging.WARNING)


def mask_chat_id(chat_id: str | None) -> str:
    """chat_id 앞 4자리만 노출."""
    if not chat_id:
        return "<unset>"
    return f"{chat_id[:4]}..."


# =============================================================================
# Delivery Log Management
# =============================================================================


def create_delivery_log(questionnaire_id: str) -> DeliveryLog:
    """
    새 DeliveryLog 생성.

    Args:
        questionnaire_id: 설문 ID

    Returns:
        초기화된 DeliveryLog
    """
    return DeliveryLog(
        questionnaire_id=questionnaire_id,
        started_at=datetime.now(UTC).isoformat(),
        result="pending",
    )


def emit_delivery_event(
    log: DeliveryLog,
    action: str,
    success: bool,
    message_id: int | None = None,
    error_code: str | None = None,
    error_message: str | None = None,
) -> DeliveryEvent:
    """
    전송 이벤트 기록.

    Args:
        log: DeliveryLog 인스턴스
        action: "send" 또는 "delete"
        success: 성공 여부
        message_id: 채널 메시지 ID
        error_code: 에러 코드 (실패 시)
        error_message: 에러 메시지 (실패 시)
    """
    event = DeliveryEvent(
        action=action,
        success=success,
        timestamp=datetime.now(UTC).isoformat(),
        message_id=message_id,
        error_code=error_code,
        error_message=error_message,
    )
    log.events.append(event)
    return event


def complete_delivery_log(log: DeliveryLog, result: str) -> None:
    """
    DeliveryLog 완료 처리.

    Args:
        log: DeliveryLog 인스턴스
        result: delivered, failed, skipped
    """
    log.finished_at = datetime.now(UTC).isoformat()
    log.result = result
