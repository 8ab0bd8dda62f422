"""
Error definitions for the intake service.

규칙:
- 조용한 실패 금지 → IntakeError로 명시적 실패
- 에러 코드는 ErrorCodes 상수만 사용
- HTTP 상태 매핑은 routes 계층에서 (ERROR_STATUS)
"""

from typing import Any


class IntakeError(Exception):
    """
    설문 처리 중 발생하는 도메인 에러.

    Usage:
        raise IntakeError("QUESTIONNAIRE_NOT_FOUND", id=questionnaire_id)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Request ===
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONTACT_REQUIRED = "CONTACT_REQUIRED"
    INVALID_MESSAGE_ID = "INVALID_MESSAGE_ID"
    UNKNOWN_QUESTIONNAIRE_TYPE = "UNKNOWN_QUESTIONNAIRE_TYPE"

    # === Store ===
    QUESTIONNAIRE_NOT_FOUND = "QUESTIONNAIRE_NOT_FOUND"

    # === Definition ===
    DEFINITION_INVALID = "DEFINITION_INVALID"

    # === Notification ===
    NOTIFIER_NOT_CONFIGURED = "NOTIFIER_NOT_CONFIGURED"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"

    # === Admin ===
    INVALID_PASSWORD = "INVALID_PASSWORD"
    FORBIDDEN = "FORBIDDEN"


# HTTP 상태 매핑 (routes에서 사용)
ERROR_STATUS: dict[str, int] = {
    ErrorCodes.MISSING_REQUIRED_FIELDS: 400,
    ErrorCodes.CONTACT_REQUIRED: 400,
    ErrorCodes.INVALID_MESSAGE_ID: 400,
    ErrorCodes.UNKNOWN_QUESTIONNAIRE_TYPE: 400,
    ErrorCodes.INVALID_PASSWORD: 401,
    ErrorCodes.FORBIDDEN: 403,
    ErrorCodes.QUESTIONNAIRE_NOT_FOUND: 404,
    ErrorCodes.VALIDATION_FAILED: 422,
    ErrorCodes.DEFINITION_INVALID: 500,
    ErrorCodes.NOTIFIER_NOT_CONFIGURED: 500,
    ErrorCodes.NOTIFICATION_FAILED: 502,
}


def status_for(error: IntakeError) -> int:
    """에러 코드 → HTTP 상태 (미등록 코드는 500)."""
    return ERROR_STATUS.get(error.code, 500)
