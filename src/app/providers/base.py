"""
메시지 채널 Provider 추상 인터페이스.

역할:
- 렌더링된 설문을 스태프 채널로 전송
- 설문 삭제 시 채널 메시지 삭제

실패는 예외가 아니라 NotifyResult(success=False)로 반환.
설정 누락(토큰/채팅 ID)만 NOTIFIER_NOT_CONFIGURED 코드로 구분.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class NotifyResult:
    """
    채널 호출 결과.

    message_id: sendMessage 성공 시 채널 메시지 ID
    error_code: NOTIFIER_NOT_CONFIGURED, NOTIFICATION_FAILED 등
    error_message: 채널이 반환한 description 또는 네트워크 오류 메시지
    """
    success: bool
    message_id: int | None = None
    error_code: str | None = None
    error_message: str | None = None
    status_code: int | None = None


class NotificationProvider(ABC):
    """메시지 채널 Provider 추상 클래스."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """자격 증명이 모두 설정되었는지."""

    @abstractmethod
    async def send_message(self, text: str) -> NotifyResult:
        """
        메시지 전송.

        Args:
            text: HTML 형식 메시지

        Returns:
            NotifyResult (성공 시 message_id 포함)
        """

    @abstractmethod
    async def delete_message(self, message_id: int) -> NotifyResult:
        """
        메시지 삭제.

        Args:
            message_id: 채널 메시지 ID
        """
