"""
Telegram Bot API Provider.

호출:
- POST {api_base}/bot{token}/sendMessage   {chat_id, text, parse_mode: HTML}
- POST {api_base}/bot{token}/deleteMessage {chat_id, message_id}

재시도 정책:
- 네트워크 오류/타임아웃, 429, 5xx → 지수 백오프 재시도 (429는 retry_after 존중)
- 4xx, ok=false, JSON 객체 아님 → 즉시 실패 (NotifyResult)

보안: 봇 토큰은 URL에만 포함, 로그에 남기지 않음.
"""

import logging
import os
from typing import Any

import httpx

from src.app.providers.base import NotificationProvider, NotifyResult
from src.core.logging import mask_chat_id
from src.domain.constants import (
    RETRYABLE_STATUS_CODES,
    TELEGRAM_API_BASE,
    TELEGRAM_MAX_RETRIES,
    TELEGRAM_PARSE_MODE,
    TELEGRAM_TIMEOUT_SECONDS,
)
from src.domain.errors import ErrorCodes
from src.utils.retry import RetryableError, retry_with_exponential_backoff

logger = logging.getLogger(__name__)


def _env(*names: str) -> str | None:
    """첫 번째로 설정된 환경변수 값 (공백만 있으면 미설정)."""
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


class TelegramNotifier(NotificationProvider):
    """
    Telegram 채널 전송.

    Usage:
        notifier = TelegramNotifier(bot_token="123:ABC", chat_id="-100123")
        result = await notifier.send_message("<b>Анкета</b>")
        if result.success:
            store.update_message_id(record.id, result.message_id)
    """

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: str | None = None,
        api_base: str = TELEGRAM_API_BASE,
        timeout: float = TELEGRAM_TIMEOUT_SECONDS,
        max_retries: int = TELEGRAM_MAX_RETRIES,
        initial_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            bot_token: 봇 토큰 (TELEGRAM_BOT_TOKEN / VITE_TELEGRAM_BOT_TOKEN)
            chat_id: 스태프 채팅 ID (TELEGRAM_CHAT_ID / VITE_TELEGRAM_CHAT_ID)
            api_base: Bot API 기본 URL
            timeout: 요청 타임아웃(초)
            max_retries: 재시도 횟수
            initial_delay: 첫 재시도 대기(초)
            transport: httpx transport (테스트용 MockTransport 주입)
        """
        self.bot_token = bot_token or _env("TELEGRAM_BOT_TOKEN", "VITE_TELEGRAM_BOT_TOKEN")
        self.chat_id = chat_id or _env("TELEGRAM_CHAT_ID", "VITE_TELEGRAM_CHAT_ID")
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self._transport = transport

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "TelegramNotifier":
        """default.yaml의 telegram 섹션으로 생성 (자격 증명은 환경변수)."""
        tg = config.get("telegram", {}) or {}
        return cls(
            api_base=tg.get("api_base", TELEGRAM_API_BASE),
            timeout=float(tg.get("timeout", TELEGRAM_TIMEOUT_SECONDS)),
            max_retries=int(tg.get("max_retries", TELEGRAM_MAX_RETRIES)),
            initial_delay=float(tg.get("initial_delay", 1.0)),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    # =========================================================================
    # Public API
    # =========================================================================

    async def send_message(self, text: str) -> NotifyResult:
        if not self.is_configured:
            return self._not_configured()

        logger.info(
            f"Sending message to Telegram (chat={mask_chat_id(self.chat_id)}, "
            f"length={len(text)})"
        )
        result = await self._call(
            "sendMessage",
            {
                "chat_id": self.chat_id,
                "text": text,
                "parse_mode": TELEGRAM_PARSE_MODE,
            },
        )
        if result.success:
            logger.info(f"Telegram message sent: message_id={result.message_id}")
        return result

    async def delete_message(self, message_id: int) -> NotifyResult:
        if not self.is_configured:
            return self._not_configured()

        result = await self._call(
            "deleteMessage",
            {"chat_id": self.chat_id, "message_id": message_id},
        )
        if result.success:
            result.message_id = message_id
            logger.info(f"Telegram message deleted: message_id={message_id}")
        return result

    # =========================================================================
    # Internals
    # =========================================================================

    def _not_configured(self) -> NotifyResult:
        logger.error(
            "Telegram credentials not configured "
            f"(token={'SET' if self.bot_token else 'NOT SET'}, "
            f"chat_id={'SET' if self.chat_id else 'NOT SET'})"
        )
        return NotifyResult(
            success=False,
            error_code=ErrorCodes.NOTIFIER_NOT_CONFIGURED,
            error_message="Telegram bot token or chat id not configured",
        )

    def _url(self, method: str) -> str:
        return f"{self.api_base}/bot{self.bot_token}/{method}"

    async def _post_once(self, method: str, payload: dict[str, Any]) -> httpx.Response:
        """단일 요청. 재시도 대상이면 RetryableError."""
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(self._url(method), json=payload)
            except httpx.TransportError as e:
                # 예외 메시지에 URL(토큰)이 포함될 수 있어 타입명만 사용
                raise RetryableError(f"{method}: {type(e).__name__}") from e

        if response.status_code in RETRYABLE_STATUS_CODES:
            retry_after = _retry_after(response)
            raise RetryableError(
                f"{method}: HTTP {response.status_code}", retry_after=retry_after
            )
        return response

    async def _call(self, method: str, payload: dict[str, Any]) -> NotifyResult:
        """Bot API 호출 → NotifyResult."""
        try:
            response = await retry_with_exponential_backoff(
                lambda: self._post_once(method, payload),
                max_retries=self.max_retries,
                initial_delay=self.initial_delay,
                max_delay=self.timeout,
            )
        except RetryableError as e:
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message=str(e),
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type or not response.text.strip():
            logger.error(f"Non-JSON response from Telegram ({method}): HTTP {response.status_code}")
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message="Invalid response from Telegram API",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message="Invalid JSON response from Telegram API",
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            logger.error(f"Unexpected JSON body from Telegram ({method}): HTTP {response.status_code}")
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message="Invalid response from Telegram API",
                status_code=response.status_code,
            )

        if response.is_error or not data.get("ok"):
            description = data.get("description") or f"HTTP {response.status_code}"
            logger.warning(f"Telegram API error ({method}): {description}")
            return NotifyResult(
                success=False,
                error_code=ErrorCodes.NOTIFICATION_FAILED,
                error_message=f"Telegram API error: {description}",
                status_code=response.status_code,
            )

        message_id = None
        result = data.get("result")
        if isinstance(result, dict):
            message_id = result.get("message_id")

        return NotifyResult(
            success=True,
            message_id=message_id,
            status_code=response.status_code,
        )


def _retry_after(response: httpx.Response) -> float | None:
    """429 응답의 parameters.retry_after (객체가 아니면 None)."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    parameters = data.get("parameters")
    if not isinstance(parameters, dict):
        return None
    value = parameters.get("retry_after")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value
