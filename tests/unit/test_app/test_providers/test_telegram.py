"""
test_telegram.py - Telegram Bot API Provider 테스트

httpx.MockTransport로 Bot API 응답을 흉내냄 (네트워크 없음).

검증 포인트:
1. sendMessage 요청 형식 (chat_id, text, parse_mode=HTML)
2. message_id 추출
3. ok=false / JSON 아님 → 실패 결과 (재시도 없음)
4. 5xx / 네트워크 오류 → 재시도
5. 자격 증명 누락 → NOTIFIER_NOT_CONFIGURED
"""

import json

import httpx
import pytest

from src.app.providers.telegram import TelegramNotifier
from src.domain.errors import ErrorCodes

# =============================================================================
# Helpers
# =============================================================================

class Recorder:
    """요청 기록 + 순서대로 응답."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_notifier(handler, **kwargs) -> TelegramNotifier:
    return TelegramNotifier(
        bot_token="123:ABC",
        chat_id="-100200300",
        initial_delay=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def ok_response(message_id: int = 77) -> httpx.Response:
    return httpx.Response(200, json={"ok": True, "result": {"message_id": message_id}})


# =============================================================================
# sendMessage
# =============================================================================

class TestSendMessage:

    @pytest.mark.asyncio
    async def test_success(self):
        handler = Recorder(ok_response(77))
        notifier = make_notifier(handler)

        result = await notifier.send_message("<b>Анкета</b>")

        assert result.success
        assert result.message_id == 77

        request = handler.requests[0]
        assert request.url.path == "/bot123:ABC/sendMessage"
        assert json.loads(request.content) == {
            "chat_id": "-100200300",
            "text": "<b>Анкета</b>",
            "parse_mode": "HTML",
        }

    @pytest.mark.asyncio
    async def test_api_error_not_retried(self):
        handler = Recorder(
            httpx.Response(
                400, json={"ok": False, "description": "Bad Request: chat not found"}
            )
        )
        notifier = make_notifier(handler)

        result = await notifier.send_message("x")

        assert not result.success
        assert result.error_code == ErrorCodes.NOTIFICATION_FAILED
        assert result.error_message == "Telegram API error: Bad Request: chat not found"
        assert result.status_code == 400
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_ok_false_with_200(self):
        handler = Recorder(httpx.Response(200, json={"ok": False, "description": "Forbidden"}))

        result = await make_notifier(handler).send_message("x")

        assert not result.success
        assert "Forbidden" in result.error_message

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        handler = Recorder(httpx.Response(200, text="<html>gateway</html>"))

        result = await make_notifier(handler).send_message("x")

        assert not result.success
        assert result.error_message == "Invalid response from Telegram API"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1], None, "ok", 42])
    async def test_non_object_json_body(self, body):
        handler = Recorder(httpx.Response(200, json=body))

        result = await make_notifier(handler).send_message("x")

        assert not result.success
        assert result.error_code == ErrorCodes.NOTIFICATION_FAILED
        assert result.error_message == "Invalid response from Telegram API"
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_server_error_with_list_body_retried(self):
        handler = Recorder(httpx.Response(502, json=["bad gateway"]), ok_response(8))

        result = await make_notifier(handler).send_message("x")

        assert result.success
        assert result.message_id == 8
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_with_malformed_parameters(self):
        handler = Recorder(
            httpx.Response(429, json={"ok": False, "parameters": ["retry_after", 3]}),
            httpx.Response(429, json={"ok": False, "parameters": {"retry_after": "soon"}}),
            ok_response(6),
        )

        result = await make_notifier(handler).send_message("x")

        assert result.success
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_server_error_retried(self):
        handler = Recorder(
            httpx.Response(503, json={"ok": False}),
            httpx.Response(502, text="bad gateway"),
            ok_response(5),
        )

        result = await make_notifier(handler, max_retries=3).send_message("x")

        assert result.success
        assert result.message_id == 5
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_server_error_exhausted(self):
        handler = Recorder(httpx.Response(500, json={"ok": False}))

        result = await make_notifier(handler, max_retries=2).send_message("x")

        assert not result.success
        assert result.error_code == ErrorCodes.NOTIFICATION_FAILED
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_network_error_retried(self):
        handler = Recorder(httpx.ConnectError("connection refused"), ok_response(9))

        result = await make_notifier(handler).send_message("x")

        assert result.success
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_token_not_in_error_message(self):
        handler = Recorder(httpx.ConnectError("https://api.telegram.org/bot123:ABC/sendMessage"))

        result = await make_notifier(handler, max_retries=0).send_message("x")

        assert not result.success
        assert "123:ABC" not in result.error_message


# =============================================================================
# deleteMessage
# =============================================================================

class TestDeleteMessage:

    @pytest.mark.asyncio
    async def test_success(self):
        handler = Recorder(httpx.Response(200, json={"ok": True, "result": True}))

        result = await make_notifier(handler).delete_message(42)

        assert result.success
        assert result.message_id == 42
        assert handler.requests[0].url.path == "/bot123:ABC/deleteMessage"
        assert json.loads(handler.requests[0].content) == {
            "chat_id": "-100200300",
            "message_id": 42,
        }

    @pytest.mark.asyncio
    async def test_not_found(self):
        handler = Recorder(
            httpx.Response(
                400,
                json={"ok": False, "description": "Bad Request: message to delete not found"},
            )
        )

        result = await make_notifier(handler).delete_message(42)

        assert not result.success
        assert "message to delete not found" in result.error_message


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for name in (
            "TELEGRAM_BOT_TOKEN",
            "VITE_TELEGRAM_BOT_TOKEN",
            "TELEGRAM_CHAT_ID",
            "VITE_TELEGRAM_CHAT_ID",
        ):
            monkeypatch.delenv(name, raising=False)

    @pytest.mark.asyncio
    async def test_not_configured(self):
        handler = Recorder(ok_response())
        notifier = TelegramNotifier(transport=httpx.MockTransport(handler))

        result = await notifier.send_message("x")

        assert not notifier.is_configured
        assert result.error_code == ErrorCodes.NOTIFIER_NOT_CONFIGURED
        assert handler.requests == []

    def test_vite_prefixed_fallback(self, monkeypatch):
        monkeypatch.setenv("VITE_TELEGRAM_BOT_TOKEN", "999:XYZ")
        monkeypatch.setenv("VITE_TELEGRAM_CHAT_ID", "-1")

        notifier = TelegramNotifier()

        assert notifier.is_configured
        assert notifier.bot_token == "999:XYZ"

    def test_primary_name_wins(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "1:A")
        monkeypatch.setenv("VITE_TELEGRAM_BOT_TOKEN", "2:B")

        assert TelegramNotifier().bot_token == "1:A"

    def test_from_config(self, default_config):
        notifier = TelegramNotifier.from_config(default_config)

        assert notifier.api_base == "https://api.telegram.org"
        assert notifier.max_retries == 3
        assert notifier.timeout == 30.0
