"""
Messaging Providers.

역할:
- base: NotificationProvider 추상 인터페이스 + NotifyResult
- telegram: Telegram Bot API 구현 (httpx)
"""

from .base import NotificationProvider, NotifyResult
from .telegram import TelegramNotifier

__all__ = [
    "NotificationProvider",
    "NotifyResult",
    "TelegramNotifier",
]
