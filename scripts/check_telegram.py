#!/usr/bin/env python
"""
Telegram 채널 연결 확인 스크립트.

테스트 메시지를 보낸 뒤 바로 삭제합니다.

실행:
    uv run python scripts/check_telegram.py
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

# .env 파일 로드
from dotenv import load_dotenv
load_dotenv()

from src.app.main import load_config  # noqa: E402
from src.app.providers.telegram import TelegramNotifier  # noqa: E402
from src.core.logging import mask_chat_id  # noqa: E402


async def check_send_and_delete(notifier: TelegramNotifier) -> bool:
    """sendMessage → deleteMessage."""
    print("\n" + "=" * 60)
    print("🧪 Telegram Bot API 테스트")
    print("=" * 60)

    if not notifier.is_configured:
        print("❌ TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID가 설정되지 않았습니다.")
        print("   .env 파일에 값을 입력하세요 (VITE_ 접두사도 허용).")
        return False

    print(f"✅ 채팅 ID 발견: {mask_chat_id(notifier.chat_id)}")

    print("📤 테스트 메시지 전송 중...")
    sent = await notifier.send_message("<b>Connection check</b>\nThis message will be deleted.")
    if not sent.success:
        print(f"❌ 전송 실패: {sent.error_message}")
        return False
    print(f"📥 message_id: {sent.message_id}")

    if sent.message_id is None:
        print("⚠️ message_id 없음, 삭제 단계 스킵")
        return True

    print("🗑️ 테스트 메시지 삭제 중...")
    deleted = await notifier.delete_message(sent.message_id)
    if not deleted.success:
        print(f"❌ 삭제 실패: {deleted.error_message}")
        print("   봇에 채널 메시지 삭제 권한이 있는지 확인하세요.")
        return False

    print("✅ Telegram 연결 성공!")
    return True


async def main() -> int:
    notifier = TelegramNotifier.from_config(load_config())
    passed = await check_send_and_delete(notifier)

    print("=" * 60)
    print("🎉 연결 확인 완료" if passed else "⚠️ 연결 확인 실패. .env 파일을 확인하세요.")
    return 0 if passed else 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
