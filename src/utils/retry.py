"""
재시도 로직 유틸리티.

메시지 채널 호출 실패 시 지수 백오프로 재시도합니다.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryableError(Exception):
    """재시도 가능한 에러 (5xx, 429, 네트워크 오류 등)."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


def backoff_delays(
    max_retries: int,
    initial_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
) -> list[float]:
    """
    재시도 간 대기 시간 목록.

    예: (3, 1.0, 60.0) → [1.0, 2.0, 4.0]
    """
    delays = []
    delay = initial_delay
    for _ in range(max_retries):
        delays.append(min(delay, max_delay))
        delay *= exponential_base
    return delays


async def retry_with_exponential_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    exceptions: tuple[type[Exception], ...] = (RetryableError,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    지수 백오프를 사용한 재시도.

    Args:
        func: 재시도할 비동기 함수 (인자 없음)
        max_retries: 최대 재시도 횟수 (총 시도 = max_retries + 1)
        initial_delay: 초기 대기 시간(초)
        max_delay: 최대 대기 시간(초)
        exceptions: 재시도할 예외 타입들
        sleep: 대기 함수 (테스트에서 교체)

    Returns:
        func의 반환값

    Raises:
        마지막 시도에서 발생한 예외
    """
    delays = backoff_delays(max_retries, initial_delay, max_delay)
    attempts = max_retries + 1

    for attempt in range(attempts):
        try:
            result = await func()
            if attempt > 0:
                logger.info(f"Retry succeeded on attempt {attempt + 1}/{attempts}")
            return result

        except exceptions as e:
            if attempt == max_retries:
                logger.error(f"All {attempts} attempts failed. Last error: {e}")
                raise

            delay = delays[attempt]
            retry_after = getattr(e, "retry_after", None)
            if retry_after is not None:
                delay = min(max(delay, float(retry_after)), max_delay)

            logger.warning(
                f"Attempt {attempt + 1}/{attempts} failed: {e}. "
                f"Retrying in {delay:.1f}s..."
            )
            await sleep(delay)

    msg = "Unexpected retry logic error"
    raise RuntimeError(msg)
