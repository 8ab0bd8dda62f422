"""
Content Store: 인라인 CMS용 사이트 문구 저장소.

파일 구조:
    data/
    ├── content.json         # 현재 문구
    ├── content.json.lock    # FileLock
    └── backup/
        └── content-<ms>.json  # 갱신 직전 내용

규칙:
- 갱신 = {**현재, **patch} 병합 (키 삭제 없음)
- 갱신 전 이전 내용을 백업
- 파일시스템을 쓸 수 없는 환경에서는 메모리 캐시로 동작
"""

import logging
import time
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.core.files import atomic_write_json, read_json_object
from src.domain.constants import (
    CONTENT_BACKUP_DIR,
    CONTENT_BACKUP_PREFIX,
    CONTENT_FILENAME,
    CONTENT_LOCK_SUFFIX,
    DEFAULT_CONTENT,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


class ContentStore:
    """
    사이트 문구 저장소.

    Usage:
        store = ContentStore(Path("data"))
        store.read()
        store.update({"welcomeTitle": "Здравствуйте"})
    """

    def __init__(
        self,
        content_dir: Path,
        defaults: dict[str, str] | None = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        """
        Args:
            content_dir: content.json이 위치할 디렉터리
            defaults: 최초 생성 시 내용
            lock_timeout: 파일 락 대기 시간(초)
        """
        self.content_dir = content_dir
        self.content_path = content_dir / CONTENT_FILENAME
        self.backup_dir = content_dir / CONTENT_BACKUP_DIR
        self.lock_path = content_dir / f"{CONTENT_FILENAME}{CONTENT_LOCK_SUFFIX}"
        self.lock_timeout = lock_timeout
        self._cache: dict[str, Any] = dict(defaults if defaults is not None else DEFAULT_CONTENT)

    def _ensure_file(self) -> None:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        if not self.content_path.exists():
            atomic_write_json(self.content_path, self._cache)

    def read(self) -> dict[str, Any]:
        """
        현재 문구.

        파일 읽기 실패 시 마지막 캐시를 반환.
        """
        try:
            self._ensure_file()
            self._cache = read_json_object(self.content_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Content file unavailable, serving cached content: {e}")
        return dict(self._cache)

    def update(self, patch: dict[str, Any]) -> dict[str, Any]:
        """
        문구 병합 갱신.

        Args:
            patch: 갱신할 키/값 (문자열 값만 반영)

        Returns:
            갱신 후 전체 문구
        """
        accepted = {str(k): v for k, v in patch.items() if isinstance(v, str)}
        skipped = sorted(set(patch) - set(accepted))
        if skipped:
            logger.warning(f"Ignoring non-string content values: {skipped}")

        try:
            self.content_dir.mkdir(parents=True, exist_ok=True)
            # 읽기 → 병합 → 백업 → 쓰기는 한 락 안에서
            with FileLock(str(self.lock_path), timeout=self.lock_timeout):
                self._ensure_file()
                current = self._read_locked()
                next_content = {**current, **accepted}
                backup_path = self._backup(current)
                atomic_write_json(self.content_path, next_content)
            logger.info(
                f"Content updated ({len(accepted)} keys), backup: {backup_path.name}"
            )
        except (OSError, Timeout) as e:
            logger.warning(f"Content persisted in memory only: {e}")
            next_content = {**self._cache, **accepted}

        self._cache = next_content
        return dict(next_content)

    def _read_locked(self) -> dict[str, Any]:
        """락 보유 중 현재 파일 읽기 (손상 시 캐시)."""
        try:
            return read_json_object(self.content_path)
        except ValueError as e:
            logger.warning(f"Content file unreadable, merging into cached content: {e}")
            return dict(self._cache)

    def _backup(self, content: dict[str, Any]) -> Path:
        """content-<ms>.json 백업 (동일 ms 충돌 시 접미사)."""
        stamp = int(time.time() * 1000)
        backup_path = self.backup_dir / f"{CONTENT_BACKUP_PREFIX}{stamp}.json"
        suffix = 1
        while backup_path.exists():
            backup_path = self.backup_dir / f"{CONTENT_BACKUP_PREFIX}{stamp}-{suffix}.json"
            suffix += 1
        atomic_write_json(backup_path, content)
        return backup_path

    def list_backups(self) -> list[Path]:
        """백업 파일 목록 (최신순)."""
        if not self.backup_dir.exists():
            return []
        backups = list(self.backup_dir.glob(f"{CONTENT_BACKUP_PREFIX}*.json"))
        backups.sort(key=lambda p: p.stat().st_mtime, reverse=True)
        return backups
