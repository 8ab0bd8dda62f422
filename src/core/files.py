"""
JSON 파일 I/O: 콘텐츠/백업 파일용.

규칙:
- 원자적 쓰기: temp → os.replace (중간 상태 없음)
- fsync는 best-effort (실패 시 경고만)
- 실패 시 temp 파일 정리, 기존 파일 보존
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _fsync_dir(dir_path: Path) -> None:
    """디렉토리 엔트리 fsync (지원 환경에서만)."""
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    """
    원자적 JSON 쓰기.

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(dir=dir_path, suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def read_json_object(path: Path) -> dict[str, Any]:
    """
    JSON 객체 파일 로드.

    Raises:
        OSError: 읽기 실패
        ValueError: JSON 파싱 실패 또는 최상위가 객체가 아님
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object in {path}, got {type(data).__name__}")
    return data
