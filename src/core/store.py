"""
In-memory questionnaire store.

규칙:
- 프로세스 로컬 map (영속성 없음)
- id 유일: 동일 id 재저장은 덮어쓰기가 아니라 에러
- 쓰기 작업은 Lock으로 직렬화 (동시 쓰기 경합 제거)
- 조회 결과는 최신순 (created_at 내림차순)
"""

import logging
import threading
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from src.core.contacts import matches_contact
from src.domain.errors import ErrorCodes, IntakeError
from src.domain.schemas import ContactData, QuestionnaireRecord

logger = logging.getLogger(__name__)


def _sort_newest_first(records: list[QuestionnaireRecord]) -> list[QuestionnaireRecord]:
    return sorted(
        records,
        key=lambda r: datetime.fromisoformat(r.created_at),
        reverse=True,
    )


class QuestionnaireStore:
    """
    설문 저장소.

    Usage:
        store = QuestionnaireStore()
        store.save(record)
        store.search_by_contact(ContactData(telegram="@ivan"))
    """

    def __init__(self) -> None:
        self._records: dict[str, QuestionnaireRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: QuestionnaireRecord) -> QuestionnaireRecord:
        """
        설문 저장.

        Raises:
            ValueError: 이미 존재하는 id
        """
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Duplicate questionnaire id: {record.id}")
            self._records[record.id] = record
        logger.info(f"Questionnaire saved: {record.id} ({record.type})")
        return record

    def get(self, questionnaire_id: str) -> QuestionnaireRecord | None:
        return self._records.get(questionnaire_id)

    def require(self, questionnaire_id: str) -> QuestionnaireRecord:
        """
        설문 조회 (없으면 에러).

        Raises:
            IntakeError: QUESTIONNAIRE_NOT_FOUND
        """
        record = self.get(questionnaire_id)
        if record is None:
            raise IntakeError(ErrorCodes.QUESTIONNAIRE_NOT_FOUND, id=questionnaire_id)
        return record

    def delete(self, questionnaire_id: str) -> bool:
        """삭제. 존재했으면 True."""
        with self._lock:
            removed = self._records.pop(questionnaire_id, None)
        if removed is not None:
            logger.info(f"Questionnaire deleted: {questionnaire_id}")
        return removed is not None

    def update_message_id(
        self, questionnaire_id: str, message_id: int
    ) -> QuestionnaireRecord:
        """
        채널 메시지 ID 갱신.

        Raises:
            IntakeError: QUESTIONNAIRE_NOT_FOUND
        """
        with self._lock:
            record = self._records.get(questionnaire_id)
            if record is None:
                raise IntakeError(
                    ErrorCodes.QUESTIONNAIRE_NOT_FOUND, id=questionnaire_id
                )
            record.telegram_message_id = message_id
            record.updated_at = datetime.now(UTC).isoformat()
        return record

    def list_by_ids(self, ids: Iterable[str]) -> list[dict[str, Any]]:
        """
        id 목록 → 요약 목록.

        존재하지 않는 id는 건너뜀. 중복 id는 1회만.
        """
        found: dict[str, QuestionnaireRecord] = {}
        for questionnaire_id in ids:
            record = self._records.get(questionnaire_id)
            if record is not None:
                found[record.id] = record
        return [r.to_summary() for r in _sort_newest_first(list(found.values()))]

    def search_by_contact(self, query: ContactData) -> list[dict[str, Any]]:
        """연락처 일치 설문 요약 (최신순)."""
        with self._lock:
            snapshot = list(self._records.values())
        matches = [r for r in snapshot if matches_contact(query, r.contact_data)]
        return [r.to_summary() for r in _sort_newest_first(matches)]

    def count(self) -> int:
        return len(self._records)
