"""
Core layer: 저장소, 연락처 매칭, 파일 I/O, 전송 기록.

역할:
- 설문 저장소 (in-memory, Lock 직렬화)
- 연락처 정규화/매칭
- 원자적 JSON 쓰기
"""

from .contacts import clean_handle, has_any_contact, matches_contact, normalize_contact
from .files import atomic_write_json, read_json_object
from .ids import generate_questionnaire_id
from .logging import (
    complete_delivery_log,
    configure_logging,
    create_delivery_log,
    emit_delivery_event,
)
from .store import QuestionnaireStore

__all__ = [
    # contacts
    "normalize_contact",
    "clean_handle",
    "has_any_contact",
    "matches_contact",
    # files
    "atomic_write_json",
    "read_json_object",
    # ids
    "generate_questionnaire_id",
    # logging
    "configure_logging",
    "create_delivery_log",
    "emit_delivery_event",
    "complete_delivery_log",
    # store
    "QuestionnaireStore",
]
