"""
ID 생성: questionnaire_id

규칙:
- questionnaire_id는 저장 시 1회 발급, 수정 금지
- 고유성 보장: UUID v4
"""

import re
import uuid

# 8-4-4-4-12 hex (uuid4 표준 문자열)
QUESTIONNAIRE_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


def generate_questionnaire_id() -> str:
    """
    설문 ID 생성.

    Returns:
        uuid4 문자열 (예: "3f1c...-...")
    """
    return str(uuid.uuid4())


def is_questionnaire_id(value: str) -> bool:
    """uuid4 형식 여부."""
    return bool(QUESTIONNAIRE_ID_PATTERN.match(value or ""))
