"""
Application Services.

역할:
- definitions: definition.yaml → 섹션/질문/후속 규칙
- validate: 답변 검증 (필수/후속/연락처)
- render: 답변 → Telegram HTML 메시지
- submission: 검증 → 렌더 → 저장 → 채널 전송
- content: 인라인 CMS 문구 저장소
"""

from .content import ContentStore
from .definitions import DefinitionService
from .render import MessageRenderer
from .submission import SubmissionResult, SubmissionService
from .validate import AnswerValidationService

__all__ = [
    "DefinitionService",
    "AnswerValidationService",
    "MessageRenderer",
    "SubmissionService",
    "SubmissionResult",
    "ContentStore",
]
