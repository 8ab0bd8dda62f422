"""
Definition Service: definition.yaml 로드 + 설문 구조 조회.

역할:
- 카테고리별 섹션/질문 (Section, Question 객체로 변환)
- 후속 입력 규칙 (FollowupRule)
- 서버 측 현지화 문자열 (필수 입력 메시지, 헤더, 연락처 라벨)
"""

from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import DEFAULT_LANGUAGE
from src.domain.errors import ErrorCodes, IntakeError
from src.domain.schemas import (
    FollowupCondition,
    FollowupRule,
    Option,
    Question,
    QuestionnaireType,
    QuestionType,
    Section,
)


class DefinitionService:
    """
    설문 정의 서비스.

    definition.yaml은 첫 접근 시 로드 (lazy).
    """

    def __init__(self, definition_path: Path):
        """
        Args:
            definition_path: definition.yaml 경로
        """
        self.definition_path = definition_path
        self._definition: dict | None = None
        self._sections: dict[str, list[Section]] = {}

    @property
    def definition(self) -> dict:
        """definition.yaml 로드 (lazy)."""
        if self._definition is None:
            with open(self.definition_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
            if not isinstance(data, dict) or "types" not in data:
                raise IntakeError(
                    ErrorCodes.DEFINITION_INVALID,
                    path=str(self.definition_path),
                    error="'types' section missing",
                )
            self._definition = data
        return self._definition

    # =========================================================================
    # Languages
    # =========================================================================

    @property
    def default_language(self) -> str:
        return str(self.definition.get("default_language", DEFAULT_LANGUAGE))

    @property
    def languages(self) -> list[str]:
        return list(self.definition.get("languages", [self.default_language]))

    def resolve_language(self, value: str | None) -> str:
        """지원하지 않는 언어는 기본 언어로."""
        if value and value in self.languages:
            return value
        return self.default_language

    def get_message(self, key: str, lang: str) -> str:
        """
        현지화 메시지.

        해당 언어에 키가 없으면 기본 언어 → 키 자체 순으로 대체.
        """
        messages = self.definition.get("messages", {})
        for candidate in (lang, self.default_language):
            text = messages.get(candidate, {}).get(key)
            if text:
                return str(text)
        return key

    # =========================================================================
    # Types / Sections
    # =========================================================================

    def _type_config(self, questionnaire_type: str) -> dict[str, Any]:
        try:
            QuestionnaireType(questionnaire_type)
        except ValueError as e:
            raise IntakeError(
                ErrorCodes.UNKNOWN_QUESTIONNAIRE_TYPE,
                type=questionnaire_type,
                valid_types=[t.value for t in QuestionnaireType],
            ) from e

        config = self.definition["types"].get(questionnaire_type)
        if config is None:
            raise IntakeError(
                ErrorCodes.DEFINITION_INVALID,
                error=f"type '{questionnaire_type}' not defined",
            )
        return config

    def get_sections(self, questionnaire_type: str) -> list[Section]:
        """
        카테고리의 섹션 목록.

        Raises:
            IntakeError: UNKNOWN_QUESTIONNAIRE_TYPE, DEFINITION_INVALID
        """
        if questionnaire_type not in self._sections:
            config = self._type_config(questionnaire_type)
            self._sections[questionnaire_type] = [
                self._parse_section(s) for s in config.get("sections", [])
            ]
        return self._sections[questionnaire_type]

    def get_header(self, questionnaire_type: str, lang: str) -> str:
        """메시지 헤더 (예: "Женская анкета")."""
        header = self._type_config(questionnaire_type).get("header", {})
        return str(header.get(lang) or header.get(self.default_language) or questionnaire_type)

    # =========================================================================
    # Follow-ups / Rendering
    # =========================================================================

    def get_followups(self) -> list[FollowupRule]:
        """후속 입력 필수 규칙."""
        rules = []
        for raw in self.definition.get("followups", []):
            try:
                rules.append(
                    FollowupRule(
                        question=str(raw["question"]),
                        condition=FollowupCondition(raw["when"]),
                        value=str(raw["value"]),
                    )
                )
            except (KeyError, ValueError) as e:
                raise IntakeError(
                    ErrorCodes.DEFINITION_INVALID,
                    error=f"invalid followup rule: {raw!r}",
                ) from e
        return rules

    @property
    def numbering_starts_at(self) -> str | None:
        """번호 매김 시작 질문 ID."""
        return self.definition.get("rendering", {}).get("numbering_starts_at")

    def describe(self, questionnaire_type: str, lang: str) -> dict[str, Any]:
        """
        클라이언트 폼 렌더링용 현지화 스키마.

        Returns:
            {"type", "language", "header", "sections": [...], "followups": [...]}
        """
        lang = self.resolve_language(lang)
        sections = []
        for section in self.get_sections(questionnaire_type):
            questions = []
            for q in section.questions:
                item: dict[str, Any] = {
                    "id": q.id,
                    "type": q.type.value,
                    "required": q.required,
                    "label": q.label.get(lang, q.id),
                }
                if q.options is not None:
                    item["options"] = [
                        {"value": o.value, "label": o.label.get(lang, o.value)}
                        for o in q.options
                    ]
                questions.append(item)
            sections.append({
                "id": section.id,
                "title": section.title.get(lang, section.id),
                "questions": questions,
            })

        return {
            "type": questionnaire_type,
            "language": lang,
            "header": self.get_header(questionnaire_type, lang),
            "sections": sections,
            "followups": [
                {
                    "question": r.question,
                    "when": r.condition.value,
                    "value": r.value,
                    "field": r.additional_key,
                }
                for r in self.get_followups()
            ],
        }

    # =========================================================================
    # Parsing
    # =========================================================================

    def _parse_section(self, raw: dict[str, Any]) -> Section:
        return Section(
            id=str(raw.get("id", "")),
            title=dict(raw.get("title", {})),
            questions=[self._parse_question(q) for q in raw.get("questions", [])],
        )

    def _parse_question(self, raw: dict[str, Any]) -> Question:
        try:
            question_type = QuestionType(raw.get("type", "text"))
        except ValueError as e:
            raise IntakeError(
                ErrorCodes.DEFINITION_INVALID,
                question=raw.get("id"),
                error=f"unknown question type: {raw.get('type')!r}",
            ) from e

        options = None
        if "options" in raw:
            options = [
                Option(value=str(o["value"]), label=dict(o.get("label", {})))
                for o in raw["options"]
            ]

        return Question(
            id=str(raw["id"]),
            type=question_type,
            label=dict(raw.get("label", {})),
            required=bool(raw.get("required", False)),
            options=options,
        )
