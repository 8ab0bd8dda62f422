"""
Message Renderer: 답변 → Telegram HTML 메시지.

형식 (parse_mode=HTML):
    <b>헤더</b>
    <b>섹션 제목</b>
    <b>질문</b>            ← numbering_starts_at 이전
    답변 <i>(추가 설명)</i>
    1. <b>질문</b>         ← numbering_starts_at 부터 번호
    답변
    <b>연락처</b>
    Telegram: @handle
    <a href="https://t.me/handle">https://t.me/handle</a>

규칙:
- 답변 없는 섹션은 생략
- 사용자/정의 텍스트는 모두 HTML escape
"""

import html
from typing import Any

from src.app.services.definitions import DefinitionService
from src.app.services.validate import is_answered
from src.core.contacts import clean_handle, is_blank
from src.domain.constants import (
    ADDITIONAL_SUFFIX,
    INSTAGRAM_LINK_BASE,
    PHONE_LINK_PREFIX,
    TELEGRAM_LINK_BASE,
)
from src.domain.schemas import AdditionalData, ContactData, FormData, Question


def escape_html(text: Any) -> str:
    """HTML escape (& < > " ')."""
    return html.escape(str(text), quote=True).replace("&#x27;", "&#39;")


def format_answer(question: Question, value: Any, lang: str) -> str:
    """
    답변 텍스트 (escape 전).

    - 목록: 선택지 라벨을 ", "로 연결
    - 선택지 있는 단일 값: 라벨
    - 그 외: 원문
    """
    if isinstance(value, list):
        return ", ".join(question.option_label(str(v), lang) for v in value)
    if question.options:
        return question.option_label(str(value), lang)
    return str(value)


def render_contacts(contact: ContactData, phone_label: str) -> list[str]:
    """연락처 블록 라인 (telegram → instagram → phone 순)."""
    lines: list[str] = []

    if not is_blank(contact.telegram):
        handle = clean_handle(contact.telegram)
        link = f"{TELEGRAM_LINK_BASE}{handle}"
        lines.append(
            f"Telegram: @{escape_html(handle)}\n"
            f'<a href="{escape_html(link)}">{escape_html(link)}</a>'
        )

    if not is_blank(contact.instagram):
        handle = clean_handle(contact.instagram)
        link = f"{INSTAGRAM_LINK_BASE}{handle}"
        lines.append(
            f"Instagram: @{escape_html(handle)}\n"
            f'<a href="{escape_html(link)}">{escape_html(link)}</a>'
        )

    if not is_blank(contact.phone):
        phone = contact.phone.strip()
        lines.append(
            f"{escape_html(phone_label)}: "
            f'<a href="{escape_html(PHONE_LINK_PREFIX + phone)}">{escape_html(phone)}</a>'
        )

    return lines


class MessageRenderer:
    """
    설문 → 메시지 렌더러.

    Usage:
        renderer = MessageRenderer(definitions)
        text = renderer.render("child", form_data, additional, contact, "ru")
    """

    def __init__(self, definitions: DefinitionService):
        self.definitions = definitions

    def render(
        self,
        questionnaire_type: str,
        form_data: FormData,
        additional_data: AdditionalData | None,
        contact_data: ContactData,
        lang: str,
    ) -> str:
        lang = self.definitions.resolve_language(lang)
        additional_data = additional_data or {}
        numbering_from = self.definitions.numbering_starts_at

        out = f"<b>{escape_html(self.definitions.get_header(questionnaire_type, lang))}</b>\n"

        number = 1
        numbering = False

        for section in self.definitions.get_sections(questionnaire_type):
            answered = [
                q for q in section.questions if is_answered(form_data.get(q.id))
            ]
            if not answered:
                continue

            out += f"<b>{escape_html(section.title.get(lang, section.id))}</b>\n"

            for question in answered:
                value = form_data[question.id]
                label = question.label.get(lang, question.id)

                if question.id == numbering_from:
                    numbering = True
                    number = 1

                if numbering:
                    out += f"{number}. <b>{escape_html(label)}</b>\n"
                    number += 1
                else:
                    out += f"<b>{escape_html(label)}</b>\n"

                out += escape_html(format_answer(question, value, lang))

                additional = additional_data.get(f"{question.id}{ADDITIONAL_SUFFIX}")
                if not is_blank(additional):
                    out += f" <i>({escape_html(additional.strip())})</i>"

                out += "\n"

        contacts = render_contacts(contact_data, self.definitions.get_message("phone", lang))
        if contacts:
            out += f"<b>{escape_html(self.definitions.get_message('contacts', lang))}</b>\n"
            for line in contacts:
                out += f"{line}\n"

        return out
