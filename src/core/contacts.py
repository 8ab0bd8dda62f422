"""
연락처 정규화 및 매칭.

규칙:
- 정규화: 선행 @ 1개 제거 → strip → 소문자
- 매칭: 같은 수단끼리만 비교 (telegram ↔ telegram)
- 양쪽 모두 비어 있지 않을 때만 일치로 판단
"""

from typing import Any

from src.domain.schemas import ContactData, ContactMethod


def normalize_contact(value: str | None) -> str:
    """
    검색용 정규화.

    Examples:
        "@Ivan_Petrov " → "ivan_petrov"
        None → ""
    """
    if not value:
        return ""
    if value.startswith("@"):
        value = value[1:]
    return value.strip().lower()


def clean_handle(value: str | None) -> str:
    """
    링크/표시용 정리: 선행 @ 제거 + strip (대소문자 유지).
    """
    if not value:
        return ""
    if value.startswith("@"):
        value = value[1:]
    return value.strip()


def is_blank(value: Any) -> bool:
    """None, 빈 문자열, 공백 문자열."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def has_any_contact(contact: ContactData) -> bool:
    """telegram/instagram/phone 중 하나라도 입력됨."""
    return any(not is_blank(contact.get(method)) for method in ContactMethod)


def matches_contact(query: ContactData, contact: ContactData) -> bool:
    """
    조회 조건과 저장된 연락처 비교.

    Args:
        query: 사용자가 입력한 조회 조건
        contact: 저장된 설문의 연락처

    Returns:
        한 수단이라도 정규화 값이 일치하면 True
    """
    for method in ContactMethod:
        wanted = normalize_contact(query.get(method))
        stored = normalize_contact(contact.get(method))
        if wanted and stored and wanted == stored:
            return True
    return False
