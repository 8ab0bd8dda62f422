"""
test_contacts.py - 연락처 정규화/매칭 테스트

검증 포인트:
1. 선행 @ 1개만 제거, 소문자, 공백 제거
2. 같은 수단끼리만 매칭
3. 빈 값끼리는 일치로 보지 않음
"""

from src.core.contacts import (
    clean_handle,
    has_any_contact,
    is_blank,
    matches_contact,
    normalize_contact,
)
from src.domain.schemas import ContactData

# =============================================================================
# normalize_contact
# =============================================================================

class TestNormalizeContact:
    """normalize_contact 함수 테스트."""

    def test_strips_at_and_lowercases(self):
        assert normalize_contact("@Ivan_Petrov") == "ivan_petrov"

    def test_strips_whitespace(self):
        assert normalize_contact("  Ivan ") == "ivan"

    def test_removes_only_one_leading_at(self):
        """@@ivan → @ivan."""
        assert normalize_contact("@@ivan") == "@ivan"

    def test_none_is_empty(self):
        assert normalize_contact(None) == ""
        assert normalize_contact("") == ""

    def test_phone_kept_as_is(self):
        assert normalize_contact("+7 900 123-45-67") == "+7 900 123-45-67"


class TestCleanHandle:
    """링크용 정리는 대소문자 유지."""

    def test_keeps_case(self):
        assert clean_handle("@Anna_K ") == "Anna_K"

    def test_none(self):
        assert clean_handle(None) == ""


class TestIsBlank:

    def test_blank_values(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")

    def test_non_blank_values(self):
        assert not is_blank("a")
        assert not is_blank(["x"])
        assert not is_blank(0)


# =============================================================================
# has_any_contact
# =============================================================================

class TestHasAnyContact:

    def test_empty(self):
        assert not has_any_contact(ContactData())

    def test_whitespace_only(self):
        assert not has_any_contact(ContactData(telegram="  ", phone=""))

    def test_single_method(self):
        assert has_any_contact(ContactData(instagram="anna.k"))


# =============================================================================
# matches_contact
# =============================================================================

class TestMatchesContact:
    """matches_contact 함수 테스트."""

    def test_same_method_normalized(self):
        """'@Ivan' 조회 → 'ivan' 저장 설문과 일치."""
        stored = ContactData(telegram="ivan")
        assert matches_contact(ContactData(telegram="@Ivan"), stored)

    def test_different_method_not_matched(self):
        """telegram 값이 instagram 값과 같아도 불일치."""
        stored = ContactData(instagram="ivan")
        assert not matches_contact(ContactData(telegram="ivan"), stored)

    def test_any_method_match(self):
        stored = ContactData(telegram="other", phone="+79001234567")
        query = ContactData(telegram="ivan", phone="+79001234567")
        assert matches_contact(query, stored)

    def test_blank_never_matches(self):
        assert not matches_contact(ContactData(telegram=""), ContactData(telegram=""))
        assert not matches_contact(ContactData(), ContactData())
