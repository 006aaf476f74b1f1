"""Tests for case lifecycle rules."""

from app.constants.helpdesk import CasePriority
from app.core.case_rules import find_resolution_keyword, priority_from_urgency


def test_resolution_keywords_match():
    assert find_resolution_keyword("Готово, проверьте пожалуйста") == "Готово"
    assert find_resolution_keyword("The bug is fixed now") == "fixed"
    assert find_resolution_keyword("Muammo hal qilindi") == "hal qilindi"


def test_promise_is_not_resolution():
    assert find_resolution_keyword("Завтра будет готово") is None
    assert find_resolution_keyword("Ertaga tayyor bo'ladi") is None


def test_no_keyword():
    assert find_resolution_keyword("Смотрим") is None
    assert find_resolution_keyword(None) is None


def test_priority_from_urgency():
    assert priority_from_urgency(5) == CasePriority.URGENT
    assert priority_from_urgency(4) == CasePriority.URGENT
    assert priority_from_urgency(3) == CasePriority.HIGH
    assert priority_from_urgency(2) == CasePriority.MEDIUM
    assert priority_from_urgency(None) == CasePriority.MEDIUM
