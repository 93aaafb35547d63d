"""Tests for status and error code lookup tables."""

from sms_pilot.codes import (
    AVAILABLE_LOCALES,
    blocked_reason,
    is_blocked_sender_code,
    status_info,
)


def test_default_locale_is_first() -> None:
    assert AVAILABLE_LOCALES[0] == "ru"


def test_final_statuses() -> None:
    finals = {code for code in range(-2, 4) if status_info(code).final}
    assert finals == {-2, -1, 2}


def test_status_info_localized() -> None:
    assert status_info(1, "ru").name == "В очереди"
    assert status_info(1, "en").name == "Queued"


def test_unknown_status_is_none() -> None:
    assert status_info(42) is None
    assert status_info(None) is None


def test_blocked_sender_codes() -> None:
    for code in (105, 106, 107, 122):
        assert is_blocked_sender_code(code)
    assert not is_blocked_sender_code(101)
    assert not is_blocked_sender_code(None)


def test_blocked_reason() -> None:
    assert blocked_reason(105, "en") == "low balance"
    assert blocked_reason(122, "ru") == "спорная ситуация"
    assert blocked_reason(101, "en") is None
