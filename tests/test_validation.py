from __future__ import annotations

from datetime import date

from courtside_core.validation import (
    parse_optional_int,
    validate_credentials,
    validate_event_form,
    validate_game_form,
    validate_password_change,
    validate_player_form,
    validate_sign_up,
)


def test_parse_optional_int():
    assert parse_optional_int("") is None
    assert parse_optional_int(None) is None
    assert parse_optional_int(" 23 ") == 23
    assert parse_optional_int("x") is None


def test_player_form():
    assert validate_player_form("Alice", "23") == []
    assert validate_player_form("Alice", "") == []
    assert validate_player_form("  ", None) == ["Player name is required."]
    assert validate_player_form("Alice", "abc") == ["Jersey number must be a whole number."]
    assert validate_player_form("Alice", 120) == ["Jersey number must be between 0 and 99."]


def test_event_form():
    assert validate_event_form("Practice", "training", date(2024, 3, 1)) == []
    errors = validate_event_form("P", "scrimmage", None)
    assert errors == [
        "Title must be at least 2 characters.",
        "Event type must be one of: training, game.",
        "Date is required.",
    ]


def test_game_form():
    assert validate_game_form("Final", date(2024, 3, 1), "70", "") == []
    assert validate_game_form("Final", date(2024, 3, 1), "-2", "x") == [
        "Team score cannot be negative.",
        "Opponent score must be a whole number.",
    ]


def test_credentials():
    assert validate_credentials("coach@example.com", "secret1") == []
    assert validate_credentials("coach", "123") == [
        "Enter a valid email address.",
        "Password must be at least 6 characters.",
    ]


def test_sign_up_requires_username():
    assert validate_sign_up("coach@example.com", "secret1", "C") == ["Username must be at least 2 characters."]


def test_password_change():
    assert validate_password_change("old-secret", "new-secret", "new-secret") == []
    assert validate_password_change("", "short", "other") == [
        "Current password is required.",
        "New password must be at least 6 characters.",
        "Passwords do not match.",
    ]
