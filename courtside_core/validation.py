from __future__ import annotations

import re
from typing import Any

from .models import EVENT_TYPES

MIN_TITLE_LENGTH = 2
MIN_USERNAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
MAX_JERSEY_NUMBER = 99

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _optional_int(value: Any) -> tuple[int | None, bool]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, True
    if isinstance(value, bool):
        return None, False
    if isinstance(value, int):
        return value, True
    try:
        return int(str(value).strip()), True
    except ValueError:
        return None, False


def parse_optional_int(value: Any) -> int | None:
    number, ok = _optional_int(value)
    return number if ok else None


def validate_player_form(name: str | None, jersey_number: Any = None) -> list[str]:
    errors: list[str] = []
    if not str(name or "").strip():
        errors.append("Player name is required.")
    number, ok = _optional_int(jersey_number)
    if not ok:
        errors.append("Jersey number must be a whole number.")
    elif number is not None and not 0 <= number <= MAX_JERSEY_NUMBER:
        errors.append(f"Jersey number must be between 0 and {MAX_JERSEY_NUMBER}.")
    return errors


def _validate_title(title: str | None) -> list[str]:
    if len(str(title or "").strip()) < MIN_TITLE_LENGTH:
        return [f"Title must be at least {MIN_TITLE_LENGTH} characters."]
    return []


def validate_event_form(title: str | None, event_type: str | None, date: Any) -> list[str]:
    errors = _validate_title(title)
    if event_type not in EVENT_TYPES:
        errors.append(f"Event type must be one of: {', '.join(EVENT_TYPES)}.")
    if not date:
        errors.append("Date is required.")
    return errors


def validate_game_form(title: str | None, date: Any, team_score: Any = None, opponent_score: Any = None) -> list[str]:
    errors = _validate_title(title)
    if not date:
        errors.append("Date is required.")
    for label, value in (("Team score", team_score), ("Opponent score", opponent_score)):
        number, ok = _optional_int(value)
        if not ok:
            errors.append(f"{label} must be a whole number.")
        elif number is not None and number < 0:
            errors.append(f"{label} cannot be negative.")
    return errors


def validate_credentials(email: str | None, password: str | None) -> list[str]:
    errors: list[str] = []
    if not _EMAIL_RE.match(str(email or "").strip()):
        errors.append("Enter a valid email address.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return errors


def validate_sign_up(email: str | None, password: str | None, username: str | None) -> list[str]:
    errors = validate_credentials(email, password)
    if len(str(username or "").strip()) < MIN_USERNAME_LENGTH:
        errors.append(f"Username must be at least {MIN_USERNAME_LENGTH} characters.")
    return errors


def validate_password_change(current: str | None, new: str | None, confirm: str | None) -> list[str]:
    errors: list[str] = []
    if not current:
        errors.append("Current password is required.")
    if len(new or "") < MIN_PASSWORD_LENGTH:
        errors.append(f"New password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if (new or "") != (confirm or ""):
        errors.append("Passwords do not match.")
    return errors
