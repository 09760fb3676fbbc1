from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def round_half_up(numerator: float | int, denominator: float | int = 1, places: int = 1) -> float:
    """Divide and round half away from zero at ``places`` decimals.

    The quotient is computed with ``Decimal`` so 1/4 gives 0.3 and 1/3 gives 0.3,
    independent of binary float representation.
    """
    if not denominator:
        return 0.0
    quotient = Decimal(str(numerator)) / Decimal(str(denominator))
    step = Decimal(1).scaleb(-places)
    return float(quotient.quantize(step, rounding=ROUND_HALF_UP))


def parse_event_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    raw = str(value or "").strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def format_event_date(value: Any) -> str:
    if not value:
        return ""
    parsed = parse_event_datetime(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%b %d, %Y")


def format_event_datetime(value: Any) -> str:
    if not value:
        return ""
    parsed = parse_event_datetime(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%b %d, %Y %H:%M")


def date_key(value: Any) -> str:
    parsed = parse_event_datetime(value)
    if parsed is None:
        return str(value or "")[:10]
    return parsed.date().isoformat()


def fmt_average(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:.1f}"


def fmt_percent(value: float | None, places: int = 1) -> str:
    if value is None:
        return "—"
    return f"{value:.{places}f}%"
