from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping

from .errors import ValidationError
from .formatting import date_key, parse_event_datetime

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def _sort_stamp(event: Mapping[str, Any]) -> str:
    parsed = parse_event_datetime(event.get("date"))
    if parsed is None:
        return str(event.get("date") or "")
    return parsed.replace(tzinfo=None).isoformat()


def group_events_by_day(events: Iterable[Mapping[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for event in events:
        grouped.setdefault(date_key(event.get("date")), []).append(dict(event))
    return {key: sorted(grouped[key], key=_sort_stamp) for key in sorted(grouped)}


def events_on(events: Iterable[Mapping[str, Any]], day: date | str) -> list[dict[str, Any]]:
    key = day.isoformat() if isinstance(day, date) else str(day)[:10]
    return group_events_by_day(events).get(key, [])


def combine_date_time(day: date, time_text: str | None) -> datetime:
    raw = (time_text or "").strip()
    if not raw:
        return datetime.combine(day, time())
    m = _TIME_RE.match(raw)
    if not m:
        raise ValidationError(f"Invalid time '{raw}'. Use HH:MM.")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time '{raw}'. Use HH:MM.")
    return datetime.combine(day, time(hours, minutes))
