from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from .formatting import round_half_up
from .models import UNKNOWN_EVENT, UNKNOWN_PLAYER, AttendanceView

Row = Mapping[str, Any]


def initial_attendance(players: Sequence[Row], records: Iterable[Row]) -> dict[str, bool]:
    attendance = {str(player.get("id")): False for player in players}
    for record in records:
        player_id = str(record.get("player_id"))
        if player_id in attendance:
            attendance[player_id] = bool(record.get("present"))
    return attendance


def attendance_history(
    records: Iterable[Row],
    players: Iterable[Row],
    events: Iterable[Row],
) -> list[AttendanceView]:
    names = {player.get("id"): str(player.get("name") or UNKNOWN_PLAYER) for player in players}
    events_by_id = {event.get("id"): event for event in events}
    history: list[AttendanceView] = []
    for record in records:
        event = events_by_id.get(record.get("event_id"))
        history.append(
            AttendanceView(
                id=str(record.get("id") or ""),
                event_id=str(record.get("event_id") or ""),
                event_title=str(event.get("title") or UNKNOWN_EVENT) if event else UNKNOWN_EVENT,
                event_date=str(event.get("date") or "") if event else "",
                player_id=str(record.get("player_id") or ""),
                player_name=names.get(record.get("player_id"), UNKNOWN_PLAYER),
                present=bool(record.get("present")),
            )
        )
    return history


def attendance_rate(records: Sequence[Row]) -> float:
    if not records:
        return 0.0
    present = sum(1 for record in records if record.get("present"))
    return round_half_up(present * 100, len(records))
