from __future__ import annotations

from typing import Any, Mapping, Sequence

from .attendance import attendance_rate
from .formatting import parse_event_datetime
from .models import DashboardSummary
from .results import DRAW, LOSS, WIN, event_result

Row = Mapping[str, Any]


def _latest_event_date(events: Sequence[Row], event_ids: set[Any]) -> str | None:
    latest: tuple[str, str] | None = None
    for event in events:
        if event.get("id") not in event_ids or not event.get("date"):
            continue
        parsed = parse_event_datetime(event.get("date"))
        stamp = parsed.replace(tzinfo=None).isoformat() if parsed else str(event["date"])
        if latest is None or stamp > latest[0]:
            latest = (stamp, str(event["date"]))
    return latest[1] if latest else None


def build_dashboard_summary(
    players: Sequence[Row],
    games: Sequence[Row],
    attendance: Sequence[Row],
    events: Sequence[Row],
) -> DashboardSummary:
    results = [event_result(game) for game in games]
    attended_event_ids = {record.get("event_id") for record in attendance}
    return DashboardSummary(
        player_count=len(players),
        game_count=len(games),
        victories=results.count(WIN),
        defeats=results.count(LOSS),
        draws=results.count(DRAW),
        attendance_rate=attendance_rate(attendance),
        last_attendance_date=_latest_event_date(events, attended_event_ids),
    )
