from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from .errors import ValidationError
from .models import STAT_FIELDS


def coerce_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, float):
        if math.isnan(value):
            return 0
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationError(f"Counts must be whole numbers (got {value}).")
        number = int(value)
    elif isinstance(value, int):
        number = value
    else:
        token = str(value).strip()
        try:
            number = int(token)
        except ValueError:
            return 0
    if number < 0:
        raise ValidationError(f"Counts cannot be negative (got {number}).")
    return number


def zero_stat_line(event_id: str, player_id: str) -> dict[str, Any]:
    line: dict[str, Any] = {"event_id": event_id, "player_id": player_id}
    line.update({field: 0 for field in STAT_FIELDS})
    return line


def initial_stat_lines(
    players: Sequence[Mapping[str, Any]],
    statistics: Iterable[Mapping[str, Any]],
    event_id: str,
) -> dict[str, dict[str, Any]]:
    existing = {row.get("player_id"): row for row in statistics if row.get("event_id") == event_id}
    lines: dict[str, dict[str, Any]] = {}
    for player in players:
        player_id = str(player.get("id"))
        row = existing.get(player_id)
        if row is None:
            lines[player_id] = zero_stat_line(event_id, player_id)
            continue
        line = dict(row)
        for field in STAT_FIELDS:
            line[field] = int(line.get(field) or 0)
        lines[player_id] = line
    return lines


def clean_stat_line(values: Mapping[str, Any]) -> dict[str, int]:
    return {field: coerce_count(values.get(field)) for field in STAT_FIELDS}
