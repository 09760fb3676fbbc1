from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from .formatting import format_event_date, round_half_up
from .models import (
    EVENT_TYPE_GAME,
    STAT_FIELDS,
    UNKNOWN_EVENT,
    UNKNOWN_PLAYER,
    PlayerAverage,
    SeriesRow,
    StatTotals,
    TeamAverage,
)

Row = Mapping[str, Any]


def stat_value(row: Row, field: str) -> int:
    try:
        return int(row.get(field) or 0)
    except (TypeError, ValueError):
        return 0


def _zero_totals() -> dict[str, int]:
    return {field: 0 for field in STAT_FIELDS}


def _accumulate(totals: dict[str, int], row: Row) -> None:
    for field in STAT_FIELDS:
        totals[field] += stat_value(row, field)


def count_games(events: Iterable[Row]) -> int:
    return sum(1 for event in events if str(event.get("type") or EVENT_TYPE_GAME) == EVENT_TYPE_GAME)


def compute_team_averages(
    players: Sequence[Row],
    statistics: Iterable[Row],
    games: Sequence[Row],
) -> TeamAverage:
    """Team per-game averages: summed box scores divided by the number of games.

    The denominator is the game count, not the number of statistic rows, so a
    game with no recorded line counts as a zero. With no games the denominator
    falls back to 1 and is reported as such.
    """
    known_players = {row.get("id") for row in players}
    totals = _zero_totals()
    stat_rows = 0
    for row in statistics:
        if row.get("player_id") not in known_players:
            continue
        _accumulate(totals, row)
        stat_rows += 1

    denominator = max(1, count_games(games))
    return TeamAverage(
        points=round_half_up(totals["points"], denominator),
        rebounds=round_half_up(totals["rebounds"], denominator),
        assists=round_half_up(totals["assists"], denominator),
        steals=round_half_up(totals["steals"], denominator),
        blocks=round_half_up(totals["blocks"], denominator),
        games=denominator,
        stat_rows=stat_rows,
    )


def compute_player_averages(players: Sequence[Row], statistics: Iterable[Row]) -> list[PlayerAverage]:
    accumulators: dict[Any, dict[str, int]] = {}
    games_played: dict[Any, int] = {}
    for player in players:
        accumulators[player.get("id")] = _zero_totals()
        games_played[player.get("id")] = 0

    for row in statistics:
        player_id = row.get("player_id")
        if player_id not in accumulators:
            continue
        _accumulate(accumulators[player_id], row)
        games_played[player_id] += 1

    averages: list[PlayerAverage] = []
    for player in players:
        player_id = player.get("id")
        played = games_played[player_id]
        if played == 0:
            continue
        totals = accumulators[player_id]
        denominator = max(1, played)
        averages.append(
            PlayerAverage(
                player_id=str(player_id),
                name=str(player.get("name") or ""),
                points=round_half_up(totals["points"], denominator),
                rebounds=round_half_up(totals["rebounds"], denominator),
                assists=round_half_up(totals["assists"], denominator),
                steals=round_half_up(totals["steals"], denominator),
                blocks=round_half_up(totals["blocks"], denominator),
                games_played=played,
            )
        )
    return averages


def _series_row(row: Row, event: Row | None, player_name: str) -> SeriesRow:
    return SeriesRow(
        event_id=str(row.get("event_id") or ""),
        event=str(event.get("title") or UNKNOWN_EVENT) if event else UNKNOWN_EVENT,
        date=format_event_date(event.get("date")) if event else "",
        player_id=str(row.get("player_id") or ""),
        player=player_name,
        points=stat_value(row, "points"),
        rebounds=stat_value(row, "rebounds"),
        assists=stat_value(row, "assists"),
        steals=stat_value(row, "steals"),
        blocks=stat_value(row, "blocks"),
    )


def get_player_series(
    player_id: str,
    statistics: Iterable[Row],
    events: Iterable[Row],
    players: Iterable[Row] = (),
) -> list[SeriesRow]:
    """One row per statistic line of the player, in input order (no date sort)."""
    events_by_id = {event.get("id"): event for event in events}
    player = next((p for p in players if p.get("id") == player_id), None)
    player_name = str(player.get("name") or "") if player else ""
    return [
        _series_row(row, events_by_id.get(row.get("event_id")), player_name)
        for row in statistics
        if row.get("player_id") == player_id
    ]


def get_event_series(
    event_id: str,
    statistics: Iterable[Row],
    players: Iterable[Row],
    events: Iterable[Row] = (),
) -> list[SeriesRow]:
    names = {player.get("id"): str(player.get("name") or UNKNOWN_PLAYER) for player in players}
    event = next((e for e in events if e.get("id") == event_id), None)
    return [
        _series_row(row, event, names.get(row.get("player_id"), UNKNOWN_PLAYER))
        for row in statistics
        if row.get("event_id") == event_id
    ]


def compute_totals(rows: Iterable[SeriesRow | Row]) -> StatTotals | None:
    totals = _zero_totals()
    seen = False
    for row in rows:
        seen = True
        for field in STAT_FIELDS:
            if isinstance(row, Mapping):
                totals[field] += stat_value(row, field)
            else:
                totals[field] += int(getattr(row, field) or 0)
    if not seen:
        return None
    return StatTotals(**totals)
