from __future__ import annotations

from dataclasses import dataclass

STAT_FIELDS: tuple[str, ...] = ("points", "rebounds", "assists", "steals", "blocks")
EVENT_TYPES: tuple[str, ...] = ("training", "game")
GAME_RESULTS: tuple[str, ...] = ("win", "loss", "draw")

EVENT_TYPE_TRAINING = "training"
EVENT_TYPE_GAME = "game"

UNKNOWN_EVENT = "Unknown event"
UNKNOWN_PLAYER = "Unknown player"


@dataclass(frozen=True)
class TeamAverage:
    points: float
    rebounds: float
    assists: float
    steals: float
    blocks: float
    # Denominator actually used; 1 when no games exist.
    games: int
    stat_rows: int


@dataclass(frozen=True)
class PlayerAverage:
    player_id: str
    name: str
    points: float
    rebounds: float
    assists: float
    steals: float
    blocks: float
    games_played: int


@dataclass(frozen=True)
class SeriesRow:
    event_id: str
    event: str
    date: str
    player_id: str
    player: str
    points: int
    rebounds: int
    assists: int
    steals: int
    blocks: int


@dataclass(frozen=True)
class StatTotals:
    points: int
    rebounds: int
    assists: int
    steals: int
    blocks: int


@dataclass(frozen=True)
class AttendanceView:
    id: str
    event_id: str
    event_title: str
    event_date: str
    player_id: str
    player_name: str
    present: bool


@dataclass(frozen=True)
class DashboardSummary:
    player_count: int
    game_count: int
    victories: int
    defeats: int
    draws: int
    attendance_rate: float
    last_attendance_date: str | None
