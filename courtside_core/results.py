from __future__ import annotations

from typing import Any, Mapping

WIN = "win"
LOSS = "loss"
DRAW = "draw"


def derive_game_result(team_score: int | None, opponent_score: int | None) -> str | None:
    if team_score is None or opponent_score is None:
        return None
    if team_score > opponent_score:
        return WIN
    if team_score < opponent_score:
        return LOSS
    return DRAW


def event_result(event: Mapping[str, Any]) -> str | None:
    # Derived from the current scores so an edited score never leaves a stale result.
    return derive_game_result(event.get("team_score"), event.get("opponent_score"))


def format_scoreline(event: Mapping[str, Any]) -> str:
    team_score = event.get("team_score")
    opponent_score = event.get("opponent_score")
    if team_score is None or opponent_score is None:
        return "—"
    return f"{team_score} - {opponent_score}"
