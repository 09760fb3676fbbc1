from __future__ import annotations

from courtside_core.aggregates import (
    compute_player_averages,
    compute_team_averages,
    compute_totals,
    count_games,
    get_event_series,
    get_player_series,
    stat_value,
)
from courtside_core.models import UNKNOWN_EVENT, UNKNOWN_PLAYER, StatTotals


def _stat(event_id, player_id, points=0, rebounds=0, assists=0, steals=0, blocks=0):
    return {
        "event_id": event_id,
        "player_id": player_id,
        "points": points,
        "rebounds": rebounds,
        "assists": assists,
        "steals": steals,
        "blocks": blocks,
    }


def _season():
    players = [{"id": "p1", "name": "A"}, {"id": "p2", "name": "B"}]
    statistics = [
        _stat("e1", "p1", points=10, rebounds=5, assists=2, steals=1, blocks=0),
        _stat("e2", "p1", points=20, rebounds=3, assists=4, steals=0, blocks=1),
    ]
    games = [
        {"id": "e1", "title": "Opener", "type": "game", "date": "2024-01-05T18:00:00"},
        {"id": "e2", "title": "Rematch", "type": "game", "date": "2024-01-12T18:00:00"},
    ]
    return players, statistics, games


def test_player_averages_for_two_game_season():
    players, statistics, _ = _season()

    averages = compute_player_averages(players, statistics)

    assert len(averages) == 1
    alice = averages[0]
    assert alice.player_id == "p1"
    assert alice.name == "A"
    assert (alice.points, alice.rebounds, alice.assists) == (15.0, 4.0, 3.0)
    assert (alice.steals, alice.blocks) == (0.5, 0.5)
    assert alice.games_played == 2


def test_team_averages_divide_by_game_count():
    players, statistics, games = _season()

    team = compute_team_averages(players, statistics, games)

    assert team.points == 15.0
    assert team.rebounds == 4.0
    assert team.assists == 3.0
    assert team.steals == 0.5
    assert team.blocks == 0.5
    assert team.games == 2
    assert team.stat_rows == 2


def test_team_average_counts_games_without_stat_lines():
    players, statistics, games = _season()
    games.append({"id": "e3", "title": "No box score", "type": "game", "date": "2024-01-19T18:00:00"})

    team = compute_team_averages(players, statistics, games)

    assert team.points == 10.0
    assert team.games == 3


def test_team_average_rounds_to_one_decimal():
    players = [{"id": "p1", "name": "A"}]
    statistics = [_stat("e1", "p1", points=1)]
    games = [{"id": f"e{i}", "type": "game"} for i in range(1, 4)]

    team = compute_team_averages(players, statistics, games)

    assert team.points == 0.3


def test_half_values_round_up():
    players = [{"id": "p1", "name": "A"}]
    statistics = [_stat("e1", "p1", points=1)]
    games = [{"id": f"e{i}", "type": "game"} for i in range(1, 5)]

    assert compute_team_averages(players, statistics, games).points == 0.3
    statistics = [_stat("e1", "p1", points=3)]
    assert compute_team_averages(players, statistics, games).points == 0.8


def test_team_averages_with_no_games_use_guard_denominator():
    team = compute_team_averages([{"id": "p1", "name": "A"}], [], [])

    assert (team.points, team.rebounds, team.assists, team.steals, team.blocks) == (0.0, 0.0, 0.0, 0.0, 0.0)
    assert team.games == 1
    assert team.stat_rows == 0


def test_training_sessions_do_not_count_as_games():
    players, statistics, games = _season()
    games.append({"id": "t1", "title": "Practice", "type": "training", "date": "2024-01-10T18:00:00"})

    assert count_games(games) == 2
    assert compute_team_averages(players, statistics, games).games == 2


def test_team_averages_skip_lines_of_unknown_players():
    players, statistics, games = _season()
    statistics.append(_stat("e1", "ghost", points=100))

    team = compute_team_averages(players, statistics, games)

    assert team.points == 15.0
    assert team.stat_rows == 2


def test_players_without_lines_are_excluded_and_order_is_kept():
    players = [{"id": "p2", "name": "Zed"}, {"id": "p1", "name": "Amy"}, {"id": "p3", "name": "Idle"}]
    statistics = [_stat("e1", "p1", points=4), _stat("e1", "p2", points=9)]

    averages = compute_player_averages(players, statistics)

    assert [avg.player_id for avg in averages] == ["p2", "p1"]


def test_player_average_rounding_per_field():
    players = [{"id": "p1", "name": "A"}]
    statistics = [_stat("e1", "p1", points=1, rebounds=2), _stat("e2", "p1"), _stat("e3", "p1")]

    (avg,) = compute_player_averages(players, statistics)

    assert avg.points == 0.3
    assert avg.rebounds == 0.7
    assert avg.games_played == 3


def test_aggregations_are_idempotent():
    players, statistics, games = _season()

    assert compute_team_averages(players, statistics, games) == compute_team_averages(players, statistics, games)
    assert compute_player_averages(players, statistics) == compute_player_averages(players, statistics)
    assert get_player_series("p1", statistics, games) == get_player_series("p1", statistics, games)


def test_player_series_keeps_statistics_order():
    players, statistics, games = _season()

    rows = get_player_series("p1", list(reversed(statistics)), games, players)

    assert [row.event for row in rows] == ["Rematch", "Opener"]
    assert rows[0].date == "Jan 12, 2024"
    assert rows[0].points == 20
    assert rows[0].player == "A"


def test_player_series_uses_sentinel_for_missing_event():
    statistics = [_stat("gone", "p1", points=7)]

    (row,) = get_player_series("p1", statistics, [])

    assert row.event == UNKNOWN_EVENT
    assert row.date == ""
    assert row.points == 7


def test_player_series_for_player_without_lines_is_empty():
    _, statistics, games = _season()

    assert get_player_series("p2", statistics, games) == []


def test_event_series_labels_unknown_players():
    players, statistics, games = _season()
    statistics.append(_stat("e1", "ghost", points=3))

    rows = get_event_series("e1", statistics, players, games)

    assert [row.player for row in rows] == ["A", UNKNOWN_PLAYER]
    assert all(row.event == "Opener" for row in rows)


def test_totals_sum_series_rows():
    players, statistics, games = _season()
    rows = get_player_series("p1", statistics, games, players)

    assert compute_totals(rows) == StatTotals(points=30, rebounds=8, assists=6, steals=1, blocks=1)
    assert compute_totals(statistics) == StatTotals(points=30, rebounds=8, assists=6, steals=1, blocks=1)
    assert compute_totals([]) is None


def test_stat_value_treats_missing_and_bad_values_as_zero():
    assert stat_value({"points": None}, "points") == 0
    assert stat_value({}, "points") == 0
    assert stat_value({"points": "x"}, "points") == 0
    assert stat_value({"points": "12"}, "points") == 12
