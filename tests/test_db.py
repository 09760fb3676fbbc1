from __future__ import annotations

import threading
import time
from datetime import datetime

import pytest

from courtside_core.errors import StoreError, StoreReadError, StoreWriteError, ValidationError
from courtside_store.db import Database


def _game(db, owner, title="Opener", team=None, opponent=None, when="2024-03-01T18:00:00"):
    return db.add_event(owner, title, "game", when, opponent="Rivals", team_score=team, opponent_score=opponent)


def test_initialize_is_idempotent(db):
    db.initialize()
    db.initialize()

    names = {row["name"] for row in db.query_all("SELECT name FROM sqlite_master WHERE type = 'index'")}
    assert "uq_statistics_event_player_user" in names
    assert "uq_attendance_event_player_user" in names


def test_create_user_creates_profile(db, coach):
    assert db.get_user(coach)["email"] == "coach@example.com"
    assert db.get_profile(coach)["username"] == "Coach"

    db.update_profile(coach, username="Coach K", avatar_url="https://example.com/k.png")
    profile = db.get_profile(coach)
    assert profile["username"] == "Coach K"
    assert profile["avatar_url"] == "https://example.com/k.png"


def test_players_are_listed_by_name(db, coach):
    db.add_player(coach, "Zoe", position="Center", jersey_number=12)
    alice = db.add_player(coach, "  Alice ")

    listed = db.list_players(coach)

    assert [p["name"] for p in listed] == ["Alice", "Zoe"]
    assert db.get_player(coach, alice)["jersey_number"] is None

    assert db.update_player(coach, alice, "Alicia", position="Point Guard", jersey_number=4)
    updated = db.get_player(coach, alice)
    assert (updated["name"], updated["position"], updated["jersey_number"]) == ("Alicia", "Point Guard", 4)


def test_records_are_scoped_to_owner(db, coach):
    other = db.create_user("other@example.com", "hash", "00", "Other")
    player = db.add_player(coach, "Alice")
    event = _game(db, coach)

    assert db.list_players(other) == []
    assert db.list_events(other) == []
    assert db.get_player(other, player) is None
    assert db.update_player(other, player, "Hijacked") is False
    assert db.delete_event(other, event) is False
    assert db.get_player(coach, player)["name"] == "Alice"


def test_events_filter_and_order(db, coach):
    late = db.add_event(coach, "Late game", "game", "2024-03-20T18:00:00")
    practice = db.add_event(coach, "Practice", "training", datetime(2024, 3, 10, 17, 30))
    early = db.add_event(coach, "Early game", "game", "2024-03-01T18:00:00")

    assert [e["id"] for e in db.list_events(coach)] == [early, practice, late]
    assert [e["id"] for e in db.list_events(coach, event_type="game")] == [early, late]
    assert [e["id"] for e in db.list_events(coach, event_type="game", descending=True)] == [late, early]
    assert db.get_event(coach, practice)["date"] == "2024-03-10T17:30:00"


def test_event_type_is_checked(db, coach):
    with pytest.raises(StoreWriteError):
        db.add_event(coach, "Scrimmage", "scrimmage", "2024-03-01T18:00:00")


def test_result_is_derived_on_every_score_write(db, coach):
    event = _game(db, coach, team=70, opponent=60)
    assert db.get_event(coach, event)["result"] == "win"

    db.update_event_scores(coach, event, 55, 60)
    assert db.get_event(coach, event)["result"] == "loss"

    db.update_event(coach, event, "Opener", "game", "2024-03-01T18:00:00", team_score=60, opponent_score=60)
    assert db.get_event(coach, event)["result"] == "draw"

    db.update_event(coach, event, "Opener", "game", "2024-03-01T18:00:00", team_score=60)
    assert db.get_event(coach, event)["result"] is None


def test_statistic_upsert_keeps_one_row(db, coach):
    player = db.add_player(coach, "Alice")
    event = _game(db, coach)

    db.upsert_statistic(coach, event, player, {"points": 10, "rebounds": 2})
    db.upsert_statistic(coach, event, player, {"points": 14, "rebounds": "3"})

    rows = db.list_statistics(coach, event_id=event)
    assert len(rows) == 1
    assert (rows[0]["points"], rows[0]["rebounds"], rows[0]["assists"]) == (14, 3, 0)
    assert db.find_statistic(coach, event, player)["points"] == 14


def test_unique_index_rejects_duplicate_insert(db, coach):
    player = db.add_player(coach, "Alice")
    event = _game(db, coach)
    insert = (
        "INSERT INTO statistics(id, event_id, player_id, user_id, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, 'now', 'now')"
    )
    db.execute(insert, ("s1", event, player, coach))

    with pytest.raises(StoreWriteError):
        db.execute(insert, ("s2", event, player, coach))


def test_save_event_statistics_is_atomic(db, coach):
    alice = db.add_player(coach, "Alice")
    bob = db.add_player(coach, "Bob")
    event = _game(db, coach)

    saved = db.save_event_statistics(coach, event, {alice: {"points": 8}, bob: {"points": 6, "blocks": 2}})
    assert saved == 2

    with pytest.raises(ValidationError):
        db.save_event_statistics(coach, event, {alice: {"points": 20}, bob: {"points": -1}})

    by_player = {row["player_id"]: row for row in db.list_statistics(coach, event_id=event)}
    assert by_player[alice]["points"] == 8
    assert by_player[bob]["blocks"] == 2


def test_statistics_filters(db, coach):
    alice = db.add_player(coach, "Alice")
    bob = db.add_player(coach, "Bob")
    first = _game(db, coach, title="First")
    second = _game(db, coach, title="Second")
    db.upsert_statistic(coach, first, alice, {"points": 1})
    db.upsert_statistic(coach, second, alice, {"points": 2})
    db.upsert_statistic(coach, first, bob, {"points": 3})

    assert len(db.list_statistics(coach)) == 3
    assert [r["points"] for r in db.list_statistics(coach, player_id=alice)] == [1, 2]
    assert len(db.list_statistics(coach, event_id=first)) == 2
    assert len(db.list_statistics(coach, event_id=first, player_id=bob)) == 1


def test_statistics_require_existing_event(db, coach):
    player = db.add_player(coach, "Alice")

    with pytest.raises(StoreWriteError):
        db.upsert_statistic(coach, "missing", player, {"points": 1})


def test_attendance_upsert_and_bulk_save(db, coach):
    alice = db.add_player(coach, "Alice")
    bob = db.add_player(coach, "Bob")
    event = db.add_event(coach, "Practice", "training", "2024-03-05T18:00:00")

    db.upsert_attendance(coach, event, alice, True)
    assert db.save_event_attendance(coach, event, {alice: False, bob: True}) == 2

    records = {row["player_id"]: row["present"] for row in db.list_attendance(coach, event_id=event)}
    assert records == {alice: 0, bob: 1}
    assert db.find_attendance(coach, event, bob)["present"] == 1


def test_delete_player_cascades(db, coach):
    alice = db.add_player(coach, "Alice")
    bob = db.add_player(coach, "Bob")
    event = _game(db, coach)
    db.save_event_statistics(coach, event, {alice: {"points": 5}, bob: {"points": 7}})
    db.save_event_attendance(coach, event, {alice: True, bob: True})

    assert db.delete_player(coach, alice) is True

    assert [p["id"] for p in db.list_players(coach)] == [bob]
    assert [r["player_id"] for r in db.list_statistics(coach)] == [bob]
    assert [r["player_id"] for r in db.list_attendance(coach)] == [bob]


def test_delete_event_cascades(db, coach):
    alice = db.add_player(coach, "Alice")
    keep = _game(db, coach, title="Keep")
    drop = _game(db, coach, title="Drop")
    db.upsert_statistic(coach, keep, alice, {"points": 5})
    db.upsert_statistic(coach, drop, alice, {"points": 9})
    db.upsert_attendance(coach, drop, alice, True)

    assert db.delete_event(coach, drop) is True

    assert [e["id"] for e in db.list_events(coach)] == [keep]
    assert [r["event_id"] for r in db.list_statistics(coach)] == [keep]
    assert db.list_attendance(coach) == []


def test_single_cascade_helpers(db, coach):
    alice = db.add_player(coach, "Alice")
    event = _game(db, coach)
    db.upsert_statistic(coach, event, alice, {"points": 5})
    db.upsert_attendance(coach, event, alice, True)

    assert db.delete_attendance_for_player(coach, alice) == 1
    assert db.delete_statistics_for_event(coach, event) == 1
    db.upsert_statistic(coach, event, alice, {"points": 5})
    assert db.delete_statistics_for_player(coach, alice) == 1


def test_read_failures_raise_store_read_error(db):
    with pytest.raises(StoreReadError):
        db.query_all("SELECT * FROM missing_table")
    with pytest.raises(StoreReadError):
        db.query_one("SELECT * FROM missing_table")


def test_reads_on_closed_store_raise_store_read_error(tmp_path):
    store = Database(tmp_path / "closed.db")
    store.close()

    with pytest.raises(StoreReadError):
        store.list_players("anyone")
    with pytest.raises(StoreReadError):
        store.get_event("anyone", "missing")


def test_failed_player_delete_rolls_back_cascade(db, coach):
    alice = db.add_player(coach, "Alice")
    event = _game(db, coach)
    db.upsert_statistic(coach, event, alice, {"points": 5})
    db.upsert_attendance(coach, event, alice, True)
    db.execute(
        "CREATE TRIGGER block_player_delete BEFORE DELETE ON players "
        "BEGIN SELECT RAISE(ABORT, 'player is locked'); END"
    )

    with pytest.raises(StoreWriteError):
        db.delete_player(coach, alice)

    assert db.get_player(coach, alice)["name"] == "Alice"
    assert [r["points"] for r in db.list_statistics(coach)] == [5]
    assert [r["present"] for r in db.list_attendance(coach)] == [1]


def test_execute_inside_transaction_joins_it(db, coach):
    with pytest.raises(RuntimeError):
        with db.transaction():
            db.add_player(coach, "Alice")
            raise RuntimeError("abort")

    assert db.list_players(coach) == []


def test_other_thread_cannot_commit_an_open_transaction(db, coach):
    alice = db.add_player(coach, "Alice")
    event = _game(db, coach)
    db.upsert_statistic(coach, event, alice, {"points": 5})
    inside = threading.Event()
    errors = []

    def other_session():
        inside.wait(timeout=5)
        try:
            db.update_player(coach, alice, "Alicia")
            db.upsert_attendance(coach, event, alice, True)
        except StoreError as exc:
            errors.append(exc)

    worker = threading.Thread(target=other_session)
    worker.start()
    with pytest.raises(RuntimeError):
        with db.transaction() as conn:
            conn.execute("DELETE FROM statistics WHERE player_id = ?", (alice,))
            inside.set()
            time.sleep(0.2)
            raise RuntimeError("abort")
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert errors == []
    assert [r["points"] for r in db.list_statistics(coach)] == [5]
    assert db.get_player(coach, alice)["name"] == "Alicia"
    assert db.find_attendance(coach, event, alice)["present"] == 1
