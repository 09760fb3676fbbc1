from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Mapping

from courtside_core.errors import StoreReadError, StoreWriteError
from courtside_core.models import STAT_FIELDS
from courtside_core.results import derive_game_result
from courtside_core.stat_entry import clean_stat_line

logger = logging.getLogger(__name__)

DB_FILENAME = "courtside.db"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _date_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class Database:
    def __init__(self, db_path: str | Path | None = None) -> None:
        if db_path is None:
            db_path = Path(__file__).resolve().parent.parent / DB_FILENAME
        self.db_path = Path(db_path)
        # The connection is shared across session threads; every statement runs under this lock.
        self._lock = threading.RLock()
        self._in_transaction = False
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._enable_foreign_keys()
        self.initialize()

    def _enable_foreign_keys(self) -> None:
        self.conn.execute("PRAGMA foreign_keys = ON")

    def initialize(self) -> None:
        with self._lock:
            self.conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    salt TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    username TEXT,
                    avatar_url TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS players (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    position TEXT,
                    jersey_number INTEGER,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS events (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('training', 'game')),
                    date TEXT NOT NULL,
                    location TEXT,
                    opponent TEXT,
                    team_score INTEGER,
                    opponent_score INTEGER,
                    result TEXT CHECK (result IS NULL OR result IN ('win', 'loss', 'draw')),
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS attendance (
                    id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    player_id TEXT NOT NULL,
                    present INTEGER NOT NULL DEFAULT 0,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(event_id) REFERENCES events(id),
                    FOREIGN KEY(player_id) REFERENCES players(id)
                );

                CREATE TABLE IF NOT EXISTS statistics (
                    id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    player_id TEXT NOT NULL,
                    points INTEGER NOT NULL DEFAULT 0 CHECK (points >= 0),
                    rebounds INTEGER NOT NULL DEFAULT 0 CHECK (rebounds >= 0),
                    assists INTEGER NOT NULL DEFAULT 0 CHECK (assists >= 0),
                    steals INTEGER NOT NULL DEFAULT 0 CHECK (steals >= 0),
                    blocks INTEGER NOT NULL DEFAULT 0 CHECK (blocks >= 0),
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(event_id) REFERENCES events(id),
                    FOREIGN KEY(player_id) REFERENCES players(id)
                );
                """
            )
            self._ensure_players_indexes()
            self._ensure_events_indexes()
            self._ensure_attendance_indexes()
            self._ensure_statistics_indexes()
            self.conn.commit()

    def _ensure_players_indexes(self) -> None:
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_players_user_name ON players(user_id, name)")

    def _ensure_events_indexes(self) -> None:
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_events_user_type_date ON events(user_id, type, date)")

    def _ensure_attendance_indexes(self) -> None:
        self.conn.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_attendance_event_player_user "
            "ON attendance(event_id, player_id, user_id)"
        )
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_attendance_player ON attendance(player_id)")

    def _ensure_statistics_indexes(self) -> None:
        self.conn.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_statistics_event_player_user "
            "ON statistics(event_id, player_id, user_id)"
        )
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_statistics_player ON statistics(player_id)")

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        with self._lock:
            try:
                cur = self.conn.execute(query, params)
                if not self._in_transaction:
                    self.conn.commit()
                return cur
            except sqlite3.Error as exc:
                if not self._in_transaction:
                    self.conn.rollback()
                logger.exception("Store write failed")
                raise StoreWriteError(str(exc)) from exc

    def query_all(self, query: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        with self._lock:
            try:
                cur = self.conn.execute(query, params)
                return [dict(row) for row in cur.fetchall()]
            except sqlite3.Error as exc:
                logger.exception("Store read failed")
                raise StoreReadError(str(exc)) from exc

    def query_one(self, query: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        with self._lock:
            try:
                row = self.conn.execute(query, params).fetchone()
            except sqlite3.Error as exc:
                logger.exception("Store read failed")
                raise StoreReadError(str(exc)) from exc
        return dict(row) if row is not None else None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._in_transaction:
                yield self.conn
                return
            try:
                self.conn.execute("BEGIN")
                self._in_transaction = True
                yield self.conn
                self.conn.commit()
            except sqlite3.Error as exc:
                self.conn.rollback()
                logger.exception("Store transaction rolled back")
                raise StoreWriteError(str(exc)) from exc
            except Exception:
                self.conn.rollback()
                raise
            finally:
                self._in_transaction = False

    # users / profiles

    def create_user(self, email: str, password_hash: str, salt: str, username: str | None) -> str:
        user_id = _new_id()
        now = _now()
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO users(id, email, password_hash, salt, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, email, password_hash, salt, now, now),
            )
            conn.execute(
                "INSERT INTO profiles(id, username, avatar_url, created_at, updated_at) VALUES (?, ?, NULL, ?, ?)",
                (user_id, username or None, now, now),
            )
        return user_id

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        return self.query_one("SELECT * FROM users WHERE email = ?", (email,))

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        return self.query_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def update_user_password(self, user_id: str, password_hash: str, salt: str) -> None:
        self.execute(
            "UPDATE users SET password_hash = ?, salt = ?, updated_at = ? WHERE id = ?",
            (password_hash, salt, _now(), user_id),
        )

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        return self.query_one("SELECT id, username, avatar_url, created_at, updated_at FROM profiles WHERE id = ?", (user_id,))

    def update_profile(self, user_id: str, username: str | None = None, avatar_url: str | None = None) -> None:
        self.execute(
            "UPDATE profiles SET username = ?, avatar_url = ?, updated_at = ? WHERE id = ?",
            (username or None, avatar_url or None, _now(), user_id),
        )

    # players

    def list_players(self, user_id: str) -> list[dict[str, Any]]:
        return self.query_all("SELECT * FROM players WHERE user_id = ? ORDER BY name, id", (user_id,))

    def get_player(self, user_id: str, player_id: str) -> dict[str, Any] | None:
        return self.query_one("SELECT * FROM players WHERE id = ? AND user_id = ?", (player_id, user_id))

    def add_player(
        self,
        user_id: str,
        name: str,
        position: str | None = None,
        jersey_number: int | None = None,
    ) -> str:
        player_id = _new_id()
        now = _now()
        self.execute(
            """
            INSERT INTO players(id, name, position, jersey_number, user_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (player_id, name.strip(), position or None, jersey_number, user_id, now, now),
        )
        return player_id

    def update_player(
        self,
        user_id: str,
        player_id: str,
        name: str,
        position: str | None = None,
        jersey_number: int | None = None,
    ) -> bool:
        cur = self.execute(
            """
            UPDATE players
            SET name = ?, position = ?, jersey_number = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (name.strip(), position or None, jersey_number, _now(), player_id, user_id),
        )
        return cur.rowcount > 0

    def delete_player(self, user_id: str, player_id: str) -> bool:
        with self.transaction() as conn:
            conn.execute("DELETE FROM statistics WHERE player_id = ? AND user_id = ?", (player_id, user_id))
            conn.execute("DELETE FROM attendance WHERE player_id = ? AND user_id = ?", (player_id, user_id))
            cur = conn.execute("DELETE FROM players WHERE id = ? AND user_id = ?", (player_id, user_id))
        return cur.rowcount > 0

    # events

    def list_events(
        self,
        user_id: str,
        event_type: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        where_parts = ["user_id = ?"]
        params: list[Any] = [user_id]
        if event_type:
            where_parts.append("type = ?")
            params.append(event_type)
        order = "DESC" if descending else "ASC"
        return self.query_all(
            f"SELECT * FROM events WHERE {' AND '.join(where_parts)} ORDER BY date {order}, id {order}",
            tuple(params),
        )

    def get_event(self, user_id: str, event_id: str) -> dict[str, Any] | None:
        return self.query_one("SELECT * FROM events WHERE id = ? AND user_id = ?", (event_id, user_id))

    def add_event(
        self,
        user_id: str,
        title: str,
        event_type: str,
        date: datetime | str,
        location: str | None = None,
        opponent: str | None = None,
        team_score: int | None = None,
        opponent_score: int | None = None,
    ) -> str:
        event_id = _new_id()
        now = _now()
        self.execute(
            """
            INSERT INTO events(
                id, title, type, date, location, opponent, team_score, opponent_score, result,
                user_id, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event_id,
                title.strip(),
                event_type,
                _date_text(date),
                location or None,
                opponent or None,
                team_score,
                opponent_score,
                derive_game_result(team_score, opponent_score),
                user_id,
                now,
                now,
            ),
        )
        return event_id

    def update_event(
        self,
        user_id: str,
        event_id: str,
        title: str,
        event_type: str,
        date: datetime | str,
        location: str | None = None,
        opponent: str | None = None,
        team_score: int | None = None,
        opponent_score: int | None = None,
    ) -> bool:
        cur = self.execute(
            """
            UPDATE events
            SET title = ?, type = ?, date = ?, location = ?, opponent = ?,
                team_score = ?, opponent_score = ?, result = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                title.strip(),
                event_type,
                _date_text(date),
                location or None,
                opponent or None,
                team_score,
                opponent_score,
                derive_game_result(team_score, opponent_score),
                _now(),
                event_id,
                user_id,
            ),
        )
        return cur.rowcount > 0

    def update_event_scores(
        self,
        user_id: str,
        event_id: str,
        team_score: int | None,
        opponent_score: int | None,
    ) -> bool:
        cur = self.execute(
            """
            UPDATE events
            SET team_score = ?, opponent_score = ?, result = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                team_score,
                opponent_score,
                derive_game_result(team_score, opponent_score),
                _now(),
                event_id,
                user_id,
            ),
        )
        return cur.rowcount > 0

    def delete_event(self, user_id: str, event_id: str) -> bool:
        with self.transaction() as conn:
            conn.execute("DELETE FROM statistics WHERE event_id = ? AND user_id = ?", (event_id, user_id))
            conn.execute("DELETE FROM attendance WHERE event_id = ? AND user_id = ?", (event_id, user_id))
            cur = conn.execute("DELETE FROM events WHERE id = ? AND user_id = ?", (event_id, user_id))
        return cur.rowcount > 0

    # attendance

    def list_attendance(self, user_id: str, event_id: str | None = None) -> list[dict[str, Any]]:
        if event_id:
            return self.query_all(
                "SELECT * FROM attendance WHERE user_id = ? AND event_id = ? ORDER BY created_at, id",
                (user_id, event_id),
            )
        return self.query_all("SELECT * FROM attendance WHERE user_id = ? ORDER BY created_at, id", (user_id,))

    def find_attendance(self, user_id: str, event_id: str, player_id: str) -> dict[str, Any] | None:
        return self.query_one(
            "SELECT * FROM attendance WHERE event_id = ? AND player_id = ? AND user_id = ?",
            (event_id, player_id, user_id),
        )

    def _upsert_attendance(self, conn: sqlite3.Connection, user_id: str, event_id: str, player_id: str, present: bool) -> None:
        now = _now()
        conn.execute(
            """
            INSERT INTO attendance(id, event_id, player_id, present, user_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(event_id, player_id, user_id)
            DO UPDATE SET present = excluded.present, updated_at = excluded.updated_at
            """,
            (_new_id(), event_id, player_id, 1 if present else 0, user_id, now, now),
        )

    def upsert_attendance(self, user_id: str, event_id: str, player_id: str, present: bool) -> None:
        with self.transaction() as conn:
            self._upsert_attendance(conn, user_id, event_id, player_id, present)

    def save_event_attendance(self, user_id: str, event_id: str, attendance: Mapping[str, bool]) -> int:
        with self.transaction() as conn:
            for player_id, present in attendance.items():
                self._upsert_attendance(conn, user_id, event_id, player_id, bool(present))
        logger.info("Saved attendance for %d players on event %s", len(attendance), event_id)
        return len(attendance)

    def delete_attendance_for_player(self, user_id: str, player_id: str) -> int:
        cur = self.execute("DELETE FROM attendance WHERE player_id = ? AND user_id = ?", (player_id, user_id))
        return cur.rowcount

    # statistics

    def list_statistics(
        self,
        user_id: str,
        event_id: str | None = None,
        player_id: str | None = None,
    ) -> list[dict[str, Any]]:
        where_parts = ["user_id = ?"]
        params: list[Any] = [user_id]
        if event_id:
            where_parts.append("event_id = ?")
            params.append(event_id)
        if player_id:
            where_parts.append("player_id = ?")
            params.append(player_id)
        return self.query_all(
            f"SELECT * FROM statistics WHERE {' AND '.join(where_parts)} ORDER BY created_at, id",
            tuple(params),
        )

    def find_statistic(self, user_id: str, event_id: str, player_id: str) -> dict[str, Any] | None:
        return self.query_one(
            "SELECT * FROM statistics WHERE event_id = ? AND player_id = ? AND user_id = ?",
            (event_id, player_id, user_id),
        )

    def _upsert_statistic(
        self,
        conn: sqlite3.Connection,
        user_id: str,
        event_id: str,
        player_id: str,
        stats: Mapping[str, Any],
    ) -> None:
        values = clean_stat_line(stats)
        now = _now()
        columns = ", ".join(STAT_FIELDS)
        placeholders = ", ".join("?" for _ in STAT_FIELDS)
        updates = ", ".join(f"{col} = excluded.{col}" for col in STAT_FIELDS)
        conn.execute(
            f"""
            INSERT INTO statistics(id, event_id, player_id, {columns}, user_id, created_at, updated_at)
            VALUES (?, ?, ?, {placeholders}, ?, ?, ?)
            ON CONFLICT(event_id, player_id, user_id)
            DO UPDATE SET {updates}, updated_at = excluded.updated_at
            """,
            (_new_id(), event_id, player_id, *(values[col] for col in STAT_FIELDS), user_id, now, now),
        )

    def upsert_statistic(self, user_id: str, event_id: str, player_id: str, stats: Mapping[str, Any]) -> None:
        with self.transaction() as conn:
            self._upsert_statistic(conn, user_id, event_id, player_id, stats)

    def save_event_statistics(
        self,
        user_id: str,
        event_id: str,
        lines: Mapping[str, Mapping[str, Any]],
    ) -> int:
        with self.transaction() as conn:
            for player_id, stats in lines.items():
                self._upsert_statistic(conn, user_id, event_id, player_id, stats)
        logger.info("Saved %d stat lines on event %s", len(lines), event_id)
        return len(lines)

    def delete_statistics_for_player(self, user_id: str, player_id: str) -> int:
        cur = self.execute("DELETE FROM statistics WHERE player_id = ? AND user_id = ?", (player_id, user_id))
        return cur.rowcount

    def delete_statistics_for_event(self, user_id: str, event_id: str) -> int:
        cur = self.execute("DELETE FROM statistics WHERE event_id = ? AND user_id = ?", (event_id, user_id))
        return cur.rowcount
