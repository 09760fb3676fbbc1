from __future__ import annotations

import pytest

from courtside_store.auth import SessionProvider
from courtside_store.db import Database


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "courtside_test.db")
    yield database
    database.close()


@pytest.fixture
def coach(db):
    return db.create_user("coach@example.com", "hash", "00", "Coach")


@pytest.fixture
def auth(db):
    return SessionProvider(db, {})


@pytest.fixture
def players():
    return [
        {"id": "p1", "name": "Alice"},
        {"id": "p2", "name": "Bob"},
        {"id": "p3", "name": "Chloe"},
    ]


@pytest.fixture
def games():
    return [
        {"id": "g1", "title": "Home opener", "type": "game", "date": "2024-03-01T18:00:00"},
        {"id": "g2", "title": "Away game", "type": "game", "date": "2024-03-08T19:30:00Z"},
    ]
