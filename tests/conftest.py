import sqlite3
from pathlib import Path

import pytest

import stats_config

# Just the tables and columns the queries touch
SCHEMA = """
    CREATE TABLE decks     (id INTEGER PRIMARY KEY, name TEXT NOT NULL);
    CREATE TABLE notetypes (id INTEGER PRIMARY KEY, name TEXT NOT NULL);
    CREATE TABLE notes     (id INTEGER PRIMARY KEY, mid INTEGER NOT NULL, sfld TEXT);
    CREATE TABLE cards (
        id    INTEGER PRIMARY KEY,
        nid   INTEGER NOT NULL,
        did   INTEGER NOT NULL,
        ord   INTEGER NOT NULL,
        type  INTEGER NOT NULL,
        queue INTEGER NOT NULL,
        ivl   INTEGER NOT NULL
    );
    CREATE TABLE revlog (
        id      INTEGER PRIMARY KEY,
        cid     INTEGER NOT NULL,
        ivl     INTEGER NOT NULL,
        lastIvl INTEGER NOT NULL,
        time    INTEGER NOT NULL
    );
"""

DECK_ID = 1001
OTHER_DECK_ID = 1002
MODEL_ID = 2001
OTHER_MODEL_ID = 2002


class CollectionBuilder:
    """Writes a minimal Anki collection for the read-only queries to run against."""

    def __init__(self, path: Path):
        self.path = path
        self.conn = sqlite3.connect(path)
        self.conn.executescript(SCHEMA)
        self.conn.executemany("INSERT INTO decks VALUES (?, ?)", [
            (DECK_ID, "Bible\x1fVerses"),
            (OTHER_DECK_ID, "Japanese"),
        ])
        self.conn.executemany("INSERT INTO notetypes VALUES (?, ?)", [
            (MODEL_ID, "Bible Verse"),
            (OTHER_MODEL_ID, "Basic"),
        ])
        self._next_id = 1

    def add_note(self, sfld, queue=0, ivl=0, did=DECK_ID, mid=MODEL_ID, ords=(0,), card_type=None) -> list[int]:
        """
        Add a note with one card per ord; returns the card ids.
        card_type defaults to the type matching the queue, review for buried and suspended cards.
        """
        if card_type is None:
            card_type = queue if queue >= 0 else 2
        nid = self._next_id
        self._next_id += 1
        self.conn.execute("INSERT INTO notes VALUES (?, ?, ?)", (nid, mid, sfld))
        card_ids = []
        for ord_ in ords:
            cid = self._next_id
            self._next_id += 1
            self.conn.execute(
                "INSERT INTO cards VALUES (?, ?, ?, ?, ?, ?, ?)", (cid, nid, did, ord_, card_type, queue, ivl)
            )
            card_ids.append(cid)
        return card_ids

    def add_review(self, cid, timestamp_ms, time_ms, ivl=1, last_ivl=0):
        self.conn.execute(
            "INSERT INTO revlog VALUES (?, ?, ?, ?, ?)", (timestamp_ms, cid, ivl, last_ivl, time_ms)
        )

    def close(self) -> Path:
        self.conn.commit()
        self.conn.close()
        return self.path


@pytest.fixture
def collection(tmp_path):
    builder = CollectionBuilder(tmp_path / "collection.anki2")
    yield builder
    builder.conn.close()


@pytest.fixture(autouse=True)
def fixed_settings(monkeypatch):
    monkeypatch.setattr(stats_config, "TIMEZONE", "America/Chicago")
    monkeypatch.setattr(stats_config, "ROLLOVER_HOUR", 4)
