"""
Pytest configuration and shared fixtures for sqleary tests.
"""

import pytest

from sqleary import SQLiteTransport, Transport


class RecordingTransport(Transport):
    """
    Transport stub that records every SQL string it is sent.

    Page queries return `rows`; COUNT queries return `count_rows`.
    Set `fail_with` to make the next send raise.
    """

    MODE = "recording"

    def __init__(self, rows=None, count_rows=None):
        self.rows = rows if rows is not None else []
        self.count_rows = count_rows if count_rows is not None else [{"numItems": len(self.rows)}]
        self.sent = []
        self.fail_with = None
        self.closed = False

    @classmethod
    def from_settings(cls, settings):
        return cls()

    @property
    def count_queries(self):
        return [sql for sql in self.sent if sql.startswith("SELECT COUNT(*)")]

    @property
    def page_queries(self):
        return [sql for sql in self.sent if not sql.startswith("SELECT COUNT(*)")]

    async def send(self, sql):
        self.sent.append(sql)
        if self.fail_with is not None:
            raise self.fail_with
        if sql.startswith("SELECT COUNT(*)"):
            return [dict(row) for row in self.count_rows]
        return [dict(row) for row in self.rows]

    async def close(self):
        self.closed = True


@pytest.fixture
def recording_transport():
    """Return a transport that finds nothing and counts zero."""
    return RecordingTransport()


@pytest.fixture
def make_transport():
    """Factory for recording transports with canned rows."""
    return RecordingTransport


LIBRARY_SCHEMA = """
CREATE TABLE server_artists (id INTEGER PRIMARY KEY, name TEXT);
CREATE TABLE server_tracks (
    id INTEGER PRIMARY KEY,
    title TEXT,
    track_artist_id INTEGER,
    plays INTEGER
);

INSERT INTO server_artists (id, name) VALUES
    (10, 'abba'),
    (20, 'Zebra'),
    (30, 'blink-182');

INSERT INTO server_tracks (id, title, track_artist_id, plays) VALUES
    (1, 'alpha', 10, 5),
    (2, 'Bravo', 20, 3),
    (3, 'charlie', 30, 8),
    (4, 'Delta', 10, 1),
    (5, 'echo', 20, 9);
"""


@pytest.fixture
def library_transport():
    """Return an in-memory SQLite transport with tracks and artists tables."""
    transport = SQLiteTransport(":memory:")
    connection = transport.connect()
    connection.executescript(LIBRARY_SCHEMA)
    yield transport
    connection.close()


@pytest.fixture
def library_sql():
    """Return the schema used by library_transport."""
    return LIBRARY_SCHEMA
