"""
SQLite Transport

Runs SQL directly against a SQLite database with the stdlib driver.
Ideal for local development, tests and embedded use.

Requirements:
    None - sqlite3 is included in Python standard library
"""

import asyncio
import logging
import sqlite3
from typing import Optional

from sqleary.shared.exceptions import ConnectionError, QueryError
from sqleary.transports.base import Rows, Transport

logger = logging.getLogger(__name__)


class SQLiteTransport(Transport):
    """
    Transport for SQLite databases.

    Example (In-Memory):
        transport = SQLiteTransport(":memory:")

    Example (Read-Only File):
        transport = SQLiteTransport("/path/to/library.db", read_only=True)
    """

    MODE = "sqlite"

    def __init__(self, database: str = ":memory:", read_only: bool = False, timeout: float = 30.0):
        self.database = database
        self.read_only = read_only
        self.timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None

    @classmethod
    def from_settings(cls, settings) -> "SQLiteTransport":
        return cls(database=settings.sqlite_database, timeout=settings.timeout)

    def connect(self) -> sqlite3.Connection:
        """Open the connection if needed and return it."""
        if self._connection is not None:
            return self._connection

        try:
            if self.read_only and self.database != ":memory:":
                self._connection = sqlite3.connect(
                    f"file:{self.database}?mode=ro",
                    uri=True,
                    timeout=self.timeout,
                    check_same_thread=False
                )
            else:
                self._connection = sqlite3.connect(
                    self.database,
                    timeout=self.timeout,
                    check_same_thread=False
                )
        except sqlite3.Error as e:
            raise ConnectionError(
                f"Failed to connect to SQLite: {e}",
                transport=self.MODE,
                original_error=e
            ) from e

        logger.info(f"SQLite connected: {self.database}")
        return self._connection

    async def send(self, sql: str) -> Rows:
        return await asyncio.to_thread(self._execute, sql)

    def _execute(self, sql: str) -> Rows:
        connection = self.connect()
        cursor = None

        try:
            cursor = connection.cursor()
            cursor.execute(sql)

            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            data = cursor.fetchall() if cursor.description else []

            # zip, not sqlite3.Row: a repeated column name keeps its last value
            return [dict(zip(columns, row)) for row in data]
        except sqlite3.Error as e:
            logger.error(f"SQLite query failed: {e}")
            raise QueryError(
                f"SQLite query failed: {e}",
                transport=self.MODE,
                original_error=e
            ) from e
        finally:
            if cursor:
                cursor.close()

    async def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
