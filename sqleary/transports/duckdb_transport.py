"""
DuckDB Transport

Runs SQL against an embedded DuckDB database. DuckDB understands the
COLLATE NOCASE and RANDOM() forms the builder emits.

Requirements:
    pip install sqleary[duckdb]
"""

import asyncio
import logging
try:
    import duckdb
    DUCKDB_AVAILABLE = True
except ImportError:
    DUCKDB_AVAILABLE = False
    duckdb = None

from sqleary.shared.exceptions import ConnectionError, QueryError
from sqleary.transports.base import Rows, Transport

logger = logging.getLogger(__name__)


class DuckDBTransport(Transport):
    """
    Transport for DuckDB embedded databases.

    Example:
        transport = DuckDBTransport(":memory:")
        rows = await transport.send("SELECT 1 + 1 AS answer")
    """

    MODE = "duckdb"

    def __init__(self, database: str = ":memory:", read_only: bool = False):
        if not DUCKDB_AVAILABLE:
            raise ConnectionError(
                "DuckDB not installed. Run: pip install sqleary[duckdb]",
                transport=self.MODE
            )

        self.database = database
        self.read_only = read_only
        self._connection = None

    @classmethod
    def from_settings(cls, settings) -> "DuckDBTransport":
        return cls(database=settings.duckdb_database)

    def connect(self):
        """Open the connection if needed and return it."""
        if self._connection is not None:
            return self._connection

        try:
            self._connection = duckdb.connect(database=self.database, read_only=self.read_only)
        except duckdb.Error as e:
            raise ConnectionError(
                f"Failed to connect to DuckDB: {e}",
                transport=self.MODE,
                original_error=e
            ) from e

        logger.info(f"DuckDB connected: {self.database}")
        return self._connection

    async def send(self, sql: str) -> Rows:
        return await asyncio.to_thread(self._execute, sql)

    def _execute(self, sql: str) -> Rows:
        connection = self.connect()

        try:
            result = connection.execute(sql)
            columns = [desc[0] for desc in result.description] if result.description else []
            return [dict(zip(columns, row)) for row in result.fetchall()]
        except duckdb.Error as e:
            logger.error(f"DuckDB query failed: {e}")
            raise QueryError(
                f"DuckDB query failed: {e}",
                transport=self.MODE,
                original_error=e
            ) from e

    async def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
