"""
Query Engine

Owns one QuerySpec, the SQL built from it, the latest page of results and
the pagination totals.

Lifecycle:
    engine = await QueryEngine.create({"table": "tracks", "itemsPerPage": 50})
    engine.results          # rows for page 1
    engine.pages            # from a COUNT(*) variant of the same query
    await engine.go_to_page(3)

go_to_page() does not re-count. pages and total_results stay as they were
until calculate_totals() is called again.

One engine instance must not be driven concurrently; await each call
before issuing the next.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from sqleary.core.config import Settings, get_settings
from sqleary.domain.query.builder import COUNT_ALIAS, ClauseBuilder
from sqleary.domain.query.spec import normalize_query_spec
from sqleary.shared.types.models import PRIMARY_ROW_ID_ALIAS, QuerySpec
from sqleary.transports.base import Rows, Transport
from sqleary.transports.factory import get_transport

logger = logging.getLogger(__name__)


class QueryEngine:
    """
    Paginated query runner.

    Do not call the constructor directly unless you want an engine that
    has not executed anything yet; create() builds, executes and counts.
    """

    def __init__(self, spec: QuerySpec, transport: Transport, builder: Optional[ClauseBuilder] = None):
        self.spec = spec
        self.transport = transport
        self.builder = builder or ClauseBuilder()
        self._owns_transport = False

        self.sql: str = self.builder.build_sql(spec)
        self.results: Rows = []
        self.page: Optional[int] = None
        self.pages: Optional[int] = None
        self.total_results: Optional[int] = None

    @classmethod
    async def create(
        cls,
        query: Union[Mapping, QuerySpec],
        transport: Optional[Transport] = None,
        settings: Optional[Settings] = None,
        builder: Optional[ClauseBuilder] = None
    ) -> "QueryEngine":
        """
        Build an engine, fetch the requested page and count the totals.

        Args:
            query: Query object (see normalize_query_spec) or a QuerySpec
            transport: Where SQL is sent; defaults to the transport for
                       query["mode"], falling back to settings.mode
            settings: Settings used for the default transport and dialect
            builder: ClauseBuilder override

        Raises:
            QueryConfigError: If the query object is unusable
            TransportError: If the page or count query fails
        """
        spec = normalize_query_spec(query)
        settings = settings or get_settings()

        owns_transport = transport is None
        if owns_transport:
            transport = get_transport(spec.mode, settings)
        if builder is None:
            builder = ClauseBuilder(settings.sql_dialect)

        engine = cls(spec, transport, builder)
        engine._owns_transport = owns_transport

        try:
            # get results for the given page
            await engine.execute()

            # count the total number of pages
            await engine.calculate_totals()
        except Exception:
            await engine.close()
            raise

        engine.page = spec.page
        return engine

    async def close(self) -> None:
        """Close the transport if create() built it from settings."""
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def build_sql(self) -> str:
        """Rebuild self.sql from self.spec."""
        self.sql = self.builder.build_sql(self.spec)
        return self.sql

    async def execute(self) -> "QueryEngine":
        """Run the current SQL and replace the results."""
        self.results = await self._fetch(self.sql)
        return self

    async def go_to_page(self, page: int) -> "QueryEngine":
        """
        Switch to another page and fetch its rows.

        Pages below 1 select the first page; pages above the last known
        page count select the last page. Totals are not recalculated.
        The engine is left untouched if the transport fails.
        """
        # do nothing if we are already on this page
        if page == self.page:
            return self

        if self.pages is not None and page > self.pages:
            page = self.pages
        if page < 1:
            page = 1

        if page == self.page:
            return self

        spec = self.spec.model_copy(update={"page": page})
        sql = self.builder.build_sql(spec)
        results = await self._fetch(sql)

        self.spec = spec
        self.sql = sql
        self.results = results
        self.page = page
        return self

    async def calculate_totals(self) -> "QueryEngine":
        """
        Count total results and pages for the current query.

        Runs a COUNT(*) variant of the query without OFFSET. When
        itemsPerPage is -1 every row is already in self.results, so no
        query is sent.
        """
        # there can only be 1 page when showing all items
        if self.spec.is_unbounded:
            self.pages = 1
            self.total_results = len(self.results)
            return self

        count_sql = self.builder.build_count_sql(self.spec)
        logger.debug(f"Counting: {count_sql}")
        count_rows = await self.transport.send(count_sql)

        self.total_results = self._count_from(count_rows)
        self.pages = math.ceil(self.total_results / self.spec.items_per_page)

        logger.info(
            f"{self.spec.qualified_table}: {self.total_results} results "
            f"over {self.pages} pages"
        )
        return self

    async def _fetch(self, sql: str) -> Rows:
        logger.debug(f"Executing: {sql}")
        rows = await self.transport.send(sql)
        return self._after_execute(rows)

    def _after_execute(self, rows: Rows) -> Rows:
        """
        Restore the primary table id on joined rows.

        Every app table calls its primary key "id", so a join always lets
        the joined row's id overwrite the primary one. Use the foreign key
        column when the joined row's id is needed.
        """
        if not self.spec.is_joined:
            return list(rows)

        restored: List[Dict[str, Any]] = []
        for row in rows:
            row = dict(row)
            if PRIMARY_ROW_ID_ALIAS in row:
                row["id"] = row.pop(PRIMARY_ROW_ID_ALIAS)
            restored.append(row)
        return restored

    @staticmethod
    def _count_from(count_rows: Rows) -> int:
        # an empty count result is zero results, and so zero pages
        if not count_rows:
            return 0
        row = count_rows[0]
        if COUNT_ALIAS in row:
            return int(row[COUNT_ALIAS])

        # some backends fold the unquoted alias to lower case
        for key, value in row.items():
            if key.lower() == COUNT_ALIAS.lower():
                return int(value)
        return int(next(iter(row.values()), 0))

    def __repr__(self) -> str:
        return (
            f"QueryEngine(table={self.spec.qualified_table!r}, page={self.page}, "
            f"pages={self.pages}, total_results={self.total_results})"
        )


async def build(
    query: Union[Mapping, QuerySpec],
    transport: Optional[Transport] = None,
    settings: Optional[Settings] = None
) -> QueryEngine:
    """Shortcut for QueryEngine.create()."""
    return await QueryEngine.create(query, transport=transport, settings=settings)
