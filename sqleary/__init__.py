"""
sqleary

Turns JSON-like query objects into SQL, runs them through a pluggable
transport and pages through the results.

Example:
    from sqleary import build, SQLiteTransport

    engine = await build(
        {
            "table": "tracks",
            "columns": {"genre": "Rock"},
            "orderBy": {"title": "ASC"},
            "itemsPerPage": 25
        },
        transport=SQLiteTransport("library.db")
    )

    print(engine.total_results, engine.pages)
    await engine.go_to_page(2)
"""

import logging

from sqleary.core.config import Settings, get_settings
from sqleary.domain.query import ClauseBuilder, QueryEngine, build, normalize_query_spec
from sqleary.shared.types import QuerySpec, ColumnGroup, JoinSpec, OrderTerm, PRIMARY_ROW_ID_ALIAS
from sqleary.shared.exceptions import (
    SqlearyError,
    QueryConfigError,
    SQLBuilderError,
    TransportError,
    ConnectionError,
    TimeoutError,
    AuthenticationError,
    RateLimitError,
    QueryError
)
from sqleary.transports import (
    Transport,
    FunctionTransport,
    HttpTransport,
    IpcTransport,
    SQLiteTransport,
    DuckDBTransport,
    get_transport,
    register_transport,
    list_transports
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "build",
    "QueryEngine",
    "ClauseBuilder",
    "normalize_query_spec",
    "QuerySpec",
    "ColumnGroup",
    "JoinSpec",
    "OrderTerm",
    "PRIMARY_ROW_ID_ALIAS",
    "Settings",
    "get_settings",
    "Transport",
    "FunctionTransport",
    "HttpTransport",
    "IpcTransport",
    "SQLiteTransport",
    "DuckDBTransport",
    "get_transport",
    "register_transport",
    "list_transports",
    "SqlearyError",
    "QueryConfigError",
    "SQLBuilderError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "AuthenticationError",
    "RateLimitError",
    "QueryError",
]
