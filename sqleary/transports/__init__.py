"""
SQL Transports

Each transport delivers rendered SQL to one kind of destination and
returns rows as a list of dicts.

Built-in modes:
- http   (remote query endpoint, httpx)
- ipc    (host process over multiprocessing.connection)
- sqlite (stdlib driver)
- duckdb (optional extra)
"""

from sqleary.transports.base import Transport, FunctionTransport, Row, Rows
from sqleary.transports.http_transport import HttpTransport
from sqleary.transports.ipc_transport import IpcTransport
from sqleary.transports.sqlite_transport import SQLiteTransport
from sqleary.transports.duckdb_transport import DuckDBTransport
from sqleary.transports.factory import get_transport, register_transport, list_transports

__all__ = [
    "Transport",
    "FunctionTransport",
    "Row",
    "Rows",
    "HttpTransport",
    "IpcTransport",
    "SQLiteTransport",
    "DuckDBTransport",
    "get_transport",
    "register_transport",
    "list_transports"
]
