"""
Base Transport Interface

A transport is the one seam between the query engine and whatever
actually runs SQL: an HTTP API, another process, an embedded driver or a
test stub.

DESIGN PRINCIPLES:
-----------------
1. One async method: send(sql) -> list of row dicts
2. SQL arrives fully rendered; transports never rewrite it
3. Driver and network errors are wrapped in TransportError subclasses
4. No retries; a failure surfaces on the first attempt
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Rows = List[Row]


class Transport(ABC):
    """
    Abstract base class for SQL transports.

    Usage:
        async with SQLiteTransport("library.db") as transport:
            rows = await transport.send("SELECT * FROM tracks LIMIT 10")
    """

    # Mode identifier used by the factory (e.g. "http", "ipc")
    MODE: str = "base"

    @classmethod
    def from_settings(cls, settings) -> "Transport":
        """Build a transport from Settings. Required for register_transport()."""
        raise NotImplementedError(f"{cls.__name__} cannot be built from settings")

    @abstractmethod
    async def send(self, sql: str) -> Rows:
        """
        Execute SQL and return the resulting rows.

        Raises:
            TransportError: If the SQL could not be delivered or executed
        """
        pass

    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False


class FunctionTransport(Transport):
    """
    Adapts a plain `execute(sql) -> rows` function into a Transport.

    The function may be synchronous or a coroutine function.

    Example:
        transport = FunctionTransport(lambda sql: [])
    """

    MODE = "function"

    def __init__(self, func: Callable[[str], Union[Rows, Awaitable[Rows]]]):
        self.func = func

    async def send(self, sql: str) -> Rows:
        result = self.func(sql)
        if inspect.isawaitable(result):
            result = await result
        return list(result)
