"""
IPC Transport

Asks a host process to run SQL over a multiprocessing connection.

Each send() opens a connection, writes `(channel, sql)` and waits for a
single reply: the list of rows, or `{"error": "..."}` when the host
failed to execute the SQL.
"""

import asyncio
import logging
from multiprocessing.connection import Client
from typing import Any, Optional, Tuple

from sqleary.shared.exceptions import ConnectionError, QueryError
from sqleary.transports.base import Rows, Transport

logger = logging.getLogger(__name__)


class IpcTransport(Transport):
    """
    Transport for an in-host process that owns the database.

    Example:
        transport = IpcTransport(("localhost", 6000), authkey="secret")
        rows = await transport.send("SELECT * FROM server_albums")
    """

    MODE = "ipc"

    def __init__(
        self,
        address: Tuple[str, int] = ("localhost", 6000),
        authkey: Optional[str] = None,
        channel: str = "sql"
    ):
        self.address = address
        self.authkey = authkey.encode() if authkey else None
        self.channel = channel

    @classmethod
    def from_settings(cls, settings) -> "IpcTransport":
        return cls(
            address=(settings.ipc_host, settings.ipc_port),
            authkey=settings.ipc_authkey,
            channel=settings.ipc_channel
        )

    async def send(self, sql: str) -> Rows:
        reply = await asyncio.to_thread(self._ask, sql)

        if isinstance(reply, dict) and "error" in reply:
            raise QueryError(str(reply["error"]), transport=self.MODE)
        if not isinstance(reply, list):
            raise QueryError(
                f"Expected a list of rows over IPC, got {type(reply).__name__}",
                transport=self.MODE
            )
        return reply

    def _ask(self, sql: str) -> Any:
        try:
            with Client(self.address, authkey=self.authkey) as conn:
                conn.send((self.channel, sql))
                return conn.recv()
        except (OSError, EOFError) as e:
            logger.error(f"IPC transport failed talking to {self.address}: {e}")
            raise ConnectionError(
                f"IPC request to {self.address} failed: {e}",
                transport=self.MODE,
                original_error=e
            ) from e
