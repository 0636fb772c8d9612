"""
Transport Factory

Maps a `mode` name to a transport class and builds it from Settings.

Usage:
    from sqleary.transports import get_transport

    transport = get_transport("ipc")
    transport = get_transport("http", Settings(http_url="https://media.local"))
"""

import logging
from typing import Dict, List, Optional, Type

from sqleary.core.config import Settings, get_settings
from sqleary.shared.exceptions import QueryConfigError
from sqleary.transports.base import Transport
from sqleary.transports.duckdb_transport import DuckDBTransport
from sqleary.transports.http_transport import HttpTransport
from sqleary.transports.ipc_transport import IpcTransport
from sqleary.transports.sqlite_transport import SQLiteTransport

logger = logging.getLogger(__name__)


# =============================================================================
# TRANSPORT REGISTRY
# =============================================================================

# Map of mode name -> transport class
_TRANSPORT_REGISTRY: Dict[str, Type[Transport]] = {}


def register_transport(mode: str, transport_class: Type[Transport]) -> None:
    """
    Register a transport class for a mode.

    Args:
        mode: Mode identifier (e.g., "http", "ipc")
        transport_class: Transport class implementing from_settings()

    Raises:
        QueryConfigError: If the class cannot be built from Settings
    """
    if transport_class.from_settings.__func__ is Transport.from_settings.__func__:
        raise QueryConfigError(
            f"{transport_class.__name__} does not implement from_settings() "
            f"and cannot be selected by mode"
        )

    _TRANSPORT_REGISTRY[mode.lower()] = transport_class
    logger.debug(f"Registered transport for mode: {mode}")


def list_transports() -> List[str]:
    """Get list of registered transport modes."""
    return list(_TRANSPORT_REGISTRY.keys())


def get_transport(mode: Optional[str] = None, settings: Optional[Settings] = None) -> Transport:
    """
    Build the transport for a mode.

    Args:
        mode: Mode name; defaults to settings.mode
        settings: Settings to configure the transport (defaults to get_settings())

    Returns:
        A new, unconnected transport instance

    Raises:
        QueryConfigError: If no transport is registered for the mode
    """
    settings = settings or get_settings()
    mode = (mode or settings.mode).lower()

    if mode not in _TRANSPORT_REGISTRY:
        available = ", ".join(list_transports())
        raise QueryConfigError(f"Unsupported mode: {mode}. Available: {available}")

    return _TRANSPORT_REGISTRY[mode].from_settings(settings)


register_transport(HttpTransport.MODE, HttpTransport)
register_transport(IpcTransport.MODE, IpcTransport)
register_transport(SQLiteTransport.MODE, SQLiteTransport)
register_transport(DuckDBTransport.MODE, DuckDBTransport)
