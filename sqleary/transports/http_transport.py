"""
HTTP Transport

Sends SQL to a remote query endpoint and reads rows back from the JSON
response.

Request:  POST <url><endpoint>   {"sql": "SELECT ..."}
Response: {"response": [...rows...]}  or  {"rows": [...]}  or  [...]
"""

import logging
from typing import Any, Optional

import httpx

from sqleary.shared.exceptions import (
    AuthenticationError,
    ConnectionError,
    QueryConfigError,
    QueryError,
    RateLimitError,
    TimeoutError,
    TransportError
)
from sqleary.transports.base import Rows, Transport

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """
    Asynchronous HTTP transport built on httpx.

    Example:
        async with HttpTransport(url="http://localhost:8080", api_key="key") as transport:
            rows = await transport.send("SELECT * FROM server_tracks LIMIT 10")
    """

    MODE = "http"

    def __init__(
        self,
        url: str = "http://localhost:8080",
        endpoint: str = "/query",
        method: str = "POST",
        api_key: str = None,
        api_key_header: str = "X-API-Key",
        timeout: float = 30,
        verify_ssl: bool = True,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the HTTP transport.

        Args:
            url: Base URL of the query server
            endpoint: Path that accepts SQL
            method: POST (JSON body) or GET (query parameter)
            api_key: API key sent in `api_key_header`
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            client: Pre-built httpx client; the transport will not close it
        """
        self.url = url.rstrip("/")
        self.endpoint = endpoint
        self.method = method.upper()
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._client = client
        self._owns_client = client is None

        if self.method not in ("GET", "POST"):
            raise QueryConfigError(f"Unsupported HTTP method: {method}")

    @classmethod
    def from_settings(cls, settings) -> "HttpTransport":
        return cls(
            url=settings.http_url,
            endpoint=settings.http_endpoint,
            method=settings.http_method,
            api_key=settings.api_key,
            api_key_header=settings.api_key_header,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        return self._client

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[self.api_key_header] = self.api_key
        return headers

    async def send(self, sql: str) -> Rows:
        client = self._get_client()
        url = f"{self.url}{self.endpoint}"

        try:
            if self.method == "GET":
                response = await client.get(url, params={"sql": sql}, headers=self._headers())
            else:
                response = await client.post(url, json={"sql": sql}, headers=self._headers())
        except httpx.ConnectError as e:
            logger.error(f"HTTP transport could not reach {url}: {e}")
            raise ConnectionError(
                f"Failed to connect to {url}: {e}",
                transport=self.MODE,
                original_error=e
            ) from e
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Request timed out after {self.timeout}s: {e}",
                transport=self.MODE,
                original_error=e
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request failed: {e}",
                transport=self.MODE,
                original_error=e
            ) from e

        return self._extract_rows(self._handle_response(response))

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle HTTP response and raise appropriate errors."""
        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise QueryError(
                    f"Response from {self.endpoint} is not JSON: {e}",
                    transport=self.MODE,
                    status_code=response.status_code,
                    original_error=e
                ) from e

        # Try to parse error details
        try:
            error_data = response.json()
            message = error_data.get("detail", str(error_data)) if isinstance(error_data, dict) else str(error_data)
        except ValueError:
            message = response.text or f"HTTP {response.status_code}"

        status = response.status_code
        logger.error(f"HTTP transport got {status} from {response.request.url}: {message}")

        if status in (401, 403):
            raise AuthenticationError(message, transport=self.MODE, status_code=status)
        elif status == 400:
            raise QueryError(message, transport=self.MODE, status_code=status)
        elif status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                message,
                transport=self.MODE,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        else:
            raise TransportError(message, transport=self.MODE, status_code=status)

    def _extract_rows(self, data: Any) -> Rows:
        if isinstance(data, dict):
            if "response" in data:
                data = data["response"]
            elif "rows" in data:
                data = data["rows"]

        if not isinstance(data, list):
            raise QueryError(
                f"Expected a list of rows from {self.endpoint}, got {type(data).__name__}",
                transport=self.MODE
            )
        return data

    async def close(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
