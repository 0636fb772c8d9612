"""
Tests for the built-in transports and the transport factory.
"""

import json

import httpx
import pytest

from sqleary import (
    AuthenticationError,
    ConnectionError,
    FunctionTransport,
    HttpTransport,
    IpcTransport,
    QueryConfigError,
    QueryError,
    RateLimitError,
    Settings,
    SQLiteTransport,
    TransportError,
    get_transport,
    list_transports,
    register_transport,
)
from sqleary.transports import ipc_transport


def mock_http(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(url="http://media.local", client=client, **kwargs)


class TestFunctionTransport:

    @pytest.mark.asyncio
    async def test_sync_function(self):
        transport = FunctionTransport(lambda sql: [{"sql": sql}])
        assert await transport.send("SELECT 1") == [{"sql": "SELECT 1"}]

    @pytest.mark.asyncio
    async def test_async_function(self):
        async def execute(sql):
            return ({"n": n} for n in range(2))

        assert await FunctionTransport(execute).send("SELECT 1") == [{"n": 0}, {"n": 1}]


class TestHttpTransport:

    @pytest.mark.asyncio
    async def test_posts_sql_and_reads_response_key(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"response": [{"id": 1}]})

        transport = mock_http(handler, api_key="secret")
        rows = await transport.send("SELECT * FROM server_tracks LIMIT 100")

        assert rows == [{"id": 1}]
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://media.local/query"
        assert json.loads(request.content) == {"sql": "SELECT * FROM server_tracks LIMIT 100"}
        assert request.headers["X-API-Key"] == "secret"

    @pytest.mark.asyncio
    async def test_get_sends_query_parameter(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=[{"id": 2}])

        transport = mock_http(handler, method="GET", endpoint="/sql")
        assert await transport.send("SELECT 2") == [{"id": 2}]
        assert requests[0].url.params["sql"] == "SELECT 2"
        assert requests[0].url.path == "/sql"

    @pytest.mark.asyncio
    async def test_rows_key(self):
        transport = mock_http(lambda request: httpx.Response(200, json={"rows": [{"a": 1}]}))
        assert await transport.send("SELECT 1") == [{"a": 1}]

    @pytest.mark.asyncio
    async def test_non_list_body(self):
        transport = mock_http(lambda request: httpx.Response(200, json={"ok": True}))
        with pytest.raises(QueryError):
            await transport.send("SELECT 1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, error", [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (400, QueryError),
        (429, RateLimitError),
        (500, TransportError),
    ])
    async def test_status_mapping(self, status, error):
        transport = mock_http(
            lambda request: httpx.Response(status, json={"detail": "nope"}, headers={"Retry-After": "7"})
        )
        with pytest.raises(error) as excinfo:
            await transport.send("SELECT 1")

        assert excinfo.value.status_code == status
        assert excinfo.value.message == "nope"
        if status == 429:
            assert excinfo.value.retry_after == 7

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ConnectionError) as excinfo:
            await mock_http(handler).send("SELECT 1")
        assert isinstance(excinfo.value.original_error, httpx.ConnectError)

    def test_unsupported_method(self):
        with pytest.raises(QueryConfigError):
            HttpTransport(method="DELETE")

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
        transport = HttpTransport(client=client)
        await transport.close()
        assert not client.is_closed
        await client.aclose()


class FakeConnection:

    def __init__(self, reply):
        self.reply = reply
        self.sent = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def send(self, obj):
        self.sent.append(obj)

    def recv(self):
        return self.reply


class TestIpcTransport:

    @pytest.mark.asyncio
    async def test_asks_sql_channel(self, monkeypatch):
        connection = FakeConnection([{"id": 1}])
        calls = []

        def fake_client(address, authkey=None):
            calls.append((address, authkey))
            return connection

        monkeypatch.setattr(ipc_transport, "Client", fake_client)

        transport = IpcTransport(("localhost", 6001), authkey="secret")
        assert await transport.send("SELECT 1") == [{"id": 1}]
        assert connection.sent == [("sql", "SELECT 1")]
        assert calls == [(("localhost", 6001), b"secret")]

    @pytest.mark.asyncio
    async def test_error_reply(self, monkeypatch):
        monkeypatch.setattr(ipc_transport, "Client", lambda address, authkey=None: FakeConnection({"error": "no such table"}))

        with pytest.raises(QueryError, match="no such table"):
            await IpcTransport().send("SELECT * FROM nowhere")

    @pytest.mark.asyncio
    async def test_unreachable_host(self, monkeypatch):
        def refuse(address, authkey=None):
            raise ConnectionRefusedError("refused")

        monkeypatch.setattr(ipc_transport, "Client", refuse)

        with pytest.raises(ConnectionError):
            await IpcTransport().send("SELECT 1")


class TestSQLiteTransport:

    @pytest.mark.asyncio
    async def test_duplicate_columns_keep_last_value(self, library_transport):
        rows = await library_transport.send(
            "SELECT server_tracks.id AS _primaryTableRowId, * FROM server_tracks "
            "LEFT JOIN server_artists ON server_tracks.track_artist_id = server_artists.id "
            "WHERE server_tracks.id = 1"
        )
        assert rows[0]["_primaryTableRowId"] == 1
        assert rows[0]["id"] == 10

    @pytest.mark.asyncio
    async def test_query_error(self, library_transport):
        with pytest.raises(QueryError):
            await library_transport.send("SELECT * FROM server_nowhere")


class TestFactory:

    def test_builtin_modes(self):
        assert {"http", "ipc", "sqlite", "duckdb"} <= set(list_transports())

    def test_http_from_settings(self):
        transport = get_transport("http", Settings(http_url="https://media.local/", api_key="k", timeout=5))
        assert isinstance(transport, HttpTransport)
        assert transport.url == "https://media.local"
        assert transport.endpoint == "/query"
        assert transport.method == "POST"
        assert transport.api_key == "k"

    def test_ipc_from_settings(self):
        transport = get_transport("IPC", Settings(ipc_host="127.0.0.1", ipc_port=7000, ipc_authkey="x"))
        assert isinstance(transport, IpcTransport)
        assert transport.address == ("127.0.0.1", 7000)
        assert transport.authkey == b"x"
        assert transport.channel == "sql"

    def test_unknown_mode(self):
        with pytest.raises(QueryConfigError):
            get_transport("smoke-signals", Settings())

    def test_register_transport(self):
        class EchoTransport(FunctionTransport):
            MODE = "echo"

            @classmethod
            def from_settings(cls, settings):
                return cls(lambda sql: [{"sql": sql}])

        register_transport("echo", EchoTransport)
        assert isinstance(get_transport("echo", Settings()), EchoTransport)

    def test_register_rejects_transport_without_from_settings(self):
        with pytest.raises(QueryConfigError, match="from_settings"):
            register_transport("callable", FunctionTransport)
        assert "callable" not in list_transports()
