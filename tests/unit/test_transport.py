"""
Unit tests for transports.
"""

import httpx
import pytest

from reqx.document import HTTPMethod, RequestRecord
from reqx.errors import TransportError
from reqx.transport import (
    FunctionTransport,
    HttpxTransport,
    ResponseSummary,
)


RECORD = RequestRecord(
    method=HTTPMethod.POST,
    url="http://localhost:8080/users",
    headers=(("Content-Type", "application/json"), ("Accept", "a"), ("accept", "b")),
    body='{"name": "Ada"}',
    index=1,
    line=1,
)


class TestResponseSummary:
    """Tests for ResponseSummary."""

    @pytest.mark.parametrize("status,attr", [
        (200, "is_success"),
        (204, "is_success"),
        (301, "is_redirect"),
        (404, "is_client_error"),
        (503, "is_server_error"),
    ])
    def test_status_classes(self, status: int, attr: str):
        """Test the status helper properties."""
        assert getattr(ResponseSummary(status=status), attr) is True

    def test_json(self):
        """Test JSON body access."""
        assert ResponseSummary(200, body='{"a": 1}').json == {"a": 1}
        assert ResponseSummary(200, body="<html>").json is None
        assert ResponseSummary(204).json is None

    def test_get_header(self):
        """Test case-insensitive header lookup."""
        response = ResponseSummary(200, headers=(("Content-Type", "text/plain"),))

        assert response.get_header("content-type") == "text/plain"
        assert response.get_header("x-missing") == ""


class TestFunctionTransport:
    """Tests for FunctionTransport."""

    def test_calls_function(self):
        """Test that the wrapped function produces the response."""
        def echo(record):
            return ResponseSummary(status=200, body=record.body or "")

        transport = FunctionTransport(echo)

        assert transport.execute(RECORD).body == RECORD.body
        assert transport.name == "echo"

    def test_wraps_exceptions(self):
        """Test that arbitrary exceptions become TransportError."""
        def broken(record):
            raise RuntimeError("boom")

        with pytest.raises(TransportError) as exc_info:
            FunctionTransport(broken, name="broken-client").execute(RECORD)

        assert "broken-client failed: boom" in str(exc_info.value)
        assert exc_info.value.url == RECORD.url

    def test_transport_error_passes_through(self):
        """Test that a TransportError is not wrapped again."""
        error = TransportError("refused", url="x")

        def refusing(record):
            raise error

        with pytest.raises(TransportError) as exc_info:
            FunctionTransport(refusing).execute(RECORD)

        assert exc_info.value is error


class TestHttpxTransport:
    """Tests for HttpxTransport, served by httpx.MockTransport."""

    def test_execute(self):
        """Test the outgoing request and the response summary."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"id": 1}, headers={"Location": "/users/1"})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        response = HttpxTransport(client=client).execute(RECORD)

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://localhost:8080/users"
        assert request.headers["content-type"] == "application/json"
        assert request.content == b'{"name": "Ada"}'

        assert response.status == 201
        assert response.reason == "Created"
        assert response.get_header("location") == "/users/1"
        assert response.json == {"id": 1}
        assert response.elapsed_ms >= 0

    def test_duplicate_headers_sent_twice(self):
        """Test that a repeated header is not merged away."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        HttpxTransport(client=client).execute(RECORD)

        assert seen[0].headers.get_list("accept") == ["a", "b"]

    def test_no_body_sends_no_content(self):
        """Test that a record without a body sends an empty request body."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="ok")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        record = RequestRecord(method=HTTPMethod.GET, url="http://localhost:80/")

        response = HttpxTransport(client=client).execute(record)

        assert seen[0].content == b""
        assert response.body == "ok"

    def test_preloaded_response_is_timed(self):
        """Test that a response httpx never streamed still gets an elapsed time."""
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text="ok")))
        record = RequestRecord(method=HTTPMethod.GET, url="http://localhost:8080/x")

        response = HttpxTransport(client=client).execute(record)

        assert response.status == 200
        assert response.elapsed_ms >= 0

    def test_non_ascii_header_value(self):
        """Test that UTF-8 header values are sent as UTF-8 bytes."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        record = RequestRecord(
            method=HTTPMethod.GET,
            url="http://localhost:80/a",
            headers=(("X-Name", "café ☃"),),
        )

        HttpxTransport(client=client).execute(record)

        assert (b"X-Name", "café ☃".encode("utf-8")) in seen[0].headers.raw

    def test_connection_error(self):
        """Test that httpx errors become TransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError) as exc_info:
            HttpxTransport(client=client).execute(RECORD)

        assert "Request failed: connection refused" in str(exc_info.value)
        assert exc_info.value.url == RECORD.url

    def test_does_not_close_borrowed_client(self):
        """Test that a client passed in is left open."""
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        with HttpxTransport(client=client):
            pass

        assert client.is_closed is False
        client.close()

    def test_closes_own_client(self):
        """Test that a client created by the transport is closed with it."""
        transport = HttpxTransport(timeout=5.0, verify_tls=False)
        transport.close()

        assert transport._client.is_closed is True
