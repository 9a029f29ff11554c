"""
Unit tests for the Runner.
"""

import io
import json
import logging

import httpx
import pytest

from reqx.config import ReqxConfig
from reqx.document import parse
from reqx.errors import SelectionError
from reqx.runner import Exchange, Runner
from reqx.transport import HttpxTransport, ResponseSummary


class TestRunner:
    """Tests for running parsed documents."""

    def test_runs_in_source_order(self, quickstart_text, recording_transport):
        """Test that every record is sent once, in order."""
        runner = Runner(transport=recording_transport)

        report = runner.run(parse(quickstart_text))

        assert [r.index for r in recording_transport.calls] == [1, 2, 3]
        assert len(report.exchanges) == 3
        assert report.ok
        assert all(e.response.status == 200 for e in report.exchanges)

    def test_select_index(self, quickstart_text, recording_transport):
        """Test running a single request."""
        report = Runner(transport=recording_transport).run(parse(quickstart_text), index=2)

        assert [r.index for r in recording_transport.calls] == [2]
        assert report.exchanges[0].total == 3

    def test_select_method(self, quickstart_text, recording_transport):
        """Test running only one method."""
        Runner(transport=recording_transport).run(parse(quickstart_text), method="delete")

        assert [r.url for r in recording_transport.calls] == [
            "http://localhost:8080/api/v1/users/123",
        ]

    def test_invalid_selection(self, quickstart_text, recording_transport):
        """Test that selection errors reach the caller before anything is sent."""
        runner = Runner(transport=recording_transport)

        with pytest.raises(SelectionError):
            runner.run(parse(quickstart_text), index=4)

        assert recording_transport.calls == []

    def test_no_matches(self, quickstart_text, recording_transport):
        """Test that a method with no matches is an empty, successful run."""
        report = Runner(transport=recording_transport).run(parse(quickstart_text), method="PUT")

        assert report.exchanges == []
        assert report.ok

    def test_dry_run_sends_nothing(self, quickstart_text, recording_transport):
        """Test that dry-run mode never calls the transport."""
        runner = Runner(transport=recording_transport, config=ReqxConfig(dry_run=True))

        report = runner.run(parse(quickstart_text))

        assert recording_transport.calls == []
        assert all(e.dry_run for e in report.exchanges)
        assert report.ok

    def test_transport_error_continues(self, quickstart_text, recording_transport, caplog):
        """Test that one failing request does not stop the rest."""
        recording_transport.fail_on = "/users"

        report = Runner(transport=recording_transport).run(parse(quickstart_text))

        assert len(recording_transport.calls) == 3
        assert [e.ok for e in report.exchanges] == [True, False, False]
        assert len(report.failed) == 2
        assert not report.ok
        assert "Request 2 failed" in caplog.text

    def test_parse_errors_fail_report(self, recording_transport):
        """Test that sections that did not parse make the report fail."""
        result = parse("GET :80/a\n###\nPOST\n")

        report = Runner(transport=recording_transport).run(result)

        assert len(report.exchanges) == 1
        assert len(report.parse_errors) == 1
        assert not report.ok

    def test_http_error_status_is_not_failure(self, quickstart_text, recording_transport):
        """Test that a 500 response is still a completed exchange."""
        recording_transport.response = ResponseSummary(status=500, reason="Internal Server Error")

        report = Runner(transport=recording_transport).run(parse(quickstart_text))

        assert report.ok
        assert report.exchanges[0].response.is_server_error

    def test_run_file(self, quickstart_path, recording_transport):
        """Test parsing and running in one call."""
        report = Runner(transport=recording_transport).run_file(quickstart_path, index=1)

        assert report.exchanges[0].record.url == "http://localhost:8080/api/v1/health"

    def test_close_closes_transport(self, recording_transport):
        """Test that closing the runner closes its transport."""
        Runner(transport=recording_transport).close()

        assert recording_transport.closed

    def test_invalid_config(self):
        """Test that a bad config is rejected up front."""
        with pytest.raises(ValueError):
            Runner(config=ReqxConfig(output_format="yaml"))


class TestOutput:
    """Tests for what the runner writes to its stream and logs."""

    def test_text_output(self, quickstart_text, recording_transport):
        """Test the human-readable report."""
        stream = io.StringIO()

        Runner(transport=recording_transport, stream=stream).run(parse(quickstart_text), index=1)

        output = stream.getvalue()
        assert output.startswith("# Health check\n")
        assert "[1/3] GET http://localhost:8080/api/v1/health -> 200 OK (" in output

    def test_verbose_text_output(self, quickstart_text, recording_transport):
        """Test that verbose output shows headers and pretty bodies."""
        stream = io.StringIO()
        config = ReqxConfig(verbose=True)

        Runner(recording_transport, config, stream).run(parse(quickstart_text), index=2)

        output = stream.getvalue()
        assert "  Authorization: Bearer super-secret-jwt" in output
        assert '      "name": "Ada Lovelace",' in output
        assert "  Response Headers:" in output
        assert '      "message": "hello"' in output

    def test_json_output(self, quickstart_text, recording_transport):
        """Test one JSON object per line."""
        stream = io.StringIO()
        config = ReqxConfig(output_format="json")

        Runner(recording_transport, config, stream).run(parse(quickstart_text))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 3
        first = json.loads(lines[0])
        assert first["index"] == 1
        assert first["method"] == "GET"
        assert first["status"] == 200
        assert first["dry_run"] is False
        assert "response_body" not in first

    def test_exchange_logger(self, quickstart_text, recording_transport, caplog):
        """Test that every exchange is logged to reqx.exchange."""
        caplog.set_level(logging.INFO, logger="reqx.exchange")

        Runner(transport=recording_transport).run(parse(quickstart_text))

        records = [r for r in caplog.records if r.name == "reqx.exchange"]
        assert len(records) == 3


class TestExchange:
    """Tests for Exchange formatting."""

    def test_dry_run_summary(self, quickstart_text):
        """Test the dry-run summary line."""
        record = parse(quickstart_text).records[2]

        exchange = Exchange(record=record, total=3, dry_run=True)

        assert exchange.summary() == (
            "[3/3] DELETE http://localhost:8080/api/v1/users/123 (dry-run: request not sent)"
        )

    def test_long_text_body_truncated(self, quickstart_text):
        """Test that long non-JSON response bodies are cut short."""
        record = parse(quickstart_text).records[0]
        body = "\n".join(f"line {n}" for n in range(80))
        exchange = Exchange(record=record, total=3, response=ResponseSummary(200, "OK", body=body))

        text = exchange.to_text(verbose=True)

        assert "    line 49" in text
        assert "line 50\n" not in text
        assert "... (30 more lines)" in text


class TestRunnerWithHttpx:
    """Tests for running through the default httpx transport."""

    def test_non_ascii_header_does_not_stop_the_run(self):
        """Test that a request with a UTF-8 header value runs, and so does the next one."""
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, text="ok")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        result = parse("GET :8080/a\nX-Name: café ☃\n\n###\nGET :8080/b\n")

        report = Runner(transport=HttpxTransport(client=client)).run(result)

        assert len(report.exchanges) == 2
        assert report.ok
        assert urls == ["http://localhost:8080/a", "http://localhost:8080/b"]

    def test_connection_error_does_not_stop_the_run(self):
        """Test that a refused connection is recorded and the next request still runs."""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/a":
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text="ok")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        result = parse("GET :8080/a\n###\nGET :8080/b\n")

        report = Runner(transport=HttpxTransport(client=client)).run(result)

        assert [e.ok for e in report.exchanges] == [False, True]
        assert "connection refused" in str(report.exchanges[0].error)
