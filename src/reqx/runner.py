"""
=============================================================================
REQX RUNNER
=============================================================================

Replays parsed requests through a transport and reports each exchange.

=============================================================================
RUN FLOW
=============================================================================

    ParseResult
        │
        ▼
    select(index, method) ──── SelectionError? ──► raised to the caller
        │
        ▼
    for record in selected, in source order:
        │
        ├── dry run?  ──► Exchange(record, dry_run=True)
        │
        └── transport.execute(record)
                ├── ResponseSummary ──► Exchange(record, response)
                └── TransportError  ──► Exchange(record, error)   keep going
        │
        ▼
    emit: "reqx.exchange" logger + optional output stream (text or JSON)
        │
        ▼
    RunReport(exchanges, parse errors)

Requests run one after another. Later requests in a file often depend on
what earlier ones did on the server (create, then fetch, then delete), so
the source order is kept.

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TextIO, Union

from .config import ReqxConfig
from .document import HTTPMethod, ParseResult, RequestRecord, parse_file
from .errors import SectionError, TransportError
from .transport import HttpxTransport, ResponseSummary, Transport


logger = logging.getLogger(__name__)

# Exchanges get their own logger so they can be routed separately:
#   logging.getLogger("reqx.exchange").addHandler(file_handler)
exchange_logger = logging.getLogger("reqx.exchange")

# Non-JSON response bodies longer than this are cut in verbose text output
MAX_BODY_LINES = 50


@dataclass
class Exchange:
    """
    One request of a run and what became of it.

    Exactly one of these holds:
    - dry_run is True (nothing was sent)
    - response is set (the server answered, whatever the status)
    - error is set (the transport could not get an answer)
    """

    record: RequestRecord
    total: int = 0
    response: Optional[ResponseSummary] = None
    error: Optional[TransportError] = None
    duration_ms: float = 0.0
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        """False only when the transport failed."""
        return self.error is None

    def to_dict(self, verbose: bool = False) -> dict[str, Any]:
        """Convert to a dictionary for JSON output."""
        data: dict[str, Any] = {
            "index": self.record.index,
            "description": self.record.description,
            "method": self.record.method.value,
            "url": self.record.url,
            "dry_run": self.dry_run,
            "duration_ms": round(self.duration_ms, 2),
        }
        if verbose:
            data["request_headers"] = [list(pair) for pair in self.record.headers]
            data["request_body"] = self.record.body
        if self.response is not None:
            data["status"] = self.response.status
            data["reason"] = self.response.reason
            if verbose:
                data["response_headers"] = [list(pair) for pair in self.response.headers]
                data["response_body"] = self.response.body
        if self.error is not None:
            data["error"] = str(self.error)
        return data

    def summary(self) -> str:
        """
        One-line summary:

            [2/3] POST http://localhost:8080/users -> 201 Created (14.02ms)
        """
        head = f"[{self.record.index}/{self.total}] {self.record.method.value} {self.record.url}"
        if self.dry_run:
            return f"{head} (dry-run: request not sent)"
        if self.error is not None:
            return f"{head} -> ERROR {self.error}"
        status = f"{self.response.status} {self.response.reason}".rstrip()
        return f"{head} -> {status} ({self.duration_ms:.2f}ms)"

    def to_text(self, verbose: bool = False) -> str:
        """Human-readable report; with verbose, headers and bodies too."""
        lines = []
        if self.record.description:
            lines.append(f"# {self.record.description}")
        lines.append(self.summary())
        if not verbose:
            return "\n".join(lines)

        for name, value in self.record.headers:
            lines.append(f"  {name}: {value}")
        if self.record.body is not None:
            lines.append("  Body:")
            lines.extend(_indent(_pretty_body(self.record.body), "    "))

        if self.response is not None:
            lines.append("  Response Headers:")
            for name, value in self.response.headers:
                lines.append(f"    {name}: {value}")
            if self.response.body:
                lines.append("  Response Body:")
                lines.extend(_indent(_pretty_body(self.response.body, MAX_BODY_LINES), "    "))
        return "\n".join(lines)


@dataclass
class RunReport:
    """Everything that happened in one run."""

    exchanges: list[Exchange] = field(default_factory=list)
    parse_errors: tuple[SectionError, ...] = ()

    @property
    def failed(self) -> list[Exchange]:
        return [exchange for exchange in self.exchanges if not exchange.ok]

    @property
    def ok(self) -> bool:
        """True when every section parsed and every selected request got an answer."""
        return not self.parse_errors and not self.failed


class Runner:
    """
    Runs the requests of a parsed document.

    =========================================================================
    USAGE
    =========================================================================

        result = parse_file("api.reqx")
        runner = Runner(config=ReqxConfig(verbose=True), stream=sys.stdout)

        report = runner.run(result)                 # everything
        report = runner.run(result, index=2)        # only request 2
        report = runner.run(result, method="POST")  # only POST requests

    Pass any Transport to use your own HTTP client; by default a
    HttpxTransport is created on first use.

    =========================================================================
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[ReqxConfig] = None,
        stream: Optional[TextIO] = None,
    ):
        self.config = config or ReqxConfig()
        self.config.validate()
        self.stream = stream
        self._transport = transport

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpxTransport(
                timeout=self.config.timeout,
                verify_tls=self.config.verify_tls,
            )
        return self._transport

    def run(
        self,
        result: ParseResult,
        index: Optional[int] = None,
        method: Union[HTTPMethod, str, None] = None,
    ) -> RunReport:
        """
        Run the selected requests of a parse result.

        Args:
            result: Output of parse() / parse_file().
            index: Run only this 1-based request.
            method: Run only requests with this method.

        Returns:
            RunReport with one Exchange per selected request.

        Raises:
            SelectionError: If index or method do not select validly.
        """
        selected = result.select(index=index, method=method)
        report = RunReport(parse_errors=result.errors)

        if not selected:
            if method is not None:
                logger.info(f"No requests matched the method filter: {method}")
            else:
                logger.info("No requests to run")
            return report

        for record in selected:
            exchange = self.execute(record, total=result.section_count)
            report.exchanges.append(exchange)
            self._emit(exchange)

        return report

    def run_file(
        self,
        path: Union[str, Path],
        index: Optional[int] = None,
        method: Union[HTTPMethod, str, None] = None,
    ) -> RunReport:
        """Parse a file with this runner's config and run it."""
        return self.run(parse_file(path, self.config), index=index, method=method)

    def execute(self, record: RequestRecord, total: int = 0) -> Exchange:
        """Send one record (or not, in dry-run mode) and time it."""
        if self.config.dry_run:
            return Exchange(record=record, total=total, dry_run=True)

        start_time = time.perf_counter()
        try:
            response = self.transport.execute(record)
        except TransportError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request {record.index} failed: {record.method.value} {record.url} "
                f"- {e} ({duration_ms:.2f}ms)"
            )
            return Exchange(record=record, total=total, error=e, duration_ms=duration_ms)

        duration_ms = (time.perf_counter() - start_time) * 1000
        return Exchange(record=record, total=total, response=response, duration_ms=duration_ms)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

    def _emit(self, exchange: Exchange) -> None:
        exchange_logger.info(exchange.summary())

        if self.stream is None:
            return
        if self.config.output_format == "json":
            self.stream.write(json.dumps(exchange.to_dict(self.config.verbose)) + "\n")
        else:
            self.stream.write(exchange.to_text(self.config.verbose) + "\n\n")


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging for command-line use."""
    numeric = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("reqx").setLevel(numeric)


def _pretty_body(body: str, max_lines: Optional[int] = None) -> list[str]:
    # JSON is re-indented; anything else is shown as-is, optionally cut short
    try:
        return json.dumps(json.loads(body), indent=2).splitlines()
    except ValueError:
        pass

    lines = body.splitlines()
    if max_lines is not None and len(lines) > max_lines:
        hidden = len(lines) - max_lines
        return lines[:max_lines] + [f"... ({hidden} more lines)"]
    return lines


def _indent(lines: list[str], prefix: str) -> list[str]:
    return [prefix + line for line in lines]
