"""
=============================================================================
TRANSPORT INTERFACE
=============================================================================

The parser only produces RequestRecords. Sending them is the job of a
Transport, which the application owns and hands to the Runner:

    ┌──────────────┐    RequestRecord    ┌─────────────┐    network
    │    Runner    │ ──────────────────► │  Transport  │ ───────────►
    │              │ ◄────────────────── │             │ ◄───────────
    └──────────────┘   ResponseSummary   └─────────────┘
                       or TransportError

Bring your own HTTP client: subclass Transport, or wrap a plain function
with FunctionTransport. The parser never constructs or calls a transport.

=============================================================================
THE TRANSPORT CONTRACT
=============================================================================

    def execute(self, record: RequestRecord) -> ResponseSummary

- Send exactly what the record says: method, URL, headers (in order,
  duplicates included), body.
- Return a ResponseSummary for ANY HTTP status, 4xx and 5xx included.
- Raise TransportError when no response could be obtained at all
  (connection refused, DNS failure, timeout, invalid URL).

=============================================================================
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..document.models import RequestRecord
from ..errors import TransportError


@dataclass(frozen=True)
class ResponseSummary:
    """
    What a transport reports back about one response.

    Attributes:
        status:      HTTP status code.
        reason:      Reason phrase as sent by the server ("OK", "Not Found").
        headers:     (name, value) pairs in the order received.
        body:        Response body decoded as text.
        elapsed_ms:  Time from sending the request to receiving the response.
    """

    status: int
    reason: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    body: str = ""
    elapsed_ms: float = 0.0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status < 600

    def get_header(self, name: str, default: str = "") -> str:
        """First value of a response header (case-insensitive lookup)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def json(self) -> Optional[Any]:
        """The body parsed as JSON, or None if it is empty or not JSON."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            return None


class Transport(ABC):
    """
    Abstract base class for anything that can send a RequestRecord.

    Example:
        class EchoTransport(Transport):
            def execute(self, record):
                return ResponseSummary(status=200, body=record.body or "")
    """

    @abstractmethod
    def execute(self, record: RequestRecord) -> ResponseSummary:
        """
        Send one request.

        Args:
            record: The fully resolved request.

        Returns:
            Summary of the response, whatever its status code.

        Raises:
            TransportError: If no response could be obtained.
        """

    def close(self) -> None:
        """Release any resources held by the transport."""

    @property
    def name(self) -> str:
        """Transport name for logging."""
        return self.__class__.__name__

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


TransportFunc = Callable[[RequestRecord], ResponseSummary]


class FunctionTransport(Transport):
    """
    Wrap a plain function as a Transport.

    Example:
        def canned(record):
            return ResponseSummary(status=200, body='{"ok": true}')

        runner = Runner(FunctionTransport(canned))
    """

    def __init__(self, func: TransportFunc, name: Optional[str] = None):
        self._func = func
        self._name = name or getattr(func, "__name__", "function")

    def execute(self, record: RequestRecord) -> ResponseSummary:
        try:
            return self._func(record)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"{self._name} failed: {e}", url=record.url) from e

    @property
    def name(self) -> str:
        return self._name
