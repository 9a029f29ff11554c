"""
Default transport, built on an httpx.Client.

One client is shared by every request of a run, so cookies set by an
earlier request (a login, say) are sent with the later ones, and
connections to the same host are reused.

Headers are passed as a list of pairs, so a header written twice in the
.reqx file goes out twice. Names and values are sent as UTF-8 bytes, so a
non-ASCII value such as "X-Name: café" goes out unchanged.
"""

import logging
import time
from typing import Optional

import httpx

from ..document.models import RequestRecord
from ..errors import TransportError
from .base import ResponseSummary, Transport


logger = logging.getLogger(__name__)


def encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    """(name, value) pairs as UTF-8 bytes, order and duplicates kept."""
    return [(name.encode("utf-8"), value.encode("utf-8")) for name, value in headers]


class HttpxTransport(Transport):
    """
    Send RequestRecords with httpx.

    Args:
        timeout: Seconds to wait for a response (None waits forever).
        verify_tls: Verify certificates of https:// URLs.
        client: Client to use. A new one is created (and closed by close())
            when not given; timeout and verify_tls only apply to that one.
    """

    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        verify_tls: bool = True,
        client: Optional[httpx.Client] = None,
    ):
        self.timeout = timeout
        self.verify_tls = verify_tls
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(
            timeout=timeout,
            verify=verify_tls,
        )

    def execute(self, record: RequestRecord) -> ResponseSummary:
        logger.debug(f"Sending {record.method.value} {record.url}")
        content = record.body.encode("utf-8") if record.body is not None else None

        start_time = time.perf_counter()
        try:
            response = self._client.request(
                record.method.value,
                record.url,
                headers=encode_headers(record.headers),
                content=content,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request failed: {e}", url=record.url) from e
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        return ResponseSummary(
            status=response.status_code,
            reason=response.reason_phrase or "",
            headers=tuple(response.headers.multi_items()),
            body=response.text,
            elapsed_ms=elapsed_ms,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
