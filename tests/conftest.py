"""
pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reqx.document import RequestRecord
from reqx.errors import TransportError
from reqx.transport import ResponseSummary, Transport


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


QUICKSTART = """\
@domain = :8080/api/v1
@token = Bearer super-secret-jwt

###
# Health check
{{domain}}/health

###
# Create a user
POST {{domain}}/users
Authorization: {{token}}
Content-Type: application/json

{"name": "Ada Lovelace", "email": "ada@example.com"}

###
# Remove the user again
DELETE {{domain}}/users/123
Authorization: {{token}}
"""


@pytest.fixture
def quickstart_text() -> str:
    """The quick-start document from the README."""
    return QUICKSTART


@pytest.fixture
def quickstart_path() -> Path:
    """The quick-start document shipped in examples/."""
    return EXAMPLES_DIR / "quickstart.reqx"


class RecordingTransport(Transport):
    """
    Transport that records every request and answers with a canned response.

    Requests whose URL contains `fail_on` raise TransportError instead.
    """

    def __init__(
        self,
        response: Optional[ResponseSummary] = None,
        fail_on: Optional[str] = None,
    ):
        self.response = response or ResponseSummary(
            status=200,
            reason="OK",
            headers=(("Content-Type", "application/json"),),
            body='{"message": "hello"}',
        )
        self.fail_on = fail_on
        self.calls: list[RequestRecord] = []
        self.closed = False

    def execute(self, record: RequestRecord) -> ResponseSummary:
        self.calls.append(record)
        if self.fail_on and self.fail_on in record.url:
            raise TransportError("connection refused", url=record.url)
        return self.response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def recording_transport() -> RecordingTransport:
    """A transport that never touches the network."""
    return RecordingTransport()
