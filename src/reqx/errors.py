"""
=============================================================================
REQX ERRORS
=============================================================================

    ReqxError
    ├── DocumentError      the file cannot be read or decoded (fatal)
    ├── SectionError       one section cannot be resolved (local)
    ├── SelectionError     bad request index / method filter (runner)
    └── TransportError     the transport failed to execute a request

A DocumentError means no records at all. A SectionError only costs the
section it was raised for: the assembler records it against the section's
index and carries on with the rest of the file.

Each exception keeps its data as attributes so callers can report on them
without parsing the message.

=============================================================================
"""

from enum import Enum
from typing import Optional


class ReqxError(Exception):
    """Base class for every error raised by reqx."""


class DocumentError(ReqxError):
    """
    Raised when a .reqx file cannot be read or decoded as UTF-8 text.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class SectionErrorKind(str, Enum):
    """Why a section failed to resolve."""

    MISSING_URL = "missing-url"                   # head has a verb but no URL
    MALFORMED_HEADER = "malformed-header"         # header line is not "Name: value"
    UNRESOLVED_VARIABLE = "unresolved-variable"   # {{name}} not declared (strict mode)


class SectionError(ReqxError):
    """
    Raised when one section of a document cannot be turned into a request.

    Carries the section's 1-based index, the source line the problem was
    found on and the kind of failure:

        >>> err = SectionError(SectionErrorKind.MISSING_URL, index=2, line=9)
        >>> str(err)
        'request 2 (line 9): missing-url'
    """

    def __init__(
        self,
        kind: SectionErrorKind,
        index: int = 0,
        line: int = 0,
        detail: str = "",
    ):
        self.kind = kind
        self.index = index
        self.line = line
        self.detail = detail
        message = f"request {index} (line {line}): {kind.value}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class SelectionError(ReqxError):
    """Raised when a request index or method filter does not select anything valid."""


class TransportError(ReqxError):
    """
    Raised by a transport when a request could not be executed.

    An HTTP error status is NOT a TransportError; it is a normal response.
    This is for connection failures, invalid URLs, and the like.
    """

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url
