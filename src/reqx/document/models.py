"""
=============================================================================
DOCUMENT MODEL
=============================================================================

Value types produced by the parsing pipeline. All of them are frozen
dataclasses: once built they never change, so a parse result can be shared
between threads or handed to a transport without copying.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         OWNERSHIP                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ParseResult                                                        │
    │   ├── document: Document                                             │
    │   │     ├── lines:     (ClassifiedLine, ...)                         │
    │   │     ├── sections:  (Section, ...)       one per request block    │
    │   │     └── variables: VariableTable        file-global              │
    │   ├── records: (RequestRecord, ...)         one per good section     │
    │   └── errors:  (SectionError, ...)          one per bad section      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Section.index and RequestRecord.index are the same 1-based number. When a
section fails, its index shows up in `errors` and is simply missing from
`records`; the numbering of the other requests does not shift.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..errors import SectionError, SelectionError
from .methods import HTTPMethod
from .tokenizer import ClassifiedLine, LineKind
from .variables import VariableTable


@dataclass(frozen=True)
class Section:
    """
    A delimiter-bounded run of lines describing one request.

    Attributes:
        index:  1-based position among the sections that describe a request.
        line:   Source line number where the section starts.
        lines:  Every classified line between the two delimiters.
    """

    index: int
    line: int
    lines: tuple[ClassifiedLine, ...]

    @property
    def head(self) -> Optional[ClassifiedLine]:
        """The first content line: "[METHOD] URL"."""
        for line in self.lines:
            if line.is_content:
                return line
        return None

    @property
    def description(self) -> Optional[str]:
        """
        Text of the last comment written before the head line.

            # List users          ◄── not this one
            # Page 2 only         ◄── description = "Page 2 only"
            GET :8080/users?page=2
        """
        found = None
        for line in self.lines:
            if line.is_content:
                break
            if line.kind is LineKind.COMMENT:
                text = line.text.lstrip("#").strip()
                if text:
                    found = text
        return found


@dataclass(frozen=True)
class RequestRecord:
    """
    A fully resolved request, ready to hand to a transport.

    =========================================================================
    INVARIANTS
    =========================================================================

        method   always an HTTPMethod (explicit or inferred)
        url      never empty, never starts with ":" (":8080/x" has already
                 become "http://localhost:8080/x")
        headers  (name, value) pairs in source order; a header written
                 twice appears twice
        body     the body text, or None when the section has no body

    =========================================================================
    """

    method: HTTPMethod
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: Optional[str] = None
    index: int = 0
    line: int = 0
    description: Optional[str] = None

    def get_header(self, name: str, default: str = "") -> str:
        """
        First value of a header (case-insensitive lookup).

        Example:
            record.get_header("content-type")  # "application/json"
        """
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    def get_headers(self, name: str) -> list[str]:
        """All values of a header, in source order."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view, used for JSON output."""
        return {
            "index": self.index,
            "method": self.method.value,
            "url": self.url,
            "headers": [list(pair) for pair in self.headers],
            "body": self.body,
            "description": self.description,
        }


@dataclass(frozen=True)
class Document:
    """The tokenized and sectioned form of one .reqx file."""

    lines: tuple[ClassifiedLine, ...]
    sections: tuple[Section, ...]
    variables: VariableTable = field(default_factory=VariableTable)


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one document: the records that resolved and the
    errors of the sections that did not.
    """

    document: Document
    records: tuple[RequestRecord, ...] = ()
    errors: tuple[SectionError, ...] = ()

    @property
    def ok(self) -> bool:
        """True when every section resolved."""
        return not self.errors

    @property
    def section_count(self) -> int:
        return len(self.document.sections)

    def get(self, index: int) -> Optional[RequestRecord]:
        """The record for a 1-based section index, or None if it failed."""
        for record in self.records:
            if record.index == index:
                return record
        return None

    def error_for(self, index: int) -> Optional[SectionError]:
        for error in self.errors:
            if error.index == index:
                return error
        return None

    def select(
        self,
        index: Optional[int] = None,
        method: Union[HTTPMethod, str, None] = None,
    ) -> list[RequestRecord]:
        """
        Pick the records to run.

        Args:
            index: 1-based request index, or None for all requests.
            method: Keep only requests with this method (name or HTTPMethod).

        Returns:
            Matching records in source order. May be empty when a method
            filter matches nothing.

        Raises:
            SelectionError: If the index is out of range, names a section
                that failed to parse, or the method is not a known verb.
        """
        if index is not None:
            if not 1 <= index <= self.section_count:
                raise SelectionError(
                    f"Invalid request index: {index}. "
                    f"The file has {self.section_count} request(s)."
                )
            record = self.get(index)
            if record is None:
                raise SelectionError(f"Request {index} cannot be run: {self.error_for(index)}")
            selected = [record]
        else:
            selected = list(self.records)

        if method is not None:
            wanted = method if isinstance(method, HTTPMethod) else HTTPMethod.parse(method)
            if wanted is None:
                raise SelectionError(f"Invalid HTTP method filter: {method}")
            selected = [record for record in selected if record.method is wanted]

        return selected

    def raise_for_errors(self) -> None:
        """Raise the first SectionError, if any section failed."""
        if self.errors:
            raise self.errors[0]
