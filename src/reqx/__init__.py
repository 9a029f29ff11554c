"""
=============================================================================
REQX - HTTP Requests as Plain Text
=============================================================================

Describe HTTP requests in a .reqx file, parse them into fully resolved
request records, and replay them through any HTTP client.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQX ARCHITECTURE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. DOCUMENT PARSING (pure, no I/O)                                │
    │      - Line tokenizer and "###" section splitter                    │
    │      - File-global @variables and {{name}} interpolation            │
    │      - Method inference and ":port" localhost shorthand             │
    │                                                                      │
    │   2. TRANSPORT (pluggable)                                          │
    │      - Transport interface: RequestRecord in, ResponseSummary out   │
    │      - HttpxTransport built on httpx.Client                         │
    │                                                                      │
    │   3. RUNNER + CLI                                                   │
    │      - Select by index or method, dry run, text or JSON reports     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    reqx/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m reqx)
    ├── config.py            # ReqxConfig dataclass
    ├── errors.py            # Exception hierarchy
    ├── runner.py            # Runner, Exchange, RunReport
    ├── document/            # Parsing pipeline
    │   ├── tokenizer.py
    │   ├── sections.py
    │   ├── variables.py
    │   ├── resolver.py
    │   ├── assembler.py
    │   ├── models.py
    │   └── methods.py
    └── transport/           # Sending requests
        ├── base.py
        └── httpx_transport.py

=============================================================================
QUICK START
=============================================================================

    import reqx

    result = reqx.parse_file("api.reqx")
    for error in result.errors:
        print("skipped:", error)

    for record in result.records:
        print(record.method.value, record.url)

    report = reqx.Runner().run(result, method="GET")

=============================================================================
"""

__version__ = "0.1.0"

from .config import ReqxConfig
from .document import HTTPMethod, ParseResult, RequestRecord, parse, parse_file
from .errors import (
    DocumentError,
    ReqxError,
    SectionError,
    SectionErrorKind,
    SelectionError,
    TransportError,
)
from .runner import Exchange, Runner, RunReport
from .transport import FunctionTransport, HttpxTransport, ResponseSummary, Transport

__all__ = [
    "__version__",
    "parse",
    "parse_file",
    "HTTPMethod",
    "RequestRecord",
    "ParseResult",
    "ReqxConfig",
    "Runner",
    "RunReport",
    "Exchange",
    "Transport",
    "FunctionTransport",
    "HttpxTransport",
    "ResponseSummary",
    "ReqxError",
    "DocumentError",
    "SectionError",
    "SectionErrorKind",
    "SelectionError",
    "TransportError",
]
