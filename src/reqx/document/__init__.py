"""
=============================================================================
.reqx DOCUMENT PARSING
=============================================================================

This package turns .reqx text into resolved request records. It performs no
I/O apart from parse_file() reading its input, never touches the network,
and keeps no state between calls.

=============================================================================
THE .reqx FORMAT
=============================================================================

    @base = :8080/api/v1                 variable, visible in the whole file
    @token = Bearer super-secret-jwt

    ###                                  section delimiter
    # Health check                       comment (ignored, used as title)
    {{base}}/health                      no verb, no body → GET

    ###
    POST {{base}}/users                  explicit verb
    Authorization: {{token}}             headers until the first blank line
    Content-Type: application/json

    {"name": "Ada"}                      body: everything after the blank

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ tokenizer.py   raw text → ClassifiedLine per line                   │
    │ sections.py    lines → Section per "###" block                      │
    │ variables.py   lines → VariableTable, {{name}} interpolation        │
    │ resolver.py    Section + table → RequestRecord                      │
    │ assembler.py   the whole pipeline: parse(), parse_file()            │
    │ models.py      Section, RequestRecord, Document, ParseResult        │
    │ methods.py     HTTPMethod                                           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .assembler import build_document, parse, parse_file
from .methods import HTTPMethod
from .models import Document, ParseResult, RequestRecord, Section
from .resolver import SectionResolver, normalize_url, resolve_section
from .sections import split_sections
from .tokenizer import ClassifiedLine, LineKind, tokenize
from .variables import VariableTable, build_variable_table, interpolate

__all__ = [
    # Pipeline
    "parse",
    "parse_file",
    "build_document",

    # Stages
    "tokenize",
    "split_sections",
    "build_variable_table",
    "interpolate",
    "SectionResolver",
    "resolve_section",
    "normalize_url",

    # Model
    "ClassifiedLine",
    "LineKind",
    "Section",
    "VariableTable",
    "Document",
    "RequestRecord",
    "ParseResult",
    "HTTPMethod",
]
