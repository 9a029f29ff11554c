"""
=============================================================================
REQUEST MODEL ASSEMBLER
=============================================================================

Runs the whole pipeline over one document.

    ┌───────────────────────────────────────────────────────────────────┐
    │  text                                                             │
    │    │                                                              │
    │    ▼                                                              │
    │  tokenize()  ──────────────► classified lines                     │
    │    │                              │                               │
    │    ▼                              ▼                               │
    │  split_sections()          build_variable_table()                 │
    │    │                              │   (whole file, before any     │
    │    │                              │    section is resolved)       │
    │    ▼                              ▼                               │
    │  SectionResolver.resolve(section) for each section, in order      │
    │    │                                                              │
    │    ├── RequestRecord ──► records                                  │
    │    └── SectionError  ──► errors   (collect)  or raise  (abort)    │
    │                                                                   │
    │  ParseResult(document, records, errors)                           │
    └───────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR POLICY
=============================================================================

"collect" (default): a bad section is recorded and skipped. The other
requests still resolve and keep their indices, so "run request 3" still
means the third request even if the second one is broken.

"abort": the first SectionError is raised out of parse().

A file that cannot be read or decoded raises DocumentError under both
policies.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..config import ReqxConfig
from ..errors import DocumentError, SectionError
from .models import Document, ParseResult
from .resolver import SectionResolver
from .sections import split_sections
from .tokenizer import tokenize
from .variables import build_variable_table


logger = logging.getLogger(__name__)


def build_document(text: str) -> Document:
    """Tokenize and section a document, and build its variable table."""
    lines = tokenize(text)
    return Document(
        lines=tuple(lines),
        sections=tuple(split_sections(lines)),
        variables=build_variable_table(lines),
    )


def parse(text: Union[str, bytes], config: Optional[ReqxConfig] = None) -> ParseResult:
    """
    Parse .reqx text into resolved request records.

    Args:
        text: Document text. Bytes are decoded as UTF-8.
        config: Parsing options. Defaults to ReqxConfig().

    Returns:
        ParseResult with one record per good section and one error per bad
        section, both in source order.

    Raises:
        DocumentError: If bytes are not valid UTF-8.
        SectionError: Under the "abort" policy, for the first bad section.
    """
    config = config or ReqxConfig()
    config.validate()

    if isinstance(text, bytes):
        text = _decode(text)

    document = build_document(text)
    resolver = SectionResolver(document.variables, strict_variables=config.strict_variables)

    records = []
    errors = []
    for section in document.sections:
        try:
            records.append(resolver.resolve(section))
        except SectionError as e:
            if config.error_policy == "abort":
                raise
            logger.warning(str(e))
            errors.append(e)

    logger.info(
        f"Parsed {len(document.sections)} request(s): "
        f"{len(records)} resolved, {len(errors)} failed"
    )
    return ParseResult(document=document, records=tuple(records), errors=tuple(errors))


def parse_file(path: Union[str, Path], config: Optional[ReqxConfig] = None) -> ParseResult:
    """
    Read and parse a .reqx file.

    Raises:
        DocumentError: If the file cannot be read or is not UTF-8 text.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DocumentError(f"cannot read file: {e.strerror or e}", path=str(path)) from e

    try:
        text = _decode(data)
    except DocumentError as e:
        raise DocumentError(str(e), path=str(path)) from e

    logger.debug(f"Loaded {path} ({len(data)} bytes)")
    return parse(text, config)


def _decode(data: bytes) -> str:
    # utf-8-sig drops a leading BOM if there is one
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentError(f"not valid UTF-8 text: {e}") from e
