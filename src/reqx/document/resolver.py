"""
=============================================================================
SECTION RESOLVER
=============================================================================

Turns one Section into one RequestRecord.

=============================================================================
SECTION ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ONE .reqx SECTION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  # Create a user                       ◄── description (optional)   │
    │  POST {{base}}/users                   ◄── HEAD: [METHOD] URL        │
    │  ──┬─ ──────┬──────                                                  │
    │    │        └── raw URL, interpolated then normalized                │
    │    └── optional verb (case-insensitive)                              │
    │                                                                      │
    │  Authorization: Bearer {{token}}       ◄── HEADERS until first blank │
    │  Content-Type: application/json                                      │
    │                                        ◄── separating blank line    │
    │  {                                     ◄── BODY: everything after,   │
    │    "name": "Ada"                           kept verbatim             │
    │  }                                                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
RESOLUTION STEPS
=============================================================================

    1. Head       first content line → (explicit method?, raw URL)
    2. Headers    content lines up to the first blank → [(name, value)]
    3. Body       content after that blank → text or None
    4. Variables  {{name}} in URL, header values and body
    5. URL        ":port/path" → "http://localhost:port/path"
    6. Method     explicit wins; otherwise POST with a body, GET without

Any problem becomes a SectionError carrying the section index and the line
it was found on. The resolver never looks at other sections.

=============================================================================
"""

import logging
from typing import Mapping, Optional

from ..errors import SectionError, SectionErrorKind
from .methods import HTTPMethod
from .models import RequestRecord, Section
from .tokenizer import ClassifiedLine, LineKind
from .variables import interpolate


logger = logging.getLogger(__name__)


LOCALHOST = "http://localhost"


def normalize_url(url: str) -> str:
    """
    Expand the localhost shorthand.

        >>> normalize_url(":3000/api")
        'http://localhost:3000/api'
        >>> normalize_url("https://example.com/x")
        'https://example.com/x'
    """
    if url.startswith(":"):
        return LOCALHOST + url
    return url


def infer_method(explicit: Optional[HTTPMethod], body: Optional[str]) -> HTTPMethod:
    """An explicit method always wins; otherwise POST when there is a body."""
    if explicit is not None:
        return explicit
    return HTTPMethod.POST if body is not None else HTTPMethod.GET


class SectionResolver:
    """
    Resolves sections against one document's variable table.

    One resolver can be reused for every section of the same document. It
    holds no state besides the table and the strictness flag, so resolving
    the same section twice gives equal records.

    Args:
        variables: The document's VariableTable (any name → value mapping).
        strict_variables: If True, a {{name}} with no matching variable is a
            SectionError. If False (default), it is left in the text as-is
            and a warning is logged.
    """

    def __init__(self, variables: Mapping[str, str], strict_variables: bool = False):
        self.variables = variables
        self.strict_variables = strict_variables

    def resolve(self, section: Section) -> RequestRecord:
        """
        Resolve one section.

        Args:
            section: A section with at least one content line.

        Returns:
            The resolved RequestRecord.

        Raises:
            SectionError: MISSING_URL, MALFORMED_HEADER or, in strict mode,
                UNRESOLVED_VARIABLE.
        """
        # =====================================================================
        # STEP 1: Head line
        # =====================================================================
        head = section.head
        if head is None:
            raise SectionError(
                SectionErrorKind.MISSING_URL, section.index, section.line, "no request line"
            )
        explicit_method, raw_url = self._parse_head(section, head)

        # =====================================================================
        # STEP 2 + 3: Headers, then body after the first blank line
        # =====================================================================
        rest = section.lines[section.lines.index(head) + 1:]
        raw_headers, raw_body = self._split_headers_and_body(section, rest)

        # =====================================================================
        # STEP 4: Interpolate variables
        # =====================================================================
        # name -> first line it appears on, in source order
        missing: dict[str, int] = {}
        url = self._interpolate(raw_url, head.line, missing)
        headers = tuple(
            (name, self._interpolate(value, line, missing))
            for line, name, value in raw_headers
        )
        body = None
        if raw_body:
            body = "\n".join(self._interpolate(text, line, missing) for line, text in raw_body)

        if missing:
            names = ", ".join(missing)
            first_line = min(missing.values())
            if self.strict_variables:
                raise SectionError(
                    SectionErrorKind.UNRESOLVED_VARIABLE,
                    section.index,
                    first_line,
                    f"undefined variable(s): {names}",
                )
            logger.warning(
                f"Request {section.index} (line {first_line}): "
                f"undefined variable(s) left as-is: {names}"
            )

        # =====================================================================
        # STEP 5: Normalize URL
        # =====================================================================
        url = url.strip()
        if not url:
            raise SectionError(
                SectionErrorKind.MISSING_URL,
                section.index,
                head.line,
                f"URL is empty after interpolation: {raw_url!r}",
            )
        url = normalize_url(url)

        # =====================================================================
        # STEP 6: Method
        # =====================================================================
        return RequestRecord(
            method=infer_method(explicit_method, body),
            url=url,
            headers=headers,
            body=body,
            index=section.index,
            line=head.line,
            description=section.description,
        )

    def _parse_head(
        self, section: Section, head: ClassifiedLine
    ) -> tuple[Optional[HTTPMethod], str]:
        """
        Split "[METHOD] URL" into (method or None, raw URL).

        A first token that is not a verb is part of the URL, not an error:
        "{{base}}/users" is a URL with an inferred method.
        """
        tokens = head.text.split(None, 1)
        method = HTTPMethod.parse(tokens[0])
        if method is None:
            return None, head.text

        if len(tokens) < 2:
            raise SectionError(
                SectionErrorKind.MISSING_URL,
                section.index,
                head.line,
                f"expected a URL after {method.value}",
            )
        return method, tokens[1].strip()

    def _split_headers_and_body(
        self, section: Section, lines: tuple[ClassifiedLine, ...]
    ) -> tuple[list[tuple[int, str, str]], list[tuple[int, str]]]:
        """
        Walk the lines after the head.

        Until the first blank line every content line is a header. After it,
        everything is body. Comments and assignments are skipped in both
        regions.

        Returns:
            (line, name, value) per header and (line, text) per body line.
            An empty body list means the section has no body.
        """
        headers: list[tuple[int, str, str]] = []
        body_lines: list[tuple[int, str]] = []
        in_body = False

        for line in lines:
            if line.kind in (LineKind.COMMENT, LineKind.ASSIGNMENT):
                continue

            if not in_body:
                if line.is_blank:
                    in_body = True
                else:
                    name, value = self._parse_header(section, line)
                    headers.append((line.line, name, value))
                continue

            body_lines.append((line.line, "" if line.is_blank else line.raw))

        # Interior blank lines belong to the body, surrounding ones do not
        while body_lines and not body_lines[-1][1].strip():
            body_lines.pop()
        while body_lines and not body_lines[0][1].strip():
            body_lines.pop(0)

        return headers, body_lines

    def _parse_header(self, section: Section, line: ClassifiedLine) -> tuple[str, str]:
        """
        Parse "Name: value" (split on the first colon, both sides trimmed).

        The name must be a single non-empty token; anything else is a
        MALFORMED_HEADER error for this section.
        """
        name, colon, value = line.text.partition(":")
        name = name.strip()
        if not colon or not name or len(name.split()) != 1:
            raise SectionError(
                SectionErrorKind.MALFORMED_HEADER,
                section.index,
                line.line,
                f"expected 'Name: value', got {line.text!r}",
            )
        return name, value.strip()

    def _interpolate(self, text: str, line: int, missing: dict[str, int]) -> str:
        result, unknown = interpolate(text, self.variables)
        for name in unknown:
            missing.setdefault(name, line)
        return result


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def resolve_section(
    section: Section,
    variables: Mapping[str, str],
    strict_variables: bool = False,
) -> RequestRecord:
    """
    Resolve a single section in one call.

    Use SectionResolver directly when resolving many sections of the same
    document.
    """
    return SectionResolver(variables, strict_variables=strict_variables).resolve(section)
