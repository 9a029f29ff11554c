"""
=============================================================================
REQX TOKENIZER
=============================================================================

Splits raw .reqx text into lines and classifies each one by its role.

=============================================================================
LINE CLASSES
=============================================================================

Every line is trimmed, then checked against these rules IN ORDER. The first
rule that matches wins:

    ┌───┬──────────────┬───────────────────────────────┬──────────────────┐
    │ # │ Kind         │ Rule                          │ Example          │
    ├───┼──────────────┼───────────────────────────────┼──────────────────┤
    │ 1 │ DELIMITER    │ exactly "###"                 │ ###              │
    │ 2 │ ASSIGNMENT   │ "@name = value"               │ @host = :8080    │
    │ 3 │ COMMENT      │ starts with "#"               │ # Create a user  │
    │ 4 │ BLANK        │ empty after trimming          │                  │
    │ 5 │ CONTENT      │ anything else                 │ GET {{host}}/a   │
    └───┴──────────────┴───────────────────────────────┴──────────────────┘

Order matters: "###" also starts with "#", so the delimiter rule has to be
checked before the comment rule.

A line that starts with "@" but is not a valid assignment ("@token" with no
"=", "@my-var = 1" with a dash in the name) is CONTENT. It then surfaces as
a URL, a malformed header or body text, depending on where it sits.

=============================================================================
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


class LineKind(str, Enum):
    """Role of a single source line."""

    DELIMITER = "delimiter"
    ASSIGNMENT = "assignment"
    COMMENT = "comment"
    BLANK = "blank"
    CONTENT = "content"


@dataclass(frozen=True)
class ClassifiedLine:
    """
    One source line together with its classification.

    Attributes:
        kind:   LineKind of the line.
        line:   1-based line number in the source text.
        text:   The line with surrounding whitespace removed.
        raw:    The line exactly as written (minus the line terminator).
                Body capture uses this so indentation survives.
        name:   Variable name, for ASSIGNMENT lines only.
        value:  Variable value, for ASSIGNMENT lines only.
    """

    kind: LineKind
    line: int
    text: str
    raw: str = ""
    name: Optional[str] = None
    value: Optional[str] = None

    @property
    def is_content(self) -> bool:
        return self.kind is LineKind.CONTENT

    @property
    def is_blank(self) -> bool:
        return self.kind is LineKind.BLANK


DELIMITER = "###"

# @<identifier> = <value>
#   group 1 - identifier (letters, digits, underscore)
#   group 2 - everything after the first "=", trimmed by the caller
ASSIGNMENT_PATTERN = re.compile(r"^@([A-Za-z0-9_]+)\s*=(.*)$")


def classify_line(raw: str, line: int) -> ClassifiedLine:
    """
    Classify a single source line.

    Args:
        raw: The line without its terminator.
        line: 1-based line number, kept for error messages.

    Returns:
        The ClassifiedLine for this line.
    """
    text = raw.strip()

    if text == DELIMITER:
        return ClassifiedLine(LineKind.DELIMITER, line, text, raw)

    if text.startswith("@"):
        match = ASSIGNMENT_PATTERN.match(text)
        if match:
            name, value = match.group(1), match.group(2).strip()
            return ClassifiedLine(LineKind.ASSIGNMENT, line, text, raw, name, value)
        logger.debug(f"Line {line}: not a valid assignment, treating as content: {text!r}")
        return ClassifiedLine(LineKind.CONTENT, line, text, raw)

    if text.startswith("#"):
        return ClassifiedLine(LineKind.COMMENT, line, text, raw)

    if not text:
        return ClassifiedLine(LineKind.BLANK, line, text, raw)

    return ClassifiedLine(LineKind.CONTENT, line, text, raw)


def tokenize(text: str) -> list[ClassifiedLine]:
    """
    Classify every line of a .reqx document.

    Pure function of the input: no I/O, no shared state.

    Example:
        >>> [l.kind.value for l in tokenize("@a = 1\\n###\\nGET :80")]
        ['assignment', 'delimiter', 'content']
    """
    return [
        classify_line(raw, number)
        for number, raw in enumerate(text.splitlines(), start=1)
    ]
