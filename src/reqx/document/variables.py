"""
=============================================================================
VARIABLES AND INTERPOLATION
=============================================================================

Variables are declared with "@name = value" and used with "{{name}}".

=============================================================================
SCOPE
=============================================================================

Variables are FILE-GLOBAL. The table is built from every assignment in the
document before any section is resolved, so a variable is visible to every
section no matter where it was declared:

    @base = :8080             ◄── declared before the first ###
    ###
    GET {{base}}/health       ◄── used in section 1
    ###
    GET {{base}}/{{id}}       ◄── {{id}} resolves even though...
    ###
    @id = 42                  ◄── ...it is declared further down

Redeclaring a name overwrites it (last write wins), for the whole file:

    @n = 1
    ###
    GET :80/{{n}}             → http://localhost:80/2
    ###
    @n = 2

=============================================================================
INTERPOLATION
=============================================================================

"{{ name }}" is replaced by the table value. Whitespace inside the braces is
ignored. Substitution is a single pass over the input: a value that itself
contains "{{...}}" is inserted as-is and not expanded again.

An unclosed "{{" never matches and stays in the text literally. A
placeholder never spans lines.

Placeholders without a matching variable are reported back to the caller,
which decides whether that is fatal (strict mode) or a warning.

=============================================================================
"""

import logging
import re
from typing import Dict, Iterable, Iterator, Mapping, Optional

from .tokenizer import ClassifiedLine, LineKind


logger = logging.getLogger(__name__)


# {{ name }}
#   group 1 - the name, without the surrounding whitespace
PLACEHOLDER_PATTERN = re.compile(r"\{\{[ \t]*([^{}\n]*?)[ \t]*\}\}")


class VariableTable(Mapping[str, str]):
    """
    Read-only mapping of variable name → value for one document.

    Also remembers the line each final value came from, which is handy when
    reporting on a variable that was redefined.

        >>> table = VariableTable({"host": ":8080"}, {"host": 1})
        >>> table["host"]
        ':8080'
        >>> table.origin("host")
        1
    """

    def __init__(
        self,
        values: Optional[Mapping[str, str]] = None,
        origins: Optional[Mapping[str, int]] = None,
    ):
        self._values: Dict[str, str] = dict(values or {})
        self._origins: Dict[str, int] = dict(origins or {})

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableTable({self._values!r})"

    def origin(self, name: str) -> Optional[int]:
        """Line number of the assignment that produced the value of `name`."""
        return self._origins.get(name)


def build_variable_table(lines: Iterable[ClassifiedLine]) -> VariableTable:
    """
    Collect every assignment in the document into a VariableTable.

    Section boundaries are ignored on purpose: scope is the whole file.

    Args:
        lines: The full classified line stream from tokenize().

    Returns:
        The finished table, ready for interpolation.
    """
    values: Dict[str, str] = {}
    origins: Dict[str, int] = {}

    for line in lines:
        if line.kind is not LineKind.ASSIGNMENT:
            continue
        if line.name in values:
            logger.debug(
                f"Line {line.line}: @{line.name} redefined "
                f"(was {values[line.name]!r} from line {origins[line.name]})"
            )
        values[line.name] = line.value
        origins[line.name] = line.line

    return VariableTable(values, origins)


def interpolate(text: str, variables: Mapping[str, str]) -> tuple[str, list[str]]:
    """
    Replace every {{name}} placeholder in `text`.

    Unknown names are left in place, placeholder braces included.

    Args:
        text: URL, header value or body text.
        variables: Name → value mapping, usually a VariableTable.

    Returns:
        Tuple of (interpolated text, names that had no value). The list keeps
        first-seen order and holds each missing name once.

    Example:
        >>> interpolate("{{base}}/users/{{id}}", {"base": ":8080"})
        (':8080/users/{{id}}', ['id'])
    """
    missing: list[str] = []

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        if name not in missing:
            missing.append(name)
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, text), missing
