"""
Section splitting: cut the classified line stream at every "###".

    @host = :8080          ┐
                           ├─ chunk 0: no content line → dropped
    ###                    ┘  (delimiter consumed)
    # health               ┐
    GET {{host}}/health    ├─ chunk 1: section 1
                           ┘
    ###
    # nothing here         ── chunk 2: comment only → dropped
    ###
    DELETE {{host}}/x/1    ── chunk 3: section 2

Only chunks that contain at least one content line survive. Survivors are
numbered from 1 in source order; that number is what "run request N"
refers to.
"""

from typing import Iterable

from .models import Section
from .tokenizer import ClassifiedLine, LineKind


def split_sections(lines: Iterable[ClassifiedLine]) -> list[Section]:
    """
    Group classified lines into request sections.

    Args:
        lines: Output of tokenize().

    Returns:
        Sections that describe a request, in source order.
    """
    chunks: list[list[ClassifiedLine]] = [[]]
    for line in lines:
        if line.kind is LineKind.DELIMITER:
            chunks.append([])
        else:
            chunks[-1].append(line)

    sections: list[Section] = []
    for chunk in chunks:
        if not any(line.is_content for line in chunk):
            continue
        sections.append(Section(index=len(sections) + 1, line=chunk[0].line, lines=tuple(chunk)))

    return sections
