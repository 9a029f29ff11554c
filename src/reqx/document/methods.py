"""
=============================================================================
HTTP METHODS
=============================================================================

The verbs a .reqx head line may start with.

    ┌──────────┬──────────────────────────────────────────────────────────┐
    │ Method   │ Typical use                      safe   idempotent      │
    ├──────────┼──────────────────────────────────────────────────────────┤
    │ GET      │ Read a resource                   yes    yes            │
    │ HEAD     │ GET without a body                yes    yes            │
    │ OPTIONS  │ Ask which methods are allowed     yes    yes            │
    │ PUT      │ Replace a resource                no     yes            │
    │ DELETE   │ Remove a resource                 no     yes            │
    │ POST     │ Create / submit data              no     no             │
    │ PATCH    │ Partial update                    no     no             │
    └──────────┴──────────────────────────────────────────────────────────┘

When a head line has no verb the method is inferred: POST if the section
carries a body, GET otherwise. Adding a verb means adding a member here;
the tokenizer and resolver pick it up through HTTPMethod.parse().

=============================================================================
"""

from enum import Enum
from typing import Optional


class HTTPMethod(str, Enum):
    """
    HTTP request methods understood by the DSL.

    This enum extends str, so members compare equal to their names:

        >>> HTTPMethod.GET == "GET"
        True
        >>> HTTPMethod.parse("delete")
        <HTTPMethod.DELETE: 'DELETE'>
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> Optional["HTTPMethod"]:
        """
        Match a token against the known verbs, ignoring case.

        Returns None for anything that is not a verb. Callers treat that as
        "no explicit method", never as an error.
        """
        return cls.__members__.get(token.strip().upper())
