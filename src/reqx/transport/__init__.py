"""
Transports: the pluggable capability that actually sends requests.

    base.py              Transport, ResponseSummary, FunctionTransport
    httpx_transport.py   HttpxTransport (default, uses httpx)
"""

from ..errors import TransportError
from .base import FunctionTransport, ResponseSummary, Transport, TransportFunc
from .httpx_transport import HttpxTransport

__all__ = [
    "Transport",
    "TransportFunc",
    "TransportError",
    "ResponseSummary",
    "FunctionTransport",
    "HttpxTransport",
]
