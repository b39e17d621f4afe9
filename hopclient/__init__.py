"""Blocking HTTP/1.1 request engine with redirect following."""

from .errors import (
    HeaderError,
    HttpError,
    InvalidResponse,
    InvalidUrl,
    RelativeUrlWithoutBase,
    RequestConsumed,
    ResponseParseError,
    TlsError,
    TooManyRedirects,
    TransportError,
)
from .redirect import HopState, RedirectLoop
from .request import Request
from .response import Response, ResponseReader
from .transport import PlainTransport, TlsTransport, Transport, TransportKind, connect

__version__ = "0.1.0"

__all__ = [
    "Request",
    "Response",
    "ResponseReader",
    "RedirectLoop",
    "HopState",
    "Transport",
    "TransportKind",
    "PlainTransport",
    "TlsTransport",
    "connect",
    "HttpError",
    "InvalidUrl",
    "RelativeUrlWithoutBase",
    "InvalidResponse",
    "ResponseParseError",
    "TooManyRedirects",
    "HeaderError",
    "TransportError",
    "TlsError",
    "RequestConsumed",
]
