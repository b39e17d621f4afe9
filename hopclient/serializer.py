import logging

import httpx

from .errors import TransportError
from .headers import header_insert
from .transport import Transport
from .urls import domain_of, request_target

logger = logging.getLogger(__name__)

HTTP_VERSION = b"HTTP/1.1"
CRLF = b"\r\n"


def hop_headers(headers: httpx.Headers, url: httpx.URL) -> httpx.Headers:
    """Headers for one hop: the caller's map plus the forced per-hop values.

    The caller's map is left untouched, so a ``Host`` forced for one hop never
    leaks into the next.
    """
    view = header_insert(headers, "connection", "close")
    domain = domain_of(url)
    if domain is not None:
        view = header_insert(view, "Host", domain)
    return view


def render_request_line(method: str, url: httpx.URL) -> bytes:
    return method.encode("ascii") + b" " + request_target(url) + b" " + HTTP_VERSION + CRLF


def write_request(transport: Transport, method: str, url: httpx.URL, headers: httpx.Headers) -> None:
    request_line = render_request_line(method, url)
    logger.debug("%s", request_line.rstrip(CRLF).decode("ascii"))

    try:
        with transport.makefile("wb") as writer:
            writer.write(request_line)
            for name, value in hop_headers(headers, url).raw:
                writer.write(name + b": " + value + CRLF)
            writer.write(CRLF)
            writer.flush()
    except OSError as exc:
        raise TransportError(f"cannot write request: {exc}") from exc
