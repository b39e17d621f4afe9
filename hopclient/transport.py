import socket
import ssl
from collections.abc import Callable
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING

import httpx

from .errors import InvalidUrl, TlsError, TransportError
from .urls import port_or_default

if TYPE_CHECKING:
    from .configs import EngineConfig


class TransportKind(StrEnum):
    PLAIN = "plain"
    TLS = "tls"


class Transport:
    """A connected byte stream used for exactly one hop.

    ``makefile`` is what ``http.client`` reads responses through, so closing
    the transport after the response head has been parsed leaves the socket
    open until the body reader lets go of it.
    """

    kind: TransportKind

    def __init__(self, sock: socket.socket, host: str, port: int):
        self.sock = sock
        self.host = host
        self.port = port

    def makefile(self, mode: str = "rb", buffering: int | None = None):
        return self.sock.makefile(mode, buffering)

    def sendall(self, data: bytes) -> None:
        self.sock.sendall(data)

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *_args) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.host}:{self.port}>"


class PlainTransport(Transport):
    kind = TransportKind.PLAIN

    @classmethod
    def open(cls, host: str, port: int, timeout: float | None = None) -> "PlainTransport":
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as exc:
            raise TransportError(f"cannot connect to {host}:{port}: {exc}") from exc
        return cls(sock, host, port)


class TlsTransport(Transport):
    kind = TransportKind.TLS

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        timeout: float | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> "TlsTransport":
        context = ssl_context if ssl_context is not None else ssl.create_default_context()
        try:
            raw = socket.create_connection((host, port), timeout=timeout)
        except OSError as exc:
            raise TransportError(f"cannot connect to {host}:{port}: {exc}") from exc

        try:
            sock = context.wrap_socket(raw, server_hostname=host)
        except ssl.SSLError as exc:
            raw.close()
            raise TlsError(f"tls handshake with {host}:{port} failed: {exc}") from exc
        except OSError as exc:
            raw.close()
            raise TransportError(f"cannot connect to {host}:{port}: {exc}") from exc
        return cls(sock, host, port)

    def version(self) -> str | None:
        return self.sock.version()


def unverified_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def connect(
    url: httpx.URL,
    *,
    timeout: float | None = None,
    ssl_context: ssl.SSLContext | None = None,
) -> Transport:
    """Open a fresh transport for ``url``, plaintext or TLS by scheme."""
    if not url.host:
        raise InvalidUrl("url has no host")
    host = url.host
    port = port_or_default(url)
    if port is None:
        raise InvalidUrl("url has no port")

    if url.scheme == "http":
        return PlainTransport.open(host, port, timeout=timeout)
    if url.scheme == "https":
        return TlsTransport.open(host, port, timeout=timeout, ssl_context=ssl_context)
    raise InvalidUrl("url contains unsupported scheme")


def configured_connector(config: "EngineConfig") -> Callable[[httpx.URL], Transport]:
    ssl_context = None if config.HTTP_REQUEST_SSL_VERIFY else unverified_ssl_context()
    return partial(connect, timeout=config.HTTP_REQUEST_CONNECT_TIMEOUT, ssl_context=ssl_context)
