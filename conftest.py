"""Pytest 配置文件"""

import io

import httpx
import pytest


class _Sink(io.BytesIO):
    def __init__(self, owner: "FakeTransport"):
        super().__init__()
        self._owner = owner

    def close(self):
        if not self.closed:
            self._owner.sent += self.getvalue()
        super().close()


class FakeTransport:
    """In-memory transport that replays one scripted response."""

    kind = "fake"

    def __init__(self, url: httpx.URL, response: bytes):
        self.url = url
        self.response = response
        self.sent = b""
        self.closed = False

    def makefile(self, mode: str = "rb", buffering: int | None = None):
        if "w" in mode:
            return _Sink(self)
        return io.BytesIO(self.response)

    def sendall(self, data: bytes) -> None:
        self.sent += data

    def close(self) -> None:
        self.closed = True

    @property
    def request_line(self) -> bytes:
        return self.sent.split(b"\r\n", 1)[0]

    @property
    def request_headers(self) -> list[tuple[bytes, bytes]]:
        head = self.sent.split(b"\r\n\r\n", 1)[0]
        lines = head.split(b"\r\n")[1:]
        return [tuple(line.split(b": ", 1)) for line in lines]


class ScriptedConnector:
    """Connector handing out one FakeTransport per hop, in script order."""

    def __init__(self, responses: list[bytes] | dict[str, bytes]):
        self._responses = responses
        self.transports: list[FakeTransport] = []

    def __call__(self, url: httpx.URL) -> FakeTransport:
        if isinstance(self._responses, dict):
            response = self._responses[str(url)]
        else:
            response = self._responses[len(self.transports)]
        transport = FakeTransport(url, response)
        self.transports.append(transport)
        return transport

    @property
    def urls(self) -> list[str]:
        return [str(transport.url) for transport in self.transports]


def build_response(
    status: int,
    headers: list[tuple[str, str]] | None = None,
    body: bytes = b"",
    reason: str = "",
) -> bytes:
    lines = [f"HTTP/1.1 {status} {reason}".rstrip().encode("latin-1")]
    for name, value in headers or []:
        lines.append(f"{name}: {value}".encode("latin-1"))
    lines.append(f"Content-Length: {len(body)}".encode("latin-1"))
    return b"\r\n".join(lines) + b"\r\n\r\n" + body


@pytest.fixture
def raw_response():
    """构建原始 HTTP 响应字节"""
    return build_response


@pytest.fixture
def scripted_connector():
    """按脚本顺序返回假传输的连接器工厂"""
    return ScriptedConnector


@pytest.fixture
def fake_transport():
    """单个假传输工厂"""
    return FakeTransport
