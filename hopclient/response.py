import codecs
import http.client
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import ResponseParseError, TransportError
from .transport import Transport

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "utf-8"


def _known_encoding(name: str | None) -> str | None:
    if not name:
        return None
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


class ResponseReader:
    """Lazy reader over a response body.

    Owns the hop's socket once the response head has been parsed; closing the
    reader is what finally releases the connection.
    """

    def __init__(self, raw: http.client.HTTPResponse, encoding: str):
        self._raw = raw
        self.encoding = encoding

    @property
    def closed(self) -> bool:
        return self._raw.closed

    def read(self, amt: int | None = None) -> bytes:
        try:
            return self._raw.read(amt)
        except http.client.HTTPException as exc:
            raise ResponseParseError(f"cannot read response body: {exc!r}") from exc
        except OSError as exc:
            raise TransportError(f"cannot read response body: {exc}") from exc

    def iter_bytes(self, chunk_size: int = 8192) -> Iterator[bytes]:
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                break
            yield chunk

    def text(self) -> str:
        return self.read().decode(self.encoding, errors="replace")

    def close(self) -> None:
        self._raw.close()

    def __enter__(self) -> "ResponseReader":
        return self

    def __exit__(self, *_args: Any) -> None:
        self.close()


@dataclass(frozen=True)
class Response:
    status_code: int
    headers: httpx.Headers
    body: ResponseReader
    url: httpx.URL | None = None
    reason_phrase: str = ""

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    def __iter__(self) -> Iterator[Any]:
        return iter((self.status_code, self.headers, self.body))

    def text(self) -> str:
        return self.body.text()

    def close(self) -> None:
        self.body.close()


def read_response(
    transport: Transport,
    default_encoding: str | None,
    *,
    method: str = "GET",
    url: httpx.URL | None = None,
) -> Response:
    raw = http.client.HTTPResponse(transport, method=method)
    try:
        raw.begin()
    except http.client.HTTPException as exc:
        raw.close()
        raise ResponseParseError(f"cannot parse response: {exc!r}") from exc
    except OSError as exc:
        raw.close()
        raise TransportError(f"cannot read response: {exc}") from exc

    headers = httpx.Headers(
        [(name.encode("latin-1"), value.encode("latin-1")) for name, value in raw.msg.items()]
    )
    encoding = (
        _known_encoding(raw.msg.get_content_charset())
        or _known_encoding(default_encoding)
        or FALLBACK_ENCODING
    )
    logger.debug("response %s %s, body encoding %s", raw.status, raw.reason, encoding)

    return Response(
        status_code=raw.status,
        headers=headers,
        body=ResponseReader(raw, encoding),
        url=url,
        reason_phrase=raw.reason,
    )
