import codecs
import logging
from http import HTTPMethod
from typing import Any

import httpx

from .configs import engine_config
from .errors import RequestConsumed
from .headers import TOKEN_RE, header_append, header_insert
from .redirect import Connector, RedirectLoop
from .response import Response
from .urls import append_query_pair, parse_url


class Request:
    """A mutable request descriptor, consumed by ``send``.

    Raises ``InvalidUrl`` when ``base_url`` is not an absolute URL.
    """

    def __init__(self, base_url: str):
        self.url: httpx.URL = parse_url(base_url)
        self.method: str = HTTPMethod.GET.value
        self.headers = httpx.Headers()
        self.follow_redirects: bool = engine_config.FOLLOW_REDIRECTS
        self.default_encoding: str | None = engine_config.DEFAULT_ENCODING
        self._consumed = False

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.url}]>"

    def _ensure_unsent(self) -> None:
        if self._consumed:
            raise RequestConsumed()

    def set_method(self, method: HTTPMethod | str) -> "Request":
        self._ensure_unsent()
        method = str(method)
        if not TOKEN_RE.fullmatch(method):
            raise ValueError(f"invalid http method: {method!r}")
        self.method = method
        return self

    def add_query_param(self, key: str, value: Any) -> "Request":
        self._ensure_unsent()
        self.url = append_query_pair(self.url, key, value)
        return self

    def set_header(self, name: str, value: Any) -> "Request":
        self._ensure_unsent()
        self.headers = header_insert(self.headers, name, value)
        return self

    def append_header(self, name: str, value: Any) -> "Request":
        self._ensure_unsent()
        self.headers = header_append(self.headers, name, value)
        return self

    def set_follow_redirects(self, follow_redirects: bool) -> "Request":
        self._ensure_unsent()
        self.follow_redirects = follow_redirects
        return self

    def set_default_encoding(self, encoding: str | None) -> "Request":
        self._ensure_unsent()
        self.default_encoding = codecs.lookup(encoding).name if encoding else None
        return self

    def send(
        self,
        *,
        connector: Connector | None = None,
        max_redirects: int | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> Response:
        self._ensure_unsent()
        self._consumed = True

        if max_redirects is None:
            max_redirects = engine_config.MAX_REDIRECTS

        loop = RedirectLoop(
            self,
            connector=connector,
            max_redirects=max_redirects,
            logger=logger,
        )
        return loop.run()
