"""The redirect-following send loop.

One iteration is one hop: connect to the current URL, write the request,
parse the response head, then either hand the response back or resolve the
``Location`` header into the next hop's URL. Only the working URL changes
between hops; every hop gets a fresh connection.
"""

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx

from .configs import engine_config
from .errors import HeaderError, InvalidResponse, TooManyRedirects
from .ext_logging import request_id_generator, request_id_var
from .headers import header_text
from .response import Response, read_response
from .serializer import write_request
from .transport import Transport, configured_connector
from .urls import port_or_default, resolve_redirect

if TYPE_CHECKING:
    from .request import Request

Connector = Callable[[httpx.URL], Transport]
ResponseReaderFn = Callable[..., Response]


class HopState(StrEnum):
    CONNECTING = "connecting"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    DECIDING = "deciding"
    REDIRECTING = "redirecting"
    DONE = "done"
    FAILED = "failed"


class RedirectLoop:
    def __init__(
        self,
        request: "Request",
        *,
        connector: Connector | None = None,
        response_reader: ResponseReaderFn = read_response,
        max_redirects: int | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.request = request
        self.max_redirects = max_redirects
        self.state = HopState.CONNECTING
        self.hops: list[httpx.URL] = []
        self.redirects = 0
        self._connector = connector or configured_connector(engine_config)
        self._response_reader = response_reader
        self._log = logger or logging.getLogger(__name__)

    def run(self) -> Response:
        token = request_id_var.set(request_id_generator())
        try:
            return self._run()
        except Exception:
            self.state = HopState.FAILED
            raise
        finally:
            request_id_var.reset(token)

    def _run(self) -> Response:
        url = self.request.url
        while True:
            response = self._hop(url)

            self.state = HopState.DECIDING
            self._log.debug("status code %d", response.status_code)

            if not self.request.follow_redirects or not response.is_redirect:
                self.state = HopState.DONE
                return response

            self.state = HopState.REDIRECTING
            try:
                if self.max_redirects is not None and self.redirects >= self.max_redirects:
                    raise TooManyRedirects(self.max_redirects)
                location = self._location(response)
                next_url = resolve_redirect(location, url)
            finally:
                response.close()

            self.redirects += 1
            self._log.debug("redirected to %s giving url %s", location, next_url)
            url = next_url

    def _hop(self, url: httpx.URL) -> Response:
        self.state = HopState.CONNECTING
        self._log.debug("trying to connect to %s:%s", url.host, port_or_default(url))
        self.hops.append(url)
        transport = self._connector(url)

        # closing here only drops our handle, the body reader keeps the socket
        try:
            self.state = HopState.SENDING
            write_request(transport, self.request.method, url, self.request.headers)

            self.state = HopState.AWAITING_RESPONSE
            return self._response_reader(
                transport,
                self.request.default_encoding,
                method=self.request.method,
                url=url,
            )
        finally:
            transport.close()

    @staticmethod
    def _location(response: Response) -> str:
        values = response.headers.get_list("location")
        if not values:
            raise InvalidResponse("redirect has no location header")
        try:
            return header_text(values[0])
        except HeaderError as exc:
            raise InvalidResponse("location to str error") from exc
