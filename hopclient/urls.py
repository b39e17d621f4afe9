"""URL helpers on top of ``httpx.URL``.

``httpx.URL`` happily parses relative references, so the helpers here add the
distinction the redirect loop needs: text without a scheme is a
``RelativeUrlWithoutBase`` and only becomes usable once joined to a base.
"""

import ipaddress
from typing import Any
from urllib.parse import urlencode

import httpx

from .errors import InvalidUrl, RelativeUrlWithoutBase

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}


def parse_url(text: str) -> httpx.URL:
    try:
        url = httpx.URL(text)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidUrl(f"invalid url: {exc}") from exc

    if not url.scheme:
        raise RelativeUrlWithoutBase()
    if url.scheme in ("http", "https") and (not url.raw_host or b"%" in url.raw_host):
        raise InvalidUrl(f"invalid host in url: {text!r}")
    return url


def join_url(base: httpx.URL, text: str) -> httpx.URL:
    try:
        return base.join(text)
    except httpx.InvalidURL as exc:
        raise InvalidUrl("cannot join location with new url") from exc


def resolve_redirect(location: str, current_url: httpx.URL) -> httpx.URL:
    """Turn a ``Location`` value into the next hop's URL.

    Absolute locations are used as-is; relative ones resolve against the URL
    of the hop that produced them, not the original request URL.
    """
    try:
        return parse_url(location)
    except RelativeUrlWithoutBase:
        return join_url(current_url, location)
    except InvalidUrl as exc:
        raise InvalidUrl("invalid redirection url") from exc


def port_or_default(url: httpx.URL) -> int | None:
    if url.port is not None:
        return url.port
    return DEFAULT_PORTS.get(url.scheme)


def domain_of(url: httpx.URL) -> str | None:
    if not url.raw_host:
        return None
    host = url.raw_host.decode("ascii")
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return host
    return None


def request_target(url: httpx.URL) -> bytes:
    path = url.raw_path.partition(b"?")[0] or b"/"
    if url.query:
        return path + b"?" + url.query
    return path


def append_query_pair(url: httpx.URL, key: str, value: Any) -> httpx.URL:
    pair = urlencode([(key, str(value))])
    query = url.query.decode("ascii")
    query = f"{query}&{pair}" if query else pair
    return url.copy_with(query=query.encode("ascii"))
