import re
from typing import Any

import httpx

from .errors import HeaderError

TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_TEXT_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")
_BYTES_VALUE_RE = re.compile(rb"[\t\x20-\x7e\x80-\xff]*")


def validate_header_name(name: str) -> str:
    if not isinstance(name, str) or not TOKEN_RE.fullmatch(name):
        raise HeaderError(f"invalid header name: {name!r}")
    return name


def to_header_value(value: Any) -> str | bytes:
    """Convert a caller-supplied value into a validated header value.

    Accepts text, raw bytes and numbers. Booleans and ``None`` are rejected
    rather than rendered, since ``"True"`` is rarely what a caller meant.
    """
    if isinstance(value, bool) or value is None:
        raise HeaderError(f"unsupported header value type: {type(value).__name__}")
    if isinstance(value, str):
        if not _TEXT_VALUE_RE.fullmatch(value):
            raise HeaderError(f"invalid header value: {value!r}")
        return value
    if isinstance(value, (bytes, bytearray)):
        if not _BYTES_VALUE_RE.fullmatch(value):
            raise HeaderError(f"invalid header value: {bytes(value)!r}")
        return bytes(value)
    if isinstance(value, (int, float)):
        return str(value)
    raise HeaderError(f"unsupported header value type: {type(value).__name__}")


def _encode(name: str, value: Any) -> tuple[bytes, bytes]:
    name = validate_header_name(name)
    value = to_header_value(value)
    if isinstance(value, str):
        value = value.encode("ascii")
    return name.encode("ascii"), value


def header_insert(headers: httpx.Headers, name: str, value: Any) -> httpx.Headers:
    """Return a new map where ``value`` replaces every value of ``name``."""
    raw_name, raw_value = _encode(name, value)
    lookup = raw_name.lower()
    kept = [(key, item) for key, item in headers.raw if key.lower() != lookup]
    return httpx.Headers([*kept, (raw_name, raw_value)])


def header_append(headers: httpx.Headers, name: str, value: Any) -> httpx.Headers:
    """Return a new map holding one more value for ``name``."""
    raw_name, raw_value = _encode(name, value)
    return httpx.Headers([*headers.raw, (raw_name, raw_value)])


def header_text(value: str | bytes) -> str:
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise HeaderError("header value is not visible ascii") from exc
    if not _TEXT_VALUE_RE.fullmatch(value):
        raise HeaderError("header value is not visible ascii")
    return value
