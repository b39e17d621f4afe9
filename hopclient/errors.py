class HttpError(Exception):
    detail: str = "HTTP request failed."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.__class__.detail
        super().__init__(self.detail)


# =============================================================================
# URL errors
# =============================================================================
class InvalidUrl(HttpError):
    detail = "invalid url"


class RelativeUrlWithoutBase(InvalidUrl):
    detail = "relative url without a base"


# =============================================================================
# Response errors
# =============================================================================
class InvalidResponse(HttpError):
    detail = "invalid response"


class ResponseParseError(HttpError):
    detail = "malformed response"


class TooManyRedirects(HttpError):
    detail = "too many redirects"

    def __init__(self, max_redirects: int, detail: str | None = None) -> None:
        super().__init__(detail or f"exceeded the limit of {max_redirects} redirects")
        self.max_redirects = max_redirects


# =============================================================================
# Header errors
# =============================================================================
class HeaderError(HttpError):
    detail = "invalid header"


# =============================================================================
# Transport errors
# =============================================================================
class TransportError(HttpError):
    detail = "transport error"


class TlsError(TransportError):
    detail = "tls error"


# =============================================================================
# Descriptor lifecycle
# =============================================================================
class RequestConsumed(HttpError):
    detail = "request has already been sent"
