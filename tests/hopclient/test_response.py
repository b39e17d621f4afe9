import codecs
from unittest.mock import MagicMock

import httpx
import pytest

from hopclient.errors import ResponseParseError, TransportError
from hopclient.response import read_response

URL = httpx.URL("http://example.com/")


class TestReadResponse:
    def test_status_headers_and_body(self, fake_transport, raw_response):
        transport = fake_transport(
            URL, raw_response(200, [("Content-Type", "text/plain")], b"hello", reason="OK")
        )
        response = read_response(transport, None, url=URL)

        assert response.status_code == 200
        assert response.reason_phrase == "OK"
        assert response.headers["content-type"] == "text/plain"
        assert response.url == URL
        assert response.body.read() == b"hello"

    def test_unpacks_as_triple(self, fake_transport, raw_response):
        transport = fake_transport(URL, raw_response(204))
        status, headers, body = read_response(transport, None)
        assert status == 204
        assert isinstance(headers, httpx.Headers)
        assert body.read() == b""

    def test_repeated_headers_are_kept(self, fake_transport, raw_response):
        transport = fake_transport(
            URL, raw_response(200, [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        )
        response = read_response(transport, None)
        assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]

    def test_is_redirect(self, fake_transport, raw_response):
        response = read_response(fake_transport(URL, raw_response(307, [("Location", "/x")])), None)
        assert response.is_redirect
        response = read_response(fake_transport(URL, raw_response(404)), None)
        assert not response.is_redirect

    def test_malformed_status_line(self, fake_transport):
        with pytest.raises(ResponseParseError):
            read_response(fake_transport(URL, b"garbage\r\n\r\n"), None)

    def test_empty_response(self, fake_transport):
        with pytest.raises(ResponseParseError):
            read_response(fake_transport(URL, b""), None)

    def test_read_failure(self):
        stream = MagicMock()
        stream.readline.side_effect = ConnectionResetError(104, "Connection reset by peer")
        transport = MagicMock()
        transport.makefile.return_value = stream

        with pytest.raises(TransportError):
            read_response(transport, None)


class TestBodyEncoding:
    def test_charset_from_content_type(self, fake_transport, raw_response):
        body = "café".encode("latin-1")
        transport = fake_transport(
            URL, raw_response(200, [("Content-Type", "text/plain; charset=ISO-8859-1")], body)
        )
        response = read_response(transport, "utf-8")
        assert response.body.encoding == codecs.lookup("latin-1").name
        assert response.text() == "café"

    def test_default_encoding_when_undeclared(self, fake_transport, raw_response):
        body = "привет".encode("cp1251")
        transport = fake_transport(URL, raw_response(200, [("Content-Type", "text/plain")], body))
        response = read_response(transport, "cp1251")
        assert response.text() == "привет"

    def test_unknown_charset_falls_back(self, fake_transport, raw_response):
        transport = fake_transport(
            URL, raw_response(200, [("Content-Type", "text/plain; charset=x-unknown")], b"ok")
        )
        response = read_response(transport, None)
        assert response.body.encoding == "utf-8"
        assert response.text() == "ok"


class TestResponseReader:
    def test_iter_bytes(self, fake_transport, raw_response):
        transport = fake_transport(URL, raw_response(200, body=b"abcdefghij"))
        response = read_response(transport, None)
        assert list(response.body.iter_bytes(chunk_size=4)) == [b"abcd", b"efgh", b"ij"]

    def test_chunked_body(self, fake_transport):
        raw = (
            b"HTTP/1.1 200 OK\r\n"
            b"Transfer-Encoding: chunked\r\n"
            b"\r\n"
            b"5\r\nhello\r\n"
            b"6\r\n world\r\n"
            b"0\r\n\r\n"
        )
        response = read_response(fake_transport(URL, raw), None)
        assert response.body.read() == b"hello world"

    def test_close(self, fake_transport, raw_response):
        response = read_response(fake_transport(URL, raw_response(200, body=b"x")), None)
        with response.body as body:
            assert not body.closed
        assert body.closed

    def test_truncated_body(self, fake_transport):
        raw = b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nshort"
        response = read_response(fake_transport(URL, raw), None)
        with pytest.raises(ResponseParseError):
            response.body.read()
