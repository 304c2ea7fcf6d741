"""
Unit tests for HTTP response building.
"""

import io

import pytest

from tinyhttpd.http.response import (
    HTTPResponse,
    HTTPStatus,
    ok,
    text,
    created,
    bad_request,
    not_found,
    internal_error,
)


class RecordingWriter:
    """Collects each write() call separately."""

    def __init__(self):
        self.writes = []

    def write(self, data: bytes) -> int:
        self.writes.append(data)
        return len(data)


class FailingWriter:
    """Fails on the Nth write."""

    def __init__(self, fail_on: int = 1):
        self.fail_on = fail_on
        self.calls = 0

    def write(self, data: bytes) -> int:
        self.calls += 1
        if self.calls >= self.fail_on:
            raise ConnectionResetError("peer went away")
        return len(data)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"X-Custom": "value"},
            body=b"test",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"X-Custom: value\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_empty_body_has_zero_length(self):
        """Test that Content-Length is always emitted."""
        result = HTTPResponse().to_bytes()
        assert result == b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"

    def test_content_length_counts_bytes(self):
        """Test that multi-byte characters are counted in bytes."""
        response = HTTPResponse().set_body("héllo")

        assert response.body == "héllo".encode("utf-8")
        assert b"Content-Length: 6\r\n" in response.to_bytes()

    def test_caller_content_length_is_replaced(self):
        """Test that Content-Length always reflects the final body."""
        response = (HTTPResponse()
            .set_header("Content-Length", "999")
            .set_body(b"abc"))

        result = response.to_bytes()

        assert b"Content-Length: 3\r\n" in result
        assert b"999" not in result

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers["X-One"] == "1"
        assert response.headers["X-Two"] == "2"

    def test_set_header_overwrites(self):
        """Test that setting a header again replaces its value."""
        response = HTTPResponse().set_header("X-One", "1").set_header("X-One", "2")

        assert response.headers == {"X-One": "2"}
        assert response.to_bytes().count(b"X-One") == 1

    def test_set_body_replaces(self):
        """Test that set_body has replace, not append, semantics."""
        response = HTTPResponse().set_body("first").set_body("second")
        assert response.body == b"second"

    def test_set_status(self):
        """Test setting the status by enum or plain int."""
        assert HTTPResponse().set_status(201).status is HTTPStatus.CREATED
        assert HTTPResponse().set_status(HTTPStatus.BAD_REQUEST).status == 400

    @pytest.mark.parametrize("code", [204, 302, 418, 503])
    def test_unsupported_status_is_rejected(self, code: int):
        """Test that codes outside the supported set are a programming error."""
        with pytest.raises(ValueError):
            HTTPResponse().set_status(code)

        with pytest.raises(ValueError):
            HTTPResponse(status=code)


class TestSend:
    """Tests for writing a response to a connection."""

    def test_send_writes_head_then_body(self):
        """Test that send() writes the head and body as separate writes."""
        writer = RecordingWriter()
        text("abc").send(writer)

        assert len(writer.writes) == 2
        assert writer.writes[0].endswith(b"\r\n\r\n")
        assert writer.writes[1] == b"abc"

    def test_send_matches_to_bytes(self):
        """Test that the bytes on the wire equal to_bytes()."""
        response = text("abc").set_header("X-One", "1")
        buffer = io.BytesIO()

        response.send(buffer)

        assert buffer.getvalue() == response.to_bytes()

    def test_send_empty_body_single_write(self):
        """Test that an empty body produces only the head write."""
        writer = RecordingWriter()
        ok().send(writer)

        assert writer.writes == [b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"]

    def test_write_failure_propagates(self):
        """Test that a failing write aborts the remaining writes."""
        writer = FailingWriter(fail_on=1)

        with pytest.raises(ConnectionResetError):
            text("abc").send(writer)

        assert writer.calls == 1

    def test_round_trip(self, parse_response):
        """Test that re-parsing serialized bytes recovers what was set."""
        response = (HTTPResponse()
            .set_status(HTTPStatus.CREATED)
            .set_header("Content-Type", "text/plain")
            .set_header("X-Trace", "a: b")
            .set_body(b"payload\r\n\r\nwith separators"))

        buffer = io.BytesIO()
        response.send(buffer)
        status, reason, headers, body = parse_response(buffer.getvalue())

        assert status == 201
        assert reason == "Created"
        assert headers == {
            "Content-Type": "text/plain",
            "X-Trace": "a: b",
            "Content-Length": str(len(body)),
        }
        assert body == b"payload\r\n\r\nwith separators"


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok(self):
        """Test ok() function."""
        response = ok()
        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.headers == {}

        response = ok(b"\x00\x01", content_type="application/octet-stream")
        assert response.body == b"\x00\x01"
        assert response.headers["Content-Type"] == "application/octet-stream"

    def test_text(self):
        """Test text() function."""
        response = text("Hello")
        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Type"] == "text/plain"
        assert response.body == b"Hello"

    def test_created(self):
        """Test created() function."""
        response = created()
        assert response.status == HTTPStatus.CREATED
        assert response.body == b""

    def test_error_responses(self):
        """Test 400 and 404 helpers have empty bodies."""
        assert bad_request().status == HTTPStatus.BAD_REQUEST
        assert bad_request().body == b""
        assert not_found().status == HTTPStatus.NOT_FOUND
        assert not_found().body == b""

    def test_internal_error(self):
        """Test internal_error() carries its message."""
        response = internal_error("Is a directory")
        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert response.body == b"Is a directory"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test the fixed code to phrase mapping."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.CREATED.phrase == "Created"
        assert HTTPStatus.BAD_REQUEST.phrase == "Bad Request"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"

    def test_supported_set(self):
        """Test that exactly five codes are supported."""
        assert sorted(int(s) for s in HTTPStatus) == [200, 201, 400, 404, 500]

    def test_status_categories(self):
        """Test status category helpers."""
        assert HTTPStatus.CREATED.is_success
        assert HTTPStatus.NOT_FOUND.is_error
        assert not HTTPStatus.OK.is_error
