# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io

import pytest

from escurl.config import CurlSettings
from escurl.errors import HttpStatusError, ResponseAccessError
from escurl.http.processor import ResponseProcessor
from escurl.http.response import CurlResponse


class ExplodingStream:
    """Returns ``head`` and then fails like a reset connection."""

    def __init__(self, head: bytes):
        self._head = head
        self.closed = False

    def read(self, size=-1):
        if self._head:
            chunk, self._head = self._head[:size], self._head[size:]
            return chunk
        raise OSError("connection reset by peer")

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, status=200, input_stream=None, error_body=None, status_exc=None, input_exc=None):
        self._status = status
        self._input_stream = input_stream
        self._error_body = error_body
        self._status_exc = status_exc
        self._input_exc = input_exc
        self.error_stream_calls = 0

    @property
    def status_code(self):
        if self._status_exc is not None:
            raise self._status_exc
        return self._status

    def get_input_stream(self):
        if self._input_exc is not None:
            raise self._input_exc
        return self._input_stream

    def get_error_stream(self):
        self.error_stream_calls += 1
        if self._error_body is None:
            return None
        return io.BytesIO(self._error_body)


@pytest.fixture
def settings(tmp_path):
    return CurlSettings(temp_dir=str(tmp_path), chunk_size=7)


def test_drains_body_to_temp_file(settings, tmp_path):
    body = bytes(range(256)) * 13
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(status=200, input_stream=io.BytesIO(body)))

    response = processor.response
    assert response.encoding == "UTF-8"
    assert response.http_status_code == 200
    assert response.content_exception is None
    assert response.content_file.parent == tmp_path
    assert response.content_file.name.startswith("esclient-")
    assert response.content_file.name.endswith(".tmp")
    assert response.content_file.read_bytes() == body


def test_empty_body_produces_empty_file(settings):
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(status=204, input_stream=io.BytesIO(b"")))
    assert processor.response.content_file.read_bytes() == b""


def test_temp_naming_follows_settings(tmp_path):
    settings = CurlSettings(temp_dir=str(tmp_path), temp_prefix="node-", temp_suffix=".json")
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(input_stream=io.BytesIO(b"{}")))
    name = processor.response.content_file.name
    assert name.startswith("node-") and name.endswith(".json")


def test_missing_input_stream_falls_back_to_error_stream(settings):
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(status=200, input_stream=None, error_body=b"fallback"))
    assert processor.response.content_file.read_bytes() == b"fallback"
    assert processor.response.content_exception is None


def test_partial_read_without_error_stream_is_fatal(settings, tmp_path):
    stream = ExplodingStream(b"partial-bytes")
    processor = ResponseProcessor("UTF-8", settings=settings)

    with pytest.raises(ResponseAccessError) as excinfo:
        processor.accept(FakeConnection(status=200, input_stream=stream))

    assert isinstance(excinfo.value.__cause__, OSError)
    assert stream.closed is True
    assert processor.response.content_file is None
    assert list(tmp_path.iterdir()) == []


def test_partial_read_with_error_stream_keeps_both(settings, tmp_path):
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(
        FakeConnection(status=200, input_stream=ExplodingStream(b"partial"), error_body=b'{"error":"x"}')
    )

    response = processor.response
    assert isinstance(response.content_exception, OSError)
    assert response.has_content_exception is True
    assert response.content_file.read_bytes() == b'{"error":"x"}'
    # only the fallback file remains
    assert list(tmp_path.iterdir()) == [response.content_file]


def test_http_error_status_reads_error_stream(settings):
    exc = HttpStatusError(500, "http://localhost:9200/idx")
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(status=500, input_exc=exc, error_body=b'{"error":"x"}'))

    response = processor.response
    assert response.http_status_code == 500
    assert response.content_exception is exc
    assert response.content_as_string() == '{"error":"x"}'


def test_status_failure_uses_error_stream(settings):
    exc = ValueError("malformed status line")
    processor = ResponseProcessor("ISO-8859-1", settings=settings)
    processor.accept(FakeConnection(status_exc=exc, error_body=b"diag"))

    response = processor.response
    assert response.encoding == "ISO-8859-1"
    assert response.http_status_code is None
    assert response.content_exception is exc
    assert response.content_file.read_bytes() == b"diag"


def test_status_failure_without_error_stream_is_fatal(settings):
    processor = ResponseProcessor("UTF-8", settings=settings)
    with pytest.raises(ResponseAccessError, match="Failed to access the response."):
        processor.accept(FakeConnection(status_exc=ValueError("bad status")))
    assert processor.response.content_file is None
    assert processor.response.content_exception is None


def test_failing_error_stream_is_fatal(settings, tmp_path):
    class BadErrorConnection(FakeConnection):
        def get_error_stream(self):
            return ExplodingStream(b"")

    processor = ResponseProcessor("UTF-8", settings=settings)
    with pytest.raises(ResponseAccessError):
        processor.accept(BadErrorConnection(input_exc=HttpStatusError(502, "http://x")))
    assert processor.response.content_file is None
    assert list(tmp_path.iterdir()) == []


def test_temp_file_creation_failure(tmp_path):
    settings = CurlSettings(temp_dir=str(tmp_path / "missing"))
    processor = ResponseProcessor("UTF-8", settings=settings)
    with pytest.raises(ResponseAccessError) as excinfo:
        processor.accept(FakeConnection(input_stream=io.BytesIO(b"x")))
    assert isinstance(excinfo.value.__cause__, ResponseAccessError)
    assert "temporary file" in str(excinfo.value.__cause__)


def test_processor_populates_injected_sink(settings):
    class RecordingSink:
        def __init__(self):
            self.calls = []

        def set_encoding(self, encoding):
            self.calls.append(("encoding", encoding))

        def set_http_status_code(self, status_code):
            self.calls.append(("status", status_code))

        def set_content_file(self, path):
            self.calls.append(("file", path.read_bytes()))

        def set_content_exception(self, exc):
            self.calls.append(("exception", exc))

    sink = RecordingSink()
    ResponseProcessor("UTF-8", settings=settings, response=sink)(
        FakeConnection(status=201, input_stream=io.BytesIO(b"created"))
    )
    assert sink.calls == [("encoding", "UTF-8"), ("status", 201), ("file", b"created")]


def test_response_accessors_and_close(settings):
    processor = ResponseProcessor("UTF-8", settings=settings)
    processor.accept(FakeConnection(input_stream=io.BytesIO('{"status":"grün"}'.encode())))

    with processor.response as response:
        assert response.content_as_json() == {"status": "grün"}
        with response.open_content() as content:
            assert content.read(2) == b'{"'
        path = response.content_file
    assert not path.exists()


def test_response_without_content_raises():
    response = CurlResponse()
    response.set_content_exception(OSError("reset"))
    with pytest.raises(Exception) as excinfo:
        response.content_as_bytes()
    assert isinstance(excinfo.value.__cause__, OSError)
    response.close()
