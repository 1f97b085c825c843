# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed, single-use HTTP connection."""

from __future__ import annotations

import io
import logging
from typing import Any

import httpx

from ..config import CurlSettings, load_settings
from ..errors import ConnectionStateError, HttpStatusError
from .models import Header

logger = logging.getLogger(__name__)


class RequestBodyStream(io.BytesIO):
    """Request body buffer that keeps its payload once the writer on top of it is closed."""

    def __init__(self) -> None:
        super().__init__()
        self._payload = b""

    def close(self) -> None:
        if not self.closed:
            self._payload = self.getvalue()
        super().close()

    @property
    def payload(self) -> bytes:
        return self._payload if self.closed else self.getvalue()


class ResponseStream(io.RawIOBase):
    """Readable binary stream over a streamed httpx response body."""

    def __init__(self, response: httpx.Response, chunk_size: int | None = None):
        super().__init__()
        self._response = response
        self._chunk_size = chunk_size
        self._chunks: Any = None
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        if self._chunks is None:
            self._chunks = self._response.iter_bytes(self._chunk_size)
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class HttpConnection:
    """
    A single HTTP exchange that is prepared first and sent lazily.

    Method, headers and the request body can be set until the exchange is sent.
    Sending happens on the first access to the status code, the response headers
    or one of the response streams. The response body is streamed; nothing is read
    until a stream is consumed.
    """

    def __init__(
        self,
        url: str,
        *,
        proxy: Any = None,
        settings: CurlSettings | None = None,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.settings = settings or load_settings()
        self.method = "GET"
        self.do_output = False
        self._headers: list[Header] = []
        self._output: RequestBodyStream | None = None
        self._response: httpx.Response | None = None
        self._closed = False
        self._owns_client = client is None
        self._client = client or httpx.Client(
            proxy=proxy,
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    @property
    def connected(self) -> bool:
        return self._response is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def request_headers(self) -> list[Header]:
        return list(self._headers)

    def _ensure_not_sent(self) -> None:
        if self._closed:
            raise ConnectionStateError(f"Connection to {self.url} is closed")
        if self._response is not None:
            raise ConnectionStateError(f"Request to {self.url} was already sent")

    def set_request_method(self, method: str) -> None:
        self._ensure_not_sent()
        self.method = str(method).upper()

    def add_request_property(self, key: str, value: str) -> None:
        self._ensure_not_sent()
        self._headers.append((key, value))

    def get_output_stream(self) -> RequestBodyStream:
        self._ensure_not_sent()
        if not self.do_output:
            raise ConnectionStateError("Output is disabled; set do_output before writing a request body")
        if self._output is None:
            self._output = RequestBodyStream()
        return self._output

    def connect(self) -> httpx.Response:
        """Send the request (once) and return the streamed response."""
        if self._response is not None:
            return self._response
        if self._closed:
            raise ConnectionStateError(f"Connection to {self.url} is closed")

        headers = list(self._headers)
        if not any(name.lower() == "user-agent" for name, _ in headers):
            headers.append(("User-Agent", self.settings.user_agent))
        content = self._output.payload if self._output is not None else None

        request = self._client.build_request(
            self.method,
            self.url,
            headers=headers,
            content=content,
            timeout=self.settings.timeout,
        )
        logger.debug("Sending %s %s", self.method, self.url)
        self._response = self._client.send(
            request,
            stream=True,
            follow_redirects=self.settings.allow_redirects,
        )
        return self._response

    @property
    def status_code(self) -> int:
        return self.connect().status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.connect().headers

    def get_input_stream(self) -> ResponseStream:
        response = self.connect()
        if response.status_code >= 400:
            raise HttpStatusError(response.status_code, self.url)
        return ResponseStream(response, self.settings.chunk_size)

    def get_error_stream(self) -> ResponseStream | None:
        """Return the body of an error response, or None if there is none to read."""
        response = self._response
        if response is None or response.status_code < 400:
            return None
        return ResponseStream(response, self.settings.chunk_size)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._response is not None:
                self._response.close()
        finally:
            if self._owns_client:
                self._client.close()

    def __enter__(self) -> HttpConnection:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["HttpConnection", "RequestBodyStream", "ResponseStream"]
