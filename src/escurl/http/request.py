# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fluent request builder and its connect/execute dispatch."""

from __future__ import annotations

import codecs
import io
import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import replace
from typing import Any
from urllib.parse import quote_plus

import httpx

from ..config import CurlSettings, load_settings
from ..errors import CurlError, InvalidConfigurationError, TransportError, categorize_exception
from ..node import ServiceHandle, node_base_url
from .connection import HttpConnection
from .models import BodyPayload, ConnectionHook, CustomSetup, Header, Method, RequestPayload
from .processor import ResponseProcessor
from .response import CurlResponse

logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[HttpConnection], None]
ResponseHandler = Callable[[CurlResponse], None]
ErrorHandler = Callable[[Exception], None]


class CurlRequest:
    """
    Declarative description of one HTTP request.

    Mutators return the request so calls can be chained::

        response = (
            CurlRequest(Method.GET, "http://localhost:9200/_search")
            .add_param("q", "title:python")
            .add_header("Accept", "application/json")
            .execute()
        )

    Dispatching never mutates the request: the query string is appended to a
    copy of the URL each time, so the same request can be executed again.
    """

    def __init__(
        self,
        method: Method | str,
        url: str,
        *,
        settings: CurlSettings | None = None,
        client: httpx.Client | None = None,
    ):
        self.settings = settings or load_settings()
        self._method = Method.coerce(method)
        self._url = url
        self._proxy: Any = None
        self._encoding = self.settings.encoding
        self._params: list[str] = []
        self._headers: list[Header] = []
        self._payload: RequestPayload = BodyPayload()
        self._executor: Executor | None = None
        self._client = client

    @classmethod
    def for_node(
        cls,
        method: Method | str,
        node: ServiceHandle,
        path: str,
        *,
        settings: CurlSettings | None = None,
        client: httpx.Client | None = None,
    ) -> CurlRequest:
        """Address ``path`` on the HTTP port of a locally running node."""
        base_url = node_base_url(node)
        if path.startswith("/"):
            url = base_url + path
        else:
            url = f"{base_url}/{path}"
        return cls(method, url, settings=settings, client=client)

    # -- read accessors --------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def final_url(self) -> str:
        """URL with the queued query parameters appended."""
        if not self._params:
            return self._url
        separator = "&" if "?" in self._url else "?"
        return f"{self._url}{separator}{'&'.join(self._params)}"

    @property
    def method(self) -> Method:
        return self._method

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def proxy(self) -> Any:
        return self._proxy

    @property
    def body(self) -> str | None:
        return self._payload.body

    @property
    def payload(self) -> RequestPayload:
        return self._payload

    @property
    def params(self) -> tuple[str, ...]:
        return tuple(self._params)

    @property
    def headers(self) -> tuple[Header, ...]:
        return tuple(self._headers)

    @property
    def worker_pool(self) -> Executor | None:
        return self._executor

    # -- builder ---------------------------------------------------------

    def set_method(self, method: Method | str) -> CurlRequest:
        self._method = Method.coerce(method)
        return self

    def set_proxy(self, proxy: Any) -> CurlRequest:
        """Route the request through ``proxy`` (anything httpx accepts as ``proxy=``)."""
        self._proxy = proxy
        return self

    def set_encoding(self, encoding: str) -> CurlRequest:
        if self._params:
            raise InvalidConfigurationError("This method must be called before add_param.")
        self._encoding = encoding
        return self

    def set_body(self, body: str | None) -> CurlRequest:
        self._payload = replace(self._payload, body=body)
        return self

    def on_connect(self, hook: ConnectionHook) -> CurlRequest:
        """
        Hand the live connection to ``hook(request, connection)`` before dispatch.

        The hook replaces the default body write; it must write any output itself.
        """
        self._payload = CustomSetup(hook=hook, body=self._payload.body)
        return self

    def add_param(self, key: str, value: Any) -> CurlRequest:
        if value is None:
            return self
        self._params.append(f"{self._encode(key)}={self._encode(value)}")
        return self

    def add_header(self, key: str, value: str) -> CurlRequest:
        self._headers.append((key, value))
        return self

    def set_worker_pool(self, executor: Executor | None) -> CurlRequest:
        self._executor = executor
        return self

    def _encode(self, value: Any) -> str:
        try:
            codecs.lookup(self._encoding)
            return quote_plus(str(value), encoding=self._encoding)
        except (LookupError, UnicodeEncodeError) as exc:
            raise InvalidConfigurationError(f"Invalid encoding: {self._encoding}") from exc

    # -- dispatch --------------------------------------------------------

    def connect(self, on_connection: ConnectionHandler, on_error: ErrorHandler) -> Future[None] | None:
        """
        Open a connection and pass it to ``on_connection``; failures go to ``on_error``.

        With a worker pool the dispatch is submitted to it and the future is returned
        immediately; otherwise it runs on the calling thread and None is returned.
        The connection is closed once the continuation returns.
        """
        if self._executor is not None:
            return self._executor.submit(self._dispatch, on_connection, on_error)
        self._dispatch(on_connection, on_error)
        return None

    def execute(
        self,
        on_response: ResponseHandler | None = None,
        on_error: ErrorHandler | None = None,
    ) -> Any:
        """
        Dispatch and materialize the response.

        Without continuations this runs synchronously (ignoring any worker pool) and
        returns the CurlResponse, raising CurlError when the exchange failed. With
        both continuations it behaves like ``connect`` and the response is passed to
        ``on_response``.
        """
        if on_response is None and on_error is None:
            return self._execute_sync()
        if on_response is None or on_error is None:
            raise InvalidConfigurationError("execute() takes both on_response and on_error, or neither.")

        def handle_connection(connection: HttpConnection) -> None:
            response = CurlResponse()
            ResponseProcessor(self._encoding, settings=self.settings, response=response).accept(connection)
            on_response(response)

        return self.connect(handle_connection, on_error)

    def _execute_sync(self) -> CurlResponse:
        response = CurlResponse()
        processor = ResponseProcessor(self._encoding, settings=self.settings, response=response)

        def fail(exc: Exception) -> None:
            raise CurlError("Failed to process a request.") from exc

        self._dispatch(processor, fail)
        return response

    def _open_connection(self, url: str) -> HttpConnection:
        return HttpConnection(url, proxy=self._proxy, settings=self.settings, client=self._client)

    def _dispatch(self, on_connection: ConnectionHandler, on_error: ErrorHandler) -> None:
        url = self.final_url
        connection: HttpConnection | None = None
        try:
            logger.debug("Dispatching %s %s", self._method.value, url)
            connection = self._open_connection(url)
            connection.set_request_method(self._method.value)
            for key, value in self._headers:
                connection.add_request_property(key, value)

            payload = self._payload
            if isinstance(payload, CustomSetup):
                payload.hook(self, connection)
            elif payload.body is not None:
                connection.do_output = True
                with io.TextIOWrapper(connection.get_output_stream(), encoding=self._encoding, newline="") as writer:
                    writer.write(payload.body)
                    writer.flush()

            on_connection(connection)
        except Exception as exc:
            logger.debug("Request to %s failed (%s): %s", url, categorize_exception(exc).value, exc)
            error = TransportError(f"Failed to access to {url}", url=url)
            error.__cause__ = exc
            on_error(error)
        finally:
            if connection is not None:
                connection.close()


__all__ = ["ConnectionHandler", "CurlRequest", "ErrorHandler", "ResponseHandler"]
