# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum


class CurlError(Exception):
    """Base class for every error raised by escurl."""


class InvalidConfigurationError(CurlError, ValueError):
    """The request builder was misused (e.g. encoding changed after params were added)."""


class TransportError(CurlError):
    """The connection could not be opened, prepared or handed to its continuation."""

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class ResponseAccessError(CurlError):
    """The response could not be read and no error stream was available."""


class ConnectionStateError(CurlError):
    """A connection was used out of order (e.g. mutated after the request was sent)."""


class HttpStatusError(CurlError):
    """The server answered with an error status; its body is on the error stream."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"Server returned HTTP response code: {status_code} for URL: {url}")
        self.status_code = status_code
        self.url = url


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    Wrapped errors are categorized by their innermost cause.
    """
    import socket
    import ssl as ssl_module

    import httpx

    while isinstance(exc, (TransportError, ResponseAccessError)) and exc.__cause__ is not None:
        exc = exc.__cause__

    if isinstance(exc, HttpStatusError):
        return ErrorCategory.HTTP_ERROR

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "ConnectionStateError",
    "CurlError",
    "ErrorCategory",
    "HttpStatusError",
    "InvalidConfigurationError",
    "ResponseAccessError",
    "TransportError",
    "categorize_exception",
]
