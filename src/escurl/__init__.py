# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
escurl package entrypoint.

A fluent HTTP request builder for driving locally running services (typically a
search-engine node) from tests and integration code. Requests are dispatched
inline or on an injected executor, and response bodies are spooled to
temporary files instead of memory.
"""

from . import curl
from .config import CurlSettings, load_settings
from .errors import (
    ConnectionStateError,
    CurlError,
    ErrorCategory,
    HttpStatusError,
    InvalidConfigurationError,
    ResponseAccessError,
    TransportError,
    categorize_exception,
)
from .http import (
    CurlRequest,
    CurlResponse,
    HttpConnection,
    Method,
    ResponseProcessor,
    ResponseSink,
)
from .log import setup_logging
from .node import LocalNode, ServiceHandle
from .version import __version__

__all__ = [
    "ConnectionStateError",
    "CurlError",
    "CurlRequest",
    "CurlResponse",
    "CurlSettings",
    "ErrorCategory",
    "HttpConnection",
    "HttpStatusError",
    "InvalidConfigurationError",
    "LocalNode",
    "Method",
    "ResponseAccessError",
    "ResponseProcessor",
    "ResponseSink",
    "ServiceHandle",
    "TransportError",
    "categorize_exception",
    "curl",
    "load_settings",
    "setup_logging",
    "__version__",
]
