# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request building, dispatch and response materialization."""

from .connection import HttpConnection, RequestBodyStream, ResponseStream
from .models import BodyPayload, ConnectionHook, CustomSetup, Header, Method, RequestPayload
from .processor import ResponseConnection, ResponseProcessor
from .request import ConnectionHandler, CurlRequest, ErrorHandler, ResponseHandler
from .response import CurlResponse, ResponseSink

__all__ = [
    "BodyPayload",
    "ConnectionHandler",
    "ConnectionHook",
    "CurlRequest",
    "CurlResponse",
    "CustomSetup",
    "ErrorHandler",
    "Header",
    "HttpConnection",
    "Method",
    "RequestBodyStream",
    "RequestPayload",
    "ResponseConnection",
    "ResponseHandler",
    "ResponseProcessor",
    "ResponseSink",
    "ResponseStream",
]
