# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Shortcut constructors, one per HTTP method.

Each accepts either an absolute URL or a node handle plus a path::

    get("http://localhost:9200/_cluster/health").execute()
    post(node, "/index/_doc").set_body('{"a": 1}').execute()
"""

from __future__ import annotations

from typing import Any

from .http.models import Method
from .http.request import CurlRequest
from .node import ServiceHandle


def request(method: Method | str, target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    if isinstance(target, str):
        if path is not None:
            raise TypeError("path is only accepted together with a node handle")
        return CurlRequest(method, target, **kwargs)
    return CurlRequest.for_node(method, target, path or "/", **kwargs)


def get(target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    return request(Method.GET, target, path, **kwargs)


def post(target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    return request(Method.POST, target, path, **kwargs)


def put(target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    return request(Method.PUT, target, path, **kwargs)


def delete(target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    return request(Method.DELETE, target, path, **kwargs)


def head(target: str | ServiceHandle, path: str | None = None, **kwargs: Any) -> CurlRequest:
    return request(Method.HEAD, target, path, **kwargs)


__all__ = ["delete", "get", "head", "post", "put", "request"]
