# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request-side data models: methods and the body/hook payload alternative."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .connection import HttpConnection
    from .request import CurlRequest

Header = tuple[str, str]
ConnectionHook = Callable[["CurlRequest", "HttpConnection"], None]


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @classmethod
    def coerce(cls, value: Method | str) -> Method:
        if isinstance(value, Method):
            return value
        return cls(str(value).strip().upper())


@dataclass(frozen=True)
class BodyPayload:
    """Default payload: the literal body (if any) is written by the dispatcher."""

    body: str | None = None


@dataclass(frozen=True)
class CustomSetup:
    """
    Payload handed over to a connection hook.

    The hook owns everything written to the connection; ``body`` is only carried
    so the hook can read it through ``CurlRequest.body``.
    """

    hook: ConnectionHook
    body: str | None = None


RequestPayload = Union[BodyPayload, CustomSetup]


__all__ = ["BodyPayload", "ConnectionHook", "CustomSetup", "Header", "Method", "RequestPayload"]
