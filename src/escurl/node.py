# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Handles for locally running services that a request can be addressed to."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

HTTP_PORT_SETTING = "http.port"


class ServiceHandle(Protocol):
    """Anything exposing the HTTP port a local service listens on."""

    @property
    def http_port(self) -> int | str: ...


@dataclass(frozen=True)
class LocalNode:
    """Minimal ServiceHandle for a node reachable on localhost."""

    http_port: int | str

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> LocalNode:
        """Build a handle from a node's flat settings mapping (``http.port`` key)."""
        port = settings.get(HTTP_PORT_SETTING)
        if port is None or str(port).strip() == "":
            raise KeyError(HTTP_PORT_SETTING)
        return cls(http_port=str(port).strip())


def node_base_url(node: ServiceHandle) -> str:
    return f"http://localhost:{node.http_port}"


__all__ = ["HTTP_PORT_SETTING", "LocalNode", "ServiceHandle", "node_base_url"]
