# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for escurl."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_ENCODING = "UTF-8"
DEFAULT_USER_AGENT = f"escurl/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or None


@dataclass
class CurlSettings:
    """Request dispatch and response materialization defaults."""

    encoding: str = DEFAULT_ENCODING
    timeout: float = 30.0
    allow_redirects: bool = True
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    chunk_size: int = 4096
    temp_prefix: str = "esclient-"
    temp_suffix: str = ".tmp"
    temp_dir: str | None = None

    @classmethod
    def from_env(cls) -> "CurlSettings":
        """Create settings from environment variables (evaluated at call time)."""
        chunk_size = _int_env("ESCURL_CHUNK_SIZE", cls.chunk_size)
        if chunk_size <= 0:
            chunk_size = cls.chunk_size
        return cls(
            encoding=os.getenv("ESCURL_ENCODING", cls.encoding),
            timeout=_float_env("ESCURL_HTTP_TIMEOUT", cls.timeout),
            allow_redirects=_bool_env("ESCURL_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("ESCURL_HTTP_VERIFY_SSL", cls.verify_ssl),
            user_agent=os.getenv("ESCURL_USER_AGENT", cls.user_agent),
            chunk_size=chunk_size,
            temp_prefix=os.getenv("ESCURL_TEMP_PREFIX", cls.temp_prefix),
            temp_suffix=os.getenv("ESCURL_TEMP_SUFFIX", cls.temp_suffix),
            temp_dir=_optional_str_env("ESCURL_TEMP_DIR", cls.temp_dir),
        )


def load_settings() -> CurlSettings:
    """Load settings from environment with sensible defaults."""
    return CurlSettings.from_env()
