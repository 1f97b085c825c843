# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Materialize a live connection's response into a temporary file."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from contextlib import closing
from pathlib import Path
from typing import IO, Any, Protocol

from ..config import CurlSettings, load_settings
from ..errors import CurlError, ResponseAccessError
from .response import CurlResponse, ResponseSink

logger = logging.getLogger(__name__)

StreamOpener = Callable[[], "IO[bytes] | None"]


class ResponseConnection(Protocol):
    """What ResponseProcessor needs from a connection."""

    @property
    def status_code(self) -> int: ...

    def get_input_stream(self) -> Any: ...

    def get_error_stream(self) -> Any: ...


class ResponseProcessor:
    """
    Drain a connection into a response sink without holding the body in memory.

    Usable directly as the success continuation of ``CurlRequest.connect``.
    """

    def __init__(
        self,
        encoding: str,
        *,
        settings: CurlSettings | None = None,
        response: ResponseSink | None = None,
    ):
        self.encoding = encoding
        self.settings = settings or load_settings()
        self.response: ResponseSink = response if response is not None else CurlResponse()

    def __call__(self, connection: ResponseConnection) -> None:
        self.accept(connection)

    def accept(self, connection: ResponseConnection) -> None:
        try:
            self.response.set_encoding(self.encoding)
            self.response.set_http_status_code(connection.status_code)
            self._write_content(lambda: self._primary_stream(connection))
        except Exception as exc:
            error_stream = connection.get_error_stream()
            if error_stream is None:
                raise ResponseAccessError("Failed to access the response.") from exc
            logger.debug("Reading error stream after primary failure: %s", exc)
            try:
                self._write_content(lambda: error_stream)
            except Exception as fallback_exc:
                logger.debug("Error stream could not be read either: %s", fallback_exc)
                raise ResponseAccessError("Failed to access the response.") from exc
            # both the fallback content and the primary failure stay on the sink
            self.response.set_content_exception(exc)

    @staticmethod
    def _primary_stream(connection: ResponseConnection) -> IO[bytes] | None:
        stream = connection.get_input_stream()
        if stream is None:
            stream = connection.get_error_stream()
        return stream

    def _create_temp_file(self) -> tuple[int, Path]:
        try:
            fd, name = tempfile.mkstemp(
                prefix=self.settings.temp_prefix,
                suffix=self.settings.temp_suffix,
                dir=self.settings.temp_dir,
            )
        except OSError as exc:
            raise ResponseAccessError("Failed to create a temporary file.") from exc
        return fd, Path(name)

    def _write_content(self, opener: StreamOpener) -> None:
        stream = opener()
        if stream is None:
            raise CurlError("No response stream is available.")

        chunk_size = self.settings.chunk_size
        with closing(stream) as source:
            fd, temp_file = self._create_temp_file()
            try:
                with os.fdopen(fd, "wb") as out:
                    chunk = source.read(chunk_size)
                    while chunk:
                        out.write(chunk)
                        chunk = source.read(chunk_size)
                    out.flush()
            except BaseException:
                _delete_quietly(temp_file)
                raise
        self.response.set_content_file(temp_file)


def _delete_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to delete partial content file %s: %s", path, exc)


__all__ = ["ResponseConnection", "ResponseProcessor"]
