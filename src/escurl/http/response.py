# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response sink protocol and the file-backed CurlResponse."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Protocol

from ..config import DEFAULT_ENCODING
from ..errors import CurlError

logger = logging.getLogger(__name__)


class ResponseSink(Protocol):
    """Receiver populated by ResponseProcessor for one dispatch."""

    def set_encoding(self, encoding: str) -> None: ...

    def set_http_status_code(self, status_code: int) -> None: ...

    def set_content_file(self, path: Path) -> None: ...

    def set_content_exception(self, exc: BaseException) -> None: ...


@dataclass
class CurlResponse:
    """
    Outcome of one dispatch whose body lives in a temporary file.

    Three shapes are possible:

    - success: ``content_file`` set, ``content_exception`` None
    - failure with diagnostic payload: both set; the body was read from the
      server's error stream after the primary read failed (e.g. an HTTP 500),
      and the exception explains why the primary read failed
    - no content: ``content_file`` None (only seen by async callers that
      inspect a partially populated response)

    The temporary file is owned by whoever holds this object; call ``close()``
    (or use it as a context manager) to delete it.
    """

    encoding: str = DEFAULT_ENCODING
    http_status_code: int | None = None
    content_file: Path | None = None
    content_exception: BaseException | None = None

    def set_encoding(self, encoding: str) -> None:
        self.encoding = encoding

    def set_http_status_code(self, status_code: int) -> None:
        self.http_status_code = status_code

    def set_content_file(self, path: Path) -> None:
        self.content_file = Path(path)

    def set_content_exception(self, exc: BaseException) -> None:
        self.content_exception = exc

    @property
    def has_content_exception(self) -> bool:
        return self.content_exception is not None

    def _require_content(self) -> Path:
        if self.content_file is None:
            if self.content_exception is not None:
                raise CurlError("The content does not exist.") from self.content_exception
            raise CurlError("The content does not exist.")
        return self.content_file

    def open_content(self) -> IO[bytes]:
        return self._require_content().open("rb")

    def content_as_bytes(self) -> bytes:
        return self._require_content().read_bytes()

    def content_as_string(self) -> str:
        return self.content_as_bytes().decode(self.encoding)

    def content_as_json(self) -> Any:
        return json.loads(self.content_as_string())

    def close(self) -> None:
        """Delete the temporary content file, if any."""
        if self.content_file is None:
            return
        try:
            self.content_file.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", self.content_file, exc)

    def __enter__(self) -> CurlResponse:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["CurlResponse", "ResponseSink"]
