# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""escurl CLI."""

from __future__ import annotations

import argparse
import shutil
import sys
from typing import BinaryIO

from ..config import CurlSettings, load_settings
from ..errors import CurlError, categorize_exception
from ..http import CurlRequest, CurlResponse, Method
from ..log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send one HTTP request and print the response body")
    parser.add_argument(
        "method",
        type=str.upper,
        choices=[m.value for m in Method],
        help="HTTP method",
    )
    parser.add_argument("url", help="Target URL")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Request header (repeatable)",
    )
    parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)",
    )
    parser.add_argument("-d", "--data", help="Request body")
    parser.add_argument("--encoding", help="Character encoding for params, body and response")
    parser.add_argument(
        "-i",
        "--include",
        action="store_true",
        help="Print the HTTP status before the body",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    return parser


def _split_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header: {raw!r}")
    return name.strip(), value.strip()


def _split_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Invalid param: {raw!r}")
    return key, value


def build_request(args: argparse.Namespace, settings: CurlSettings) -> CurlRequest:
    request = CurlRequest(args.method, args.url, settings=settings)
    if args.encoding:
        request.set_encoding(args.encoding)
    for raw in args.param:
        request.add_param(*_split_param(raw))
    for raw in args.header:
        request.add_header(*_split_header(raw))
    if args.data is not None:
        request.set_body(args.data)
    return request


def _root_cause(exc: BaseException) -> BaseException:
    while exc.__cause__ is not None:
        exc = exc.__cause__
    return exc


def _write_response(response: CurlResponse, out: BinaryIO, *, include_status: bool) -> None:
    if include_status:
        out.write(f"HTTP {response.http_status_code}\n".encode())
    if response.content_file is not None:
        with response.open_content() as content:
            shutil.copyfileobj(content, out)
    out.flush()


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    try:
        request = build_request(args, settings)
    except (argparse.ArgumentTypeError, CurlError) as exc:
        parser.error(str(exc))

    try:
        response = request.execute()
    except CurlError as exc:
        root = _root_cause(exc)
        print(f"escurl: {exc.__cause__ or exc} ({categorize_exception(root).value}: {root})", file=sys.stderr)
        return 2

    with response:
        _write_response(response, sys.stdout.buffer, include_status=args.include)
        status = response.http_status_code or 0

    return 0 if status < 400 else 1


if __name__ == "__main__":
    raise SystemExit(main())
