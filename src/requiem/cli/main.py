# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""requiem CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx

from ..errors import RequiemError
from ..http.client import request_with_buffer, request_with_json
from ..http.transport import Transport
from ..log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="requiem", description="Send an HTTP request and print the response body")
    parser.add_argument("url", help="Target URL")
    parser.add_argument("-X", "--method", default="GET", help="HTTP method (default: GET)")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Request header; may be repeated",
    )

    body = parser.add_mutually_exclusive_group()
    body.add_argument("-d", "--data", help="Raw request body")
    body.add_argument("--json-body", help="JSON document sent as the request body")

    redirects = parser.add_mutually_exclusive_group()
    redirects.add_argument("--max-redirects", type=int, help="Maximum redirect hops to follow (default: 5)")
    redirects.add_argument("--no-follow", action="store_true", help="Return redirect responses as-is")

    status = parser.add_mutually_exclusive_group()
    status.add_argument("--fail", action="store_true", help="Fail on status codes >= 400")
    status.add_argument("--expect-status", type=int, help="Fail unless the final status code matches")

    parser.add_argument("--timeout", type=float, help="Timeout in seconds")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS verification")
    parser.add_argument("-i", "--include", action="store_true", help="Print status line and response headers")
    parser.add_argument("--json", action="store_true", help="Parse the response body as JSON and pretty-print it")
    parser.add_argument("--log-level", help="Logging level (default: REQUIEM_LOG_LEVEL or WARNING)")
    return parser


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
    return name.strip(), value.strip()


def build_options(args: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed arguments into request options."""
    options: dict[str, Any] = {"url": args.url, "method": args.method}
    if args.header:
        options["headers"] = dict(_parse_header(raw) for raw in args.header)
    if args.data is not None:
        options["body"] = args.data
    if args.json_body is not None:
        options["body_json"] = json.loads(args.json_body)
    if args.no_follow:
        options["follow_redirects"] = False
    elif args.max_redirects is not None:
        options["follow_redirects"] = args.max_redirects
    if args.fail:
        options["throw_on_error_response"] = True
    elif args.expect_status is not None:
        options["throw_on_error_response"] = args.expect_status
    if args.timeout is not None:
        options["timeout"] = args.timeout
    if args.insecure:
        options["verify"] = False
    return options


async def _run(args: argparse.Namespace, options: dict[str, Any], transport: Transport | None) -> None:
    if args.json:
        result = await request_with_json(options, transport=transport)
        payload = (json.dumps(result.body, indent=2, sort_keys=True) + "\n").encode("utf-8")
    else:
        result = await request_with_buffer(options, transport=transport)
        payload = result.body

    if args.include:
        print(f"{result.status_code} {result.requested_url}")
        for name, value in result.headers.multi_items():
            print(f"{name}: {value}")
        print()
        sys.stdout.flush()
    sys.stdout.buffer.write(payload)
    sys.stdout.flush()


def main(argv: list[str] | None = None, *, transport: Transport | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level)
        options = build_options(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        asyncio.run(_run(args, options, transport))
    except RequiemError as exc:
        print(f"requiem: {exc.code}: {exc.message}", file=sys.stderr)
        return 1
    except (httpx.HTTPError, OSError) as exc:
        print(f"requiem: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
