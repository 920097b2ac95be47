"""CLI application entry point and command routing for haile.

This module is the **sole error boundary** for the command line.  It
catches :class:`~haile.exceptions.HaileError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages and
returning well-defined exit codes.

The CLI supports:

* ``haile <url>``: send one request and print the response
* ``haile doctor``: environment diagnostics
* ``haile --version``
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from haile.cli import exit_codes
from haile.cli.console import configure_logging, console, escape
from haile.exceptions import HaileError, InvalidRequestError
from haile.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="haile",
        description="Send HTTP requests with the haile client.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests and library loading to stderr.",
    )
    parser.add_argument(
        "-X",
        "--method",
        default="GET",
        help="HTTP method (default: GET).",
    )
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Extra request header; may be repeated.",
    )
    parser.add_argument(
        "-d",
        "--data",
        default=None,
        help="Request body.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Parse --data as JSON and send it with a JSON content type.",
    )
    parser.add_argument(
        "-u",
        "--user",
        default=None,
        metavar="USER[:PASSWORD]",
        help="Basic-auth credentials.",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        help="Request timeout in seconds.",
    )
    parser.add_argument(
        "--no-headers",
        action="store_true",
        help="Do not print response headers.",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="URL (or path relative to HAILE_BASE_URL), or 'doctor'.",
    )
    return parser


# ---------------------------------------------------------------------------
# Argument conversion (pure)
# ---------------------------------------------------------------------------

def _parse_headers(raw_headers: list[str]) -> dict[str, str]:
    """Turn ``["Name: value", ...]`` into a dict."""
    headers: dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidRequestError(
                f"Malformed header: {raw!r}",
                hint='Use the form -H "Name: value".',
            )
        headers[name.strip()] = value.strip()
    return headers


def _parse_body(data: str | None, as_json: bool) -> dict[str, Any]:
    """Return the ``json=``/``data=`` keyword for :meth:`Client.request`."""
    if data is None:
        return {}
    if not as_json:
        return {"data": data.encode("utf-8")}
    try:
        return {"json": json.loads(data)}
    except ValueError as exc:
        raise InvalidRequestError(
            f"--data is not valid JSON: {exc}",
            hint="Drop --json to send the body as-is.",
        ) from exc


def _parse_user(user: str | None) -> tuple[str | None, str | None]:
    if user is None:
        return None, None
    username, _, password = user.partition(":")
    return username, password


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_request(args: argparse.Namespace) -> int:
    """Send one request and render the response.

    Flow:
    1. Build a client from ``HAILE_*`` settings plus CLI flags.
    2. Send the request (transport failures come back as responses).
    3. Render the response; exit non-zero unless it was 2xx.
    """
    from haile.cli.render import render_response
    from haile.client import Client
    from haile.config import ClientConfig

    headers = _parse_headers(args.header)
    body = _parse_body(args.data, args.json)
    username, password = _parse_user(args.user)
    config = ClientConfig.from_env().merged(timeout=args.timeout)

    with Client(username=username, password=password, config=config) as client:
        response = client.request(args.method, args.target, headers=headers, **body)

    render_response(response, show_headers=not args.no_headers)
    return exit_codes.SUCCESS if response.success else exit_codes.GENERAL_ERROR


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from haile.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the haile CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.target is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.verbose:
        configure_logging(verbose=True)

    if args.target.lower() == "doctor":
        return _handle_doctor()

    return _handle_request(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point."""
    try:
        code = main()
        sys.exit(code)
    except HaileError as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
