"""Command-line interface for reqtree."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from . import __version__
from .core.request import AnyRequest, Request
from .core.updates import UpdateScheduler, every
from .http.client import AiohttpTransport
from .logging_config import setup_logging
from .models.auth import Auth
from .models.config import ClientSettings
from .params import Body, Header, Method, Param, Query, Timeout, Url


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="reqtree",
        description="Send an HTTP request and print the response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Simple GET, body printed as text
  reqtree https://api.example.com/todos

  # Pretty-print JSON and send headers and query items
  reqtree https://api.example.com/todos --json -H "Accept: application/json" -q page=2

  # POST a JSON body with a bearer token taken from the environment
  reqtree https://api.example.com/todos -X POST -d '{"title": "x"}' --bearer '$API_TOKEN'

  # Poll every 5 seconds, 3 times after the first call
  reqtree https://api.example.com/status --every 5 --count 3
        """,
    )

    parser.add_argument("url", help="Absolute URL to request")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-X",
        "--method",
        default="GET",
        help="HTTP method (default: GET)",
    )
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Request header, repeatable",
    )
    parser.add_argument(
        "-q",
        "--query",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Query item, repeatable",
    )
    parser.add_argument("-d", "--data", help="Request body, sent as UTF-8 text")

    auth_group = parser.add_argument_group("authorization")
    auth_exclusive = auth_group.add_mutually_exclusive_group()
    auth_exclusive.add_argument("--bearer", metavar="TOKEN", help="Bearer token ($VAR expanded)")
    auth_exclusive.add_argument("--basic", metavar="USER:PASS", help="Basic credentials ($VAR expanded)")

    network_group = parser.add_argument_group("network settings")
    network_group.add_argument("--timeout", type=float, help="Request timeout in seconds")
    network_group.add_argument(
        "--settings",
        type=Path,
        help="YAML file with client settings (user_agent, default_timeout, ...)",
    )

    update_group = parser.add_argument_group("updates")
    update_group.add_argument("--every", type=float, help="Repeat the request every N seconds")
    update_group.add_argument("--count", type=int, help="Number of repetitions (default: until interrupted)")

    output_group = parser.add_argument_group("output control")
    output_group.add_argument("--json", action="store_true", help="Parse and pretty-print the body as JSON")
    output_group.add_argument("--dump", action="store_true", help="Print the folded request before sending")
    output_group.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    output_group.add_argument("--quiet", action="store_true", help="Only print the body")

    return parser


def _parse_header(raw: str) -> Header:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
    return Header(name.strip(), value.strip())


def _parse_query(raw: str) -> Query:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise ValueError(f"Invalid query item {raw!r}, expected name=value")
    return Query(name, value)


def build_request(args: argparse.Namespace, settings: ClientSettings) -> AnyRequest[Any]:
    """Build the request described by the parsed arguments."""
    params: list[Param] = [Url(args.url), Method(args.method)]
    params.extend(_parse_header(raw) for raw in args.headers)
    params.extend(_parse_query(raw) for raw in args.query)
    if args.data is not None:
        params.append(Body(args.data))
    if args.timeout is not None:
        params.append(Timeout(args.timeout))

    request = Request(*params, transport=AiohttpTransport(settings))

    if args.bearer:
        request = request.with_authorization(Auth.bearer(args.bearer))
    elif args.basic:
        username, sep, password = args.basic.partition(":")
        if not sep:
            raise ValueError("--basic expects USER:PASS")
        request = request.with_authorization(Auth.basic(username, password))

    if args.every is not None:
        request = request.update(every(args.every, args.count))

    return request


def run_request(args: argparse.Namespace) -> int:
    """Send the request (and its repetitions) with given arguments."""
    console = Console()

    try:
        settings = ClientSettings.from_yaml_file(args.settings) if args.settings else ClientSettings()
        if args.verbose or args.settings:
            setup_logging(settings, verbose=args.verbose)
        request = build_request(args, settings)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    failures: list[Exception] = []

    def show_error(error: Exception) -> None:
        failures.append(error)
        console.print(f"[red]Error:[/red] {error}")

    def show_status(status: int) -> None:
        if not args.quiet:
            style = "green" if status < 400 else "red"
            console.print(f"[bold {style}]HTTP {status}[/bold {style}]")

    request = request.on_error(show_error).on_status_code(show_status)
    if args.json:
        request = request.on_json(lambda document: console.print_json(data=document))
    else:
        request = request.on_string(lambda text: console.out(text, highlight=False))

    if args.dump and not args.quiet:
        try:
            console.out(request.describe(), highlight=False)
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            return 1

    async def run() -> None:
        await request.perform()
        if request.update_sources:
            await UpdateScheduler(request).run()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        return 130

    return 0 if not failures else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_request(args)


if __name__ == "__main__":
    sys.exit(main())
