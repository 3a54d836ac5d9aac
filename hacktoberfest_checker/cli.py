#!/usr/bin/env python3
"""Hacktoberfest checker CLI - list a user's eligible pull requests."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from aiohttp import web
from rich.console import Console
from rich.logging import RichHandler

from .config import CheckerConfig, load_config, resolve_token
from .display import display_rejections, display_records
from .filters import validate_username
from .finder import PRFinder
from .github_client import GitHubApiError, GitHubClient
from .models import PRRecord
from .output import write_csv, write_json
from .web import create_app

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


async def run_check(
    username: str,
    config: CheckerConfig,
    token: str | None = None,
) -> tuple[list[PRRecord], dict[str, int]]:
    """Check one user and return the kept records plus drop counts."""
    async with GitHubClient(token=token, per_page=config.search_per_page) as client:
        finder = PRFinder(client, config)
        records = await finder.find(username)
    return records, dict(finder.rejection_counts)


def _cmd_check(args) -> int:
    username = validate_username(args.username)
    config = load_config(args.config)
    token = resolve_token(args.token)
    if not token:
        console.print("[yellow]No GitHub token found; anonymous requests have a low rate limit.[/yellow]")

    with console.status(f"Checking pull requests for {username}..."):
        records, rejections = asyncio.run(run_check(username, config, token))

    display_records(records, username)
    if args.show_rejections:
        display_rejections(rejections)

    if args.json:
        write_json(args.json, records)
        console.print(f"[green]Saved to {args.json}[/green]")
    if args.csv:
        write_csv(args.csv, records)
        console.print(f"[green]Saved to {args.csv}[/green]")
    return 0


def _cmd_serve(args) -> int:
    config = load_config(args.config)
    app = create_app(config=config, token=resolve_token(args.token))
    console.print(f"[cyan]Serving on http://{args.host}:{args.port}[/cyan]")
    web.run_app(app, host=args.host, port=args.port, print=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hacktoberfest-checker",
        description="List a GitHub user's Hacktoberfest-eligible pull requests.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="Log every GitHub call and the remaining rate limit",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check one user's pull requests")
    check.add_argument("username", help="GitHub username")
    check.add_argument(
        "--token", default=None,
        help="GitHub token (or set GITHUB_TOKEN). Higher rate limits with token.",
    )
    check.add_argument("--config", default=None, help="JSON file overriding the default rules")
    check.add_argument("--json", default=None, help="Write results to a JSON file")
    check.add_argument("--csv", default=None, help="Write results to a CSV file")
    check.add_argument(
        "--show-rejections", action="store_true", default=False,
        help="Print how many pull requests were dropped and why",
    )
    check.set_defaults(handler=_cmd_check)

    serve = subparsers.add_parser("serve", help="Serve the check as a JSON API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    serve.add_argument("--token", default=None, help="GitHub token (or set GITHUB_TOKEN)")
    serve.add_argument("--config", default=None, help="JSON file overriding the default rules")
    serve.set_defaults(handler=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return args.handler(args)
    except (GitHubApiError, ValueError) as error:
        console.print(f"[red]Error: {error}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
