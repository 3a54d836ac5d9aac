"""JSON API serving the PR check over HTTP."""

from __future__ import annotations

import logging

from aiohttp import web

from .config import DEFAULT_CONFIG, CheckerConfig
from .filters import InvalidUsername, validate_username
from .finder import find_prs
from .github_client import GitHubApiError, GitHubClient, PullRequestSource, RateLimitExceeded

log = logging.getLogger(__name__)

CLIENT_KEY = web.AppKey("client", PullRequestSource)
CONFIG_KEY = web.AppKey("config", CheckerConfig)


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def list_prs(request: web.Request) -> web.Response:
    try:
        username = validate_username(request.query.get("username"))
    except InvalidUsername as exc:
        return web.json_response({"error": str(exc)}, status=400)

    try:
        records = await find_prs(request.app[CLIENT_KEY], username, request.app[CONFIG_KEY])
    except RateLimitExceeded as exc:
        log.warning("Rate limited while checking %s: %s", username, exc)
        return web.json_response({"error": str(exc)}, status=429)
    except GitHubApiError as exc:
        log.error("GitHub request failed for %s: %s", username, exc)
        return web.json_response({"error": str(exc)}, status=502)
    except (KeyError, ValueError) as exc:
        log.error("Unexpected search item for %s: %r", username, exc)
        return web.json_response({"error": f"Unexpected GitHub search result: {exc}"}, status=502)

    return web.json_response([record.to_dict() for record in records])


def create_app(
    client: PullRequestSource | None = None,
    config: CheckerConfig = DEFAULT_CONFIG,
    token: str | None = None,
) -> web.Application:
    """Build the app; a GitHubClient is created and closed with it when none is given."""
    app = web.Application()
    app[CONFIG_KEY] = config

    if client is None:
        owned = GitHubClient(token=token, per_page=config.search_per_page)
        app[CLIENT_KEY] = owned

        async def close_client(_app: web.Application) -> None:
            await owned.close()

        app.on_cleanup.append(close_client)
    else:
        app[CLIENT_KEY] = client

    app.router.add_get("/health", health)
    app.router.add_get("/prs", list_prs)
    return app
