"""Async GitHub REST client for the calls the PR checker needs."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import aiohttp

log = logging.getLogger(__name__)

API = "https://api.github.com"
USER_AGENT = "hacktoberfest-checker"
ACCEPT = "application/vnd.github+json"
# Topics were served behind a preview media type for a long time.
TOPICS_ACCEPT = "application/vnd.github.mercy-preview+json, application/vnd.github+json"
RATE_LIMIT_BUFFER = 10


class GitHubApiError(RuntimeError):
    pass


class RateLimitExceeded(GitHubApiError):
    pass


@dataclass(frozen=True)
class GitHubResponse:
    status: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def rate_limit_remaining(self) -> Optional[int]:
        remaining = self.headers.get("x-ratelimit-remaining")
        return int(remaining) if remaining is not None else None


class PullRequestSource(Protocol):
    """What the PR filter needs from a GitHub client."""

    async def search_issues(self, query: str) -> GitHubResponse: ...

    def has_next_page(self, response: GitHubResponse) -> bool: ...

    async def check_merged(self, owner: str, repo: str, number: int) -> GitHubResponse: ...

    async def get_reviews(self, owner: str, repo: str, number: int) -> GitHubResponse: ...

    async def get_topics(self, owner: str, repo: str) -> GitHubResponse: ...


class GitHubClient:
    """Async GitHub client over a shared aiohttp session."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = API,
        timeout_s: float = 30.0,
        per_page: int = 100,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.per_page = per_page
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"User-Agent": USER_AGENT, "X-GitHub-Api-Version": "2022-11-28"}
            if self.token:
                headers["Authorization"] = f"token {self.token}"
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_s),
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        accept: str = ACCEPT,
        allowed_statuses: tuple[int, ...] = (),
    ) -> GitHubResponse:
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        log.debug("%s %s params=%s", method, path, params)
        try:
            async with session.request(method, url, params=params, headers={"Accept": accept}) as resp:
                body = await resp.text()
                headers = {k.lower(): v for k, v in resp.headers.items()}
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise GitHubApiError(f"Request to {path} failed: {exc}") from exc

        response = GitHubResponse(status=status, data=_decode(body), headers=headers)
        self._observe_rate_limit(response)

        if status in (403, 429) and headers.get("x-ratelimit-remaining") == "0":
            reset = headers.get("x-ratelimit-reset")
            raise RateLimitExceeded(f"GitHub rate limit exceeded. Reset at epoch={reset}.")
        if status >= 400 and status not in allowed_statuses:
            raise GitHubApiError(f"GitHub API error {status} for {path}: {body[:500]}")
        return response

    @staticmethod
    def _observe_rate_limit(response: GitHubResponse) -> None:
        remaining = response.rate_limit_remaining
        if remaining is None:
            return
        log.debug("Rate limit remaining: %d", remaining)
        if remaining < RATE_LIMIT_BUFFER:
            log.warning("Rate limit low (%d remaining).", remaining)

    # ── Search ───────────────────────────────────────────────────

    async def search_issues(self, query: str) -> GitHubResponse:
        return await self._request(
            "GET",
            "/search/issues",
            params={"q": query, "per_page": self.per_page},
        )

    def has_next_page(self, response: GitHubResponse) -> bool:
        return 'rel="next"' in response.headers.get("link", "")

    # ── Pull requests ────────────────────────────────────────────

    async def check_merged(self, owner: str, repo: str, number: int) -> GitHubResponse:
        """204 when merged, 404 when not."""
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{number}/merge",
            allowed_statuses=(404,),
        )

    async def get_reviews(self, owner: str, repo: str, number: int) -> GitHubResponse:
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
            params={"per_page": self.per_page},
        )

    # ── Repositories ─────────────────────────────────────────────

    async def get_topics(self, owner: str, repo: str) -> GitHubResponse:
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/topics",
            accept=TOPICS_ACCEPT,
        )


def _decode(body: str) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body
