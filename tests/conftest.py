"""Shared fixtures: a fake GitHub source serving a single pull request."""

from datetime import datetime, timezone

import pytest

from hacktoberfest_checker.github_client import GitHubResponse

NOW = datetime(2020, 10, 3, 0, 0, 0, tzinfo=timezone.utc)
RATE_HEADERS = {"x-ratelimit-remaining": "9999"}


class FakeSource:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, items, *, merged=False, approved=False, topics=None, next_page=False):
        self.items = items
        self.merged = merged
        self.approved = approved
        self.topics = topics
        self.next_page = next_page
        self.calls = []

    async def search_issues(self, query):
        self.calls.append(("search_issues", query))
        return GitHubResponse(status=200, data={"items": self.items}, headers=dict(RATE_HEADERS))

    def has_next_page(self, response):
        return self.next_page

    async def check_merged(self, owner, repo, number):
        self.calls.append(("check_merged", owner, repo, number))
        return GitHubResponse(status=204 if self.merged else 404, headers=dict(RATE_HEADERS))

    async def get_reviews(self, owner, repo, number):
        self.calls.append(("get_reviews", owner, repo, number))
        data = [{"state": "APPROVED"}] if self.approved else []
        return GitHubResponse(status=200, data=data, headers=dict(RATE_HEADERS))

    async def get_topics(self, owner, repo):
        self.calls.append(("get_topics", owner, repo))
        if self.topics is None:
            raise AssertionError("topics were not expected to be fetched")
        return GitHubResponse(status=200, data={"names": self.topics}, headers=dict(RATE_HEADERS))

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


def make_item(number, labels, title, created_at, repo_name, state, username="Username"):
    url = f"https://github.com/{repo_name}/pull/{number}"
    return {
        "number": number,
        "title": title,
        "created_at": created_at,
        "state": state,
        "labels": [{"name": label} for label in labels],
        "html_url": url,
        "pull_request": {"html_url": url},
        "user": {"login": username, "html_url": f"https://github.com/{username}"},
    }


@pytest.fixture
def generate_pr():
    def factory(number, labels, title, created_at, repo_name, state, merged, approved, topics=None):
        item = make_item(number, labels, title, created_at, repo_name, state)
        return FakeSource([item], merged=merged, approved=approved, topics=topics)

    return factory


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def fake_source():
    """Factory for FakeSource instances over a list of search items."""
    return FakeSource


@pytest.fixture
def pr_item():
    """Builder for raw search items."""
    return make_item


@pytest.fixture
def now():
    return NOW
