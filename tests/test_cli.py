"""Tests for the command line entry point."""

import json

import pytest

from hacktoberfest_checker import cli
from hacktoberfest_checker.github_client import GitHubApiError
from hacktoberfest_checker.models import PRRecord, PullRequestAuthor

RECORD = PRRecord(
    number=3,
    title="Add docs",
    created_at="October 4th 2020",
    url="https://github.com/owner/repo/pull/3",
    repo_name="owner/repo",
    user=PullRequestAuthor(login="octocat", url="https://github.com/octocat"),
    open=False,
    is_pending=False,
    has_hacktoberfest_label=True,
    merged=True,
    approved=False,
    repo_must_have_topic=False,
)


@pytest.fixture
def no_token(monkeypatch):
    monkeypatch.setattr(cli, "resolve_token", lambda token=None: token)


def test_parser_check_defaults():
    args = cli.build_parser().parse_args(["check", "octocat"])
    assert args.username == "octocat"
    assert args.json is None
    assert args.handler is cli._cmd_check


def test_parser_serve():
    args = cli.build_parser().parse_args(["serve", "--port", "9000"])
    assert args.port == 9000
    assert args.host == "127.0.0.1"


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_invalid_username_exits_1(no_token):
    assert cli.main(["check", "octo--cat"]) == 1


def test_check_writes_json(monkeypatch, tmp_path, no_token):
    seen = {}

    async def fake_run_check(username, config, token=None):
        seen["username"] = username
        return [RECORD], {"invalid_label": 2}

    monkeypatch.setattr(cli, "run_check", fake_run_check)
    out = tmp_path / "prs.json"
    assert cli.main(["check", "octocat", "--json", str(out), "--show-rejections"]) == 0
    assert seen["username"] == "octocat"
    assert json.loads(out.read_text())[0]["number"] == 3


def test_api_error_exits_1(monkeypatch, no_token):
    async def failing_run_check(username, config, token=None):
        raise GitHubApiError("GitHub API error 500")

    monkeypatch.setattr(cli, "run_check", failing_run_check)
    assert cli.main(["check", "octocat"]) == 1
