from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PullRequestAuthor:
    login: str
    url: str


@dataclass(frozen=True)
class PRRecord:
    """A pull request annotated with its Hacktoberfest eligibility flags."""

    number: int
    title: str
    created_at: str
    url: str
    repo_name: str
    user: PullRequestAuthor
    open: bool
    is_pending: bool
    has_hacktoberfest_label: bool
    merged: bool
    approved: bool
    repo_must_have_topic: bool
    # Only known when the repository topics had to be checked
    repo_has_hacktoberfest_topic: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        if not self.repo_must_have_topic:
            payload.pop("repo_has_hacktoberfest_topic")
        return payload
