"""Eligibility predicates for Hacktoberfest pull requests."""

import re
from datetime import datetime, timedelta
from typing import Iterable, Optional

# GitHub logins: alphanumerics and single hyphens, no hyphen at either end.
USERNAME_PATTERN = re.compile(r'^[a-z\d](?:[a-z\d]|-(?=[a-z\d])){0,38}$', re.IGNORECASE)

PULL_URL_PATTERN = re.compile(
    r'github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+)/pulls?/\d+'
    r'|/repos/(?P<api_owner>[^/]+)/(?P<api_repo>[^/]+)',
    re.IGNORECASE,
)

APPROVED_STATE = "APPROVED"
MERGED_STATUS = 204

# English names regardless of locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class InvalidUsername(ValueError):
    pass


def validate_username(username: Optional[str]) -> str:
    """Strip and check a GitHub login, returning the cleaned value."""
    cleaned = (username or "").strip()
    if not cleaned:
        raise InvalidUsername("A GitHub username is required.")
    if not USERNAME_PATTERN.match(cleaned):
        raise InvalidUsername(f"Not a valid GitHub username: {cleaned!r}")
    return cleaned


def label_names(item: dict) -> set[str]:
    """Lowercased label names of a search item."""
    names = set()
    for label in item.get("labels") or []:
        name = label.get("name") if isinstance(label, dict) else label
        if name:
            names.add(str(name).lower())
    return names


def has_invalid_label(labels: set[str], invalid_labels: Iterable[str]) -> bool:
    return not labels.isdisjoint(label.lower() for label in invalid_labels)


def has_accepted_label(labels: set[str], accepted_label: str) -> bool:
    return accepted_label.lower() in labels


def uses_new_rules(created_at: datetime, rule_cutoff: datetime) -> bool:
    """PRs opened at or after the cutoff must be merged, approved or in a tagged repo."""
    return created_at >= rule_cutoff


def is_pending(created_at: datetime, now: datetime, pending_days: int) -> bool:
    return now - created_at < timedelta(days=pending_days)


def is_merged_status(status: int) -> bool:
    return status == MERGED_STATUS


def is_approved(reviews: Optional[list]) -> bool:
    return any(
        isinstance(review, dict) and review.get("state") == APPROVED_STATE
        for review in reviews or []
    )


def has_topic(topics: Optional[dict], topic: str) -> bool:
    names = (topics or {}).get("names") or []
    return topic.lower() in (name.lower() for name in names)


def repo_name_from_item(item: dict) -> str:
    """Extract 'owner/repo' from a search item's URLs."""
    candidates = (
        (item.get("pull_request") or {}).get("html_url"),
        item.get("html_url"),
        item.get("repository_url"),
    )
    for url in candidates:
        if not url:
            continue
        match = PULL_URL_PATTERN.search(url)
        if not match:
            continue
        owner = match.group("owner") or match.group("api_owner")
        repo = match.group("repo") or match.group("api_repo")
        return f"{owner}/{repo}"
    raise ValueError(f"Cannot determine repository for PR #{item.get('number')}")


def ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_human_date(value: datetime) -> str:
    """Render a date as e.g. 'October 2nd 2020'."""
    return f"{MONTH_NAMES[value.month - 1]} {ordinal(value.day)} {value.year}"
