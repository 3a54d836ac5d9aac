"""Configuration for the Hacktoberfest PR checker."""

from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Eligibility rules
RULE_CUTOFF = datetime(2020, 10, 3, 12, 0, 0, tzinfo=timezone.utc)
PENDING_DAYS = 14
INVALID_LABELS = ("invalid", "spam")
ACCEPTED_LABEL = "hacktoberfest-accepted"
HACKTOBERFEST_TOPIC = "hacktoberfest"

# Event window used by the search query (covers every timezone)
EVENT_START = datetime(2020, 9, 30, 10, 0, 0, tzinfo=timezone.utc)
EVENT_END = datetime(2020, 11, 1, 12, 0, 0, tzinfo=timezone.utc)

SEARCH_PER_PAGE = 100
SEARCH_QUERY_TEMPLATE = "author:{username} type:pr is:public created:{start}..{end}"

_DATETIME_FIELDS = ("rule_cutoff", "event_start", "event_end")
_TUPLE_FIELDS = ("invalid_labels",)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO8601 timestamp into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class CheckerConfig:
    """Tunable eligibility rules and search settings."""

    rule_cutoff: datetime = RULE_CUTOFF
    pending_days: int = PENDING_DAYS
    invalid_labels: tuple[str, ...] = INVALID_LABELS
    accepted_label: str = ACCEPTED_LABEL
    hacktoberfest_topic: str = HACKTOBERFEST_TOPIC

    event_start: datetime = EVENT_START
    event_end: datetime = EVENT_END
    search_query_template: str = SEARCH_QUERY_TEMPLATE
    search_per_page: int = SEARCH_PER_PAGE

    # Max PR evaluations in flight at once
    concurrency: int = 10

    def search_query(self, username: str) -> str:
        return self.search_query_template.format(
            username=username,
            start=_format_timestamp(self.event_start),
            end=_format_timestamp(self.event_end),
        )

    def to_dict(self) -> dict:
        d = {}
        for k, v in self.__dict__.items():
            if isinstance(v, datetime):
                d[k] = _format_timestamp(v)
            elif isinstance(v, tuple):
                d[k] = list(v)
            else:
                d[k] = v
        return d

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        return path


DEFAULT_CONFIG = CheckerConfig()


def load_config(path: str | Path | None = None) -> CheckerConfig:
    """Load a config from a JSON file, falling back to the defaults."""
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    if not path.exists():
        raise ValueError(f"Config file not found: {path}")

    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")

    known = {f.name for f in fields(CheckerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    for k in _DATETIME_FIELDS:
        if k in data:
            data[k] = parse_timestamp(data[k])
    for k in _TUPLE_FIELDS:
        if k in data:
            data[k] = tuple(label.lower() for label in data[k])
    return CheckerConfig(**data)


def resolve_token(token: Optional[str] = None) -> Optional[str]:
    """Resolve a GitHub token: explicit > GITHUB_TOKEN > GH_TOKEN > gh CLI."""
    return (
        token
        or os.environ.get("GITHUB_TOKEN")
        or os.environ.get("GH_TOKEN")
        or _get_gh_cli_token()
    )


def _get_gh_cli_token() -> Optional[str]:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True, text=True, timeout=10
        )
        if result.returncode == 0:
            return result.stdout.strip() or None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None
