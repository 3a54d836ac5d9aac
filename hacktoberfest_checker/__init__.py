"""Hacktoberfest PR checker.

Lists the pull requests a GitHub user opened during Hacktoberfest and keeps the
ones that can count:
- no "invalid" or "spam" label
- opened before the rule change, or
- merged, approved, or in a repository tagged with the "hacktoberfest" topic
"""

from .finder import PRFinder, find_prs
from .models import PRRecord, PullRequestAuthor

__version__ = "1.0.0"

__all__ = ["PRFinder", "PRRecord", "PullRequestAuthor", "find_prs"]
