from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Optional

from .config import DEFAULT_CONFIG, CheckerConfig, parse_timestamp
from .filters import (
    format_human_date,
    has_accepted_label,
    has_invalid_label,
    has_topic,
    is_approved,
    is_merged_status,
    is_pending,
    label_names,
    repo_name_from_item,
    uses_new_rules,
)
from .github_client import PullRequestSource
from .models import PRRecord, PullRequestAuthor

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _gather_or_cancel(*aws):
    """Gather awaitables, cancelling the unfinished ones when any of them fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class PRFinder:
    """Classifies a user's pull requests against the Hacktoberfest rules."""

    def __init__(
        self,
        client: PullRequestSource,
        config: CheckerConfig = DEFAULT_CONFIG,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.client = client
        self.config = config
        self.clock = clock
        self.rejection_counts: dict[str, int] = defaultdict(int)

    async def find(self, username: str) -> list[PRRecord]:
        response = await self.client.search_issues(self.config.search_query(username))
        if self.client.has_next_page(response):
            # Only the first page is evaluated.
            log.warning("More pull requests exist for %s than fit in one page; the rest are skipped.", username)

        items = (response.data or {}).get("items") or []
        now = self.clock()
        semaphore = asyncio.Semaphore(max(self.config.concurrency, 1))

        async def bounded(item: dict) -> Optional[PRRecord]:
            async with semaphore:
                return await self._evaluate(item, now)

        results = await _gather_or_cancel(*(bounded(item) for item in items))
        records = [record for record in results if record is not None]
        log.info("%s: %d of %d pull requests kept", username, len(records), len(items))
        return records

    async def _evaluate(self, item: dict, now: datetime) -> Optional[PRRecord]:
        labels = label_names(item)
        if has_invalid_label(labels, self.config.invalid_labels):
            self._reject("invalid_label", item)
            return None

        created_at = parse_timestamp(item["created_at"])
        repo_name = repo_name_from_item(item)
        owner, repo = repo_name.split("/", 1)
        number = item["number"]

        merged = approved = False
        repo_must_have_topic = False
        repo_has_topic: Optional[bool] = None

        if uses_new_rules(created_at, self.config.rule_cutoff):
            merge_response, reviews_response = await _gather_or_cancel(
                self.client.check_merged(owner, repo, number),
                self.client.get_reviews(owner, repo, number),
            )
            merged = is_merged_status(merge_response.status)
            approved = is_approved(reviews_response.data)

            if not (merged or approved):
                topics_response = await self.client.get_topics(owner, repo)
                repo_must_have_topic = True
                repo_has_topic = has_topic(topics_response.data, self.config.hacktoberfest_topic)
                if not repo_has_topic:
                    self._reject("repo_missing_topic", item)
                    return None

        user = item.get("user") or {}
        return PRRecord(
            number=number,
            title=item.get("title", ""),
            created_at=format_human_date(created_at),
            url=item.get("html_url", ""),
            repo_name=repo_name,
            user=PullRequestAuthor(login=user.get("login", ""), url=user.get("html_url", "")),
            open=item.get("state") == "open",
            is_pending=is_pending(created_at, now, self.config.pending_days),
            has_hacktoberfest_label=has_accepted_label(labels, self.config.accepted_label),
            merged=merged,
            approved=approved,
            repo_must_have_topic=repo_must_have_topic,
            repo_has_hacktoberfest_topic=repo_has_topic,
        )

    def _reject(self, reason: str, item: dict) -> None:
        self.rejection_counts[reason] += 1
        log.debug("Dropping PR %s: %s", item.get("html_url") or item.get("number"), reason)


async def find_prs(
    client: PullRequestSource,
    username: str,
    config: CheckerConfig = DEFAULT_CONFIG,
    clock: Callable[[], datetime] = _utcnow,
) -> list[PRRecord]:
    """Return the user's eligible pull requests from the first search page."""
    return await PRFinder(client, config, clock).find(username)
