from __future__ import annotations

import csv
import json
from pathlib import Path

from .models import PRRecord

CSV_FIELDS = (
    "number", "title", "created_at", "url", "repo_name", "user_login", "user_url",
    "open", "is_pending", "has_hacktoberfest_label", "merged", "approved",
    "repo_must_have_topic", "repo_has_hacktoberfest_topic",
)


def write_json(path: str | Path, records: list[PRRecord]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps([r.to_dict() for r in records], indent=2) + "\n", encoding="utf-8")


def write_csv(path: str | Path, records: list[PRRecord]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS, restval="")
        w.writeheader()
        for r in records:
            row = r.to_dict()
            user = row.pop("user")
            row["user_login"] = user["login"]
            row["user_url"] = user["url"]
            w.writerow(row)
