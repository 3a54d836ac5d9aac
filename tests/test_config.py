from __future__ import annotations

import json
import unittest
from datetime import datetime, timezone
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from hacktoberfest_checker.config import (
    DEFAULT_CONFIG,
    RULE_CUTOFF,
    CheckerConfig,
    load_config,
    parse_timestamp,
    resolve_token,
)


class ParseTimestampTest(unittest.TestCase):
    def test_zulu_suffix(self) -> None:
        self.assertEqual(
            parse_timestamp("2020-10-03T12:00:00Z"),
            datetime(2020, 10, 3, 12, 0, 0, tzinfo=timezone.utc),
        )

    def test_offset_converted_to_utc(self) -> None:
        self.assertEqual(
            parse_timestamp("2020-10-03T14:00:00+02:00"),
            RULE_CUTOFF,
        )

    def test_naive_assumed_utc(self) -> None:
        self.assertEqual(parse_timestamp("2020-10-03T12:00:00"), RULE_CUTOFF)


class CheckerConfigTest(unittest.TestCase):
    def test_defaults(self) -> None:
        self.assertEqual(DEFAULT_CONFIG.rule_cutoff, RULE_CUTOFF)
        self.assertEqual(DEFAULT_CONFIG.pending_days, 14)
        self.assertEqual(DEFAULT_CONFIG.invalid_labels, ("invalid", "spam"))

    def test_search_query(self) -> None:
        self.assertEqual(
            DEFAULT_CONFIG.search_query("octocat"),
            "author:octocat type:pr is:public created:2020-09-30T10:00:00Z..2020-11-01T12:00:00Z",
        )

    def test_load_default(self) -> None:
        self.assertIs(load_config(None), DEFAULT_CONFIG)

    def test_save_and_load_round_trip(self) -> None:
        config = CheckerConfig(pending_days=7, invalid_labels=("invalid", "spam", "wontfix"))
        with TemporaryDirectory() as tmp:
            path = config.save(Path(tmp) / "rules.json")
            self.assertEqual(load_config(path), config)

    def test_load_partial_file(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "rules.json"
            path.write_text(json.dumps({
                "rule_cutoff": "2021-10-01T00:00:00Z",
                "invalid_labels": ["Invalid", "SPAM"],
            }))
            config = load_config(path)
        self.assertEqual(config.rule_cutoff, datetime(2021, 10, 1, tzinfo=timezone.utc))
        self.assertEqual(config.invalid_labels, ("invalid", "spam"))
        self.assertEqual(config.pending_days, 14)

    def test_unknown_keys_rejected(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "rules.json"
            path.write_text(json.dumps({"cutoff": "2021-10-01T00:00:00Z"}))
            with self.assertRaises(ValueError):
                load_config(path)

    def test_missing_file_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_config("/nonexistent/rules.json")


class ResolveTokenTest(unittest.TestCase):
    def test_explicit_token_wins(self) -> None:
        with patch.dict("os.environ", {"GITHUB_TOKEN": "env"}):
            self.assertEqual(resolve_token("cli"), "cli")

    def test_env_order(self) -> None:
        with patch.dict("os.environ", {"GITHUB_TOKEN": "one", "GH_TOKEN": "two"}):
            self.assertEqual(resolve_token(), "one")
        with patch.dict("os.environ", {"GH_TOKEN": "two"}, clear=True):
            self.assertEqual(resolve_token(), "two")

    def test_gh_cli_fallback(self) -> None:
        with patch.dict("os.environ", {}, clear=True), \
                patch("hacktoberfest_checker.config._get_gh_cli_token", return_value="from-gh"):
            self.assertEqual(resolve_token(), "from-gh")


if __name__ == "__main__":
    unittest.main()
