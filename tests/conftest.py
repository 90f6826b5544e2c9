"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from triagebot.planner import rules
from triagebot.pr_info import CardRef, PullRequestInfo

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)

LABEL_IDS = {label: f"LA_{index}" for index, label in enumerate(rules.MANAGED_LABELS)}
COLUMN_IDS = {
    rules.NEEDS_AUTHOR_ACTION: "COL_author",
    rules.WAITING_FOR_AUTHOR_TO_MERGE: "COL_merge",
    rules.NEEDS_MAINTAINER_REVIEW: "COL_maintainer",
    rules.WAITING_FOR_CODE_REVIEWS: "COL_reviews",
    rules.ARCHIVE_COLUMN: "COL_archive",
}


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: talks to the real GitHub API (local only)")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_pr() -> Callable[..., PullRequestInfo]:
    """Factory for PR snapshots: an open, green, unreviewed PR on the board."""

    base = PullRequestInfo(
        node_id="PR_42",
        number=42,
        title="Add feature",
        url="https://github.com/owner/repo/pull/42",
        author="alice",
        author_association="CONTRIBUTOR",
        state="OPEN",
        is_draft=False,
        mergeable="MERGEABLE",
        head_oid="abc123",
        check_state="SUCCESS",
        check_url="https://github.com/owner/repo/pull/42/checks",
        additions=10,
        deletions=2,
        created_at=NOW - timedelta(days=5),
        last_push_at=NOW - timedelta(days=2),
        fetched_at=NOW,
        card=CardRef(id="CARD_42", column_name=rules.WAITING_FOR_CODE_REVIEWS),
        label_ids=dict(LABEL_IDS),
        column_ids=dict(COLUMN_IDS),
    )

    def factory(**overrides: Any) -> PullRequestInfo:
        return dataclasses.replace(base, **overrides)

    return factory


@pytest.fixture
def make_raw_pr() -> Callable[..., dict[str, Any]]:
    """Factory for raw PR query results as returned by GitHubClient.fetch_pr_info."""

    def factory(number: int = 42, **pr_overrides: Any) -> dict[str, Any]:
        pr: dict[str, Any] = {
            "id": f"PR_{number}",
            "number": number,
            "title": "Add feature",
            "url": f"https://github.com/owner/repo/pull/{number}",
            "state": "OPEN",
            "isDraft": False,
            "mergeable": "MERGEABLE",
            "createdAt": "2026-02-25T12:00:00Z",
            "additions": 10,
            "deletions": 2,
            "authorAssociation": "CONTRIBUTOR",
            "author": {"login": "alice"},
            "labels": {"nodes": []},
            "comments": {"nodes": []},
            "reviews": {"nodes": []},
            "commits": {
                "nodes": [
                    {
                        "commit": {
                            "oid": "abc123",
                            "committedDate": "2026-02-28T12:00:00Z",
                            "pushedDate": None,
                            "statusCheckRollup": {"state": "SUCCESS"},
                        }
                    }
                ]
            },
            "projectCards": {
                "nodes": [
                    {
                        "id": f"CARD_{number}",
                        "project": {"number": 5},
                        "column": {"name": rules.WAITING_FOR_CODE_REVIEWS},
                    }
                ]
            },
        }
        pr.update(pr_overrides)
        return {
            "repository": {
                "pullRequest": pr,
                "labels": {"nodes": [{"id": i, "name": n} for n, i in LABEL_IDS.items()]},
                "project": {
                    "number": 5,
                    "columns": {"nodes": [{"id": i, "name": n} for n, i in COLUMN_IDS.items()]},
                },
            }
        }

    return factory
