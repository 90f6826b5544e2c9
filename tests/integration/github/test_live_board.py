"""Integration tests for GitHubClient against the real GitHub API.

These tests require:
- GITHUB_TOKEN environment variable
- GITHUB_TEST_REPO environment variable (e.g., "owner/test-repo")
- GITHUB_TEST_PROJECT_NUMBER environment variable (classic project number)
- A "Recently Merged" column on that project

They only read; no mutation is ever submitted.

Run with: pytest tests/integration/github/ -m real
"""

import os
from datetime import UTC, datetime

import pytest

from triagebot.github import GitHubClient
from triagebot.orchestrator import Orchestrator
from triagebot.pr_info import PullRequestInfo

# Skip all tests in this module if credentials not available
pytestmark = [
    pytest.mark.integration,
    pytest.mark.real,
    pytest.mark.skipif(
        not os.environ.get("GITHUB_TOKEN")
        or not os.environ.get("GITHUB_TEST_REPO")
        or not os.environ.get("GITHUB_TEST_PROJECT_NUMBER"),
        reason="GITHUB_TOKEN, GITHUB_TEST_REPO, and GITHUB_TEST_PROJECT_NUMBER required",
    ),
]


@pytest.fixture
def client() -> GitHubClient:
    """Create a GitHubClient for the test project."""
    client = GitHubClient(
        repo=os.environ["GITHUB_TEST_REPO"],
        project_number=int(os.environ["GITHUB_TEST_PROJECT_NUMBER"]),
        token=os.environ["GITHUB_TOKEN"],
    )
    yield client
    client.close()


class TestReadOnly:
    """Read-only checks against a live repository."""

    def test_open_prs_parse(self, client: GitHubClient) -> None:
        open_prs = client.fetch_open_prs_and_card_ids()

        for number in open_prs.numbers[:3]:
            raw = client.fetch_pr_info(number)
            pr = PullRequestInfo.from_graphql(raw, fetched_at=datetime.now(UTC))
            assert pr.number == number
            assert pr.state == "OPEN"

    def test_board_has_archive_column(self, client: GitHubClient) -> None:
        names = [column.name for column in client.fetch_project_columns()]

        assert "Recently Merged" in names

    def test_dry_run(self, client: GitHubClient) -> None:
        report = Orchestrator(client).run(dry_run=True)

        assert report.cleanup is None
