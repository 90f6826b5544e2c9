"""Unit tests for the triage Orchestrator."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from triagebot.github import OpenPullRequests, ProjectColumn, TransportError
from triagebot.orchestrator import BatchFailedError, Orchestrator, RunHooks
from triagebot.planner import ExtendedInfo
from triagebot.pr_info import BotError, BotResultError, PrInfo, PullRequestInfo, derive_state
from triagebot.reconciler import ArchiveColumnNotFoundError, CleanupPlan, CleanupResult
from triagebot.selection import build_selection

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)

MakeRaw = Callable[..., dict[str, Any]]


def _archive() -> list[ProjectColumn]:
    return [ProjectColumn(id="COL_archive", name="Recently Merged")]


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock GitHubClient."""
    client = MagicMock()
    client.fetch_project_columns.return_value = _archive()
    return client


def _serve(mock_client: MagicMock, make_raw_pr: MakeRaw, *numbers: int) -> None:
    """Make the mock client report the given open PRs."""
    mock_client.fetch_open_prs_and_card_ids.return_value = OpenPullRequests(
        numbers=list(numbers), card_ids={f"CARD_{n}" for n in numbers}
    )
    mock_client.fetch_pr_info.side_effect = lambda number: make_raw_pr(number)


def _orchestrator(client: MagicMock, **kwargs: Any) -> Orchestrator:
    return Orchestrator(client, clock=lambda: NOW, **kwargs)


@pytest.mark.unit
class TestBatch:
    """Tests for processing a batch of PRs."""

    def test_processes_open_prs_in_order(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 1, 2, 3)

        report = _orchestrator(mock_client).run()

        assert report.processed == [1, 2, 3]
        assert [c.args[0] for c in mock_client.fetch_pr_info.call_args_list] == [1, 2, 3]
        assert report.failures == []

    def test_failure_does_not_stop_batch(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 1, 2, 3)
        error = TransportError("rate limited")

        def fetch(number: int) -> dict[str, Any]:
            if number == 2:
                raise error
            return make_raw_pr(number)

        mock_client.fetch_pr_info.side_effect = fetch

        report = _orchestrator(mock_client).run(cleanup=False)

        assert report.processed == [1, 3]
        assert len(report.failures) == 1
        assert report.failures[0].number == 2
        assert report.failures[0].error is error

    def test_selection_filters_prs(self, mock_client: MagicMock, make_raw_pr: MakeRaw) -> None:
        _serve(mock_client, make_raw_pr, 5, 10, 11, 20)

        report = _orchestrator(mock_client).run(selection=build_selection(["5", "10-11"]))

        assert report.processed == [5, 10, 11]

    def test_missing_pr_is_skipped(self, mock_client: MagicMock, make_raw_pr: MakeRaw) -> None:
        _serve(mock_client, make_raw_pr, 7)
        mock_client.fetch_pr_info.side_effect = None
        mock_client.fetch_pr_info.return_value = {"repository": {"pullRequest": None}}

        report = _orchestrator(mock_client).run()

        assert report.missing == [7]
        assert report.processed == []
        assert report.failures == []

    def test_mutations_are_submitted(self, mock_client: MagicMock, make_raw_pr: MakeRaw) -> None:
        _serve(mock_client, make_raw_pr, 42)

        report = _orchestrator(mock_client).run()

        # Only the status comment is missing from a green PR already in place
        assert [m.name for m in report.mutations[42]] == ["addComment"]
        mock_client.submit_mutation.assert_called_once_with(report.mutations[42][0])


@pytest.mark.unit
class TestEndToEnd:
    """Tests for a run with an erroring PR."""

    @staticmethod
    def _derive(pr: PullRequestInfo) -> Any:
        if pr.number == 101:
            return BotError(number=101, message="CI failed")
        return derive_state(pr)

    def test_error_fails_run_after_cleanup(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 101, 102)

        with pytest.raises(BatchFailedError) as exc_info:
            _orchestrator(mock_client, derive=self._derive).run()

        report = exc_info.value.report
        assert report.processed == [101, 102]
        assert report.mutations[101] == []
        assert report.mutations[102] != []
        assert [f.number for f in report.failures] == [101]
        assert isinstance(exc_info.value.__cause__, BotResultError)
        assert str(exc_info.value.__cause__) == "CI failed"
        mock_client.fetch_project_columns.assert_called_once()
        assert report.cleanup is not None

    def test_dry_run_submits_nothing_and_does_not_raise(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 101, 102)

        report = _orchestrator(mock_client, derive=self._derive).run(dry_run=True)

        assert report.failed
        assert report.mutations[102] != []
        mock_client.submit_mutation.assert_not_called()
        mock_client.fetch_project_columns.assert_not_called()
        mock_client.delete_card.assert_not_called()

    def test_cleanup_failure_fails_run(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 1)
        error = TransportError("boom")
        reconciler = MagicMock()
        reconciler.reconcile.return_value = CleanupResult(
            plan=CleanupPlan(deletions=["A0"]), failed=[("A0", error)]
        )

        with pytest.raises(BatchFailedError) as exc_info:
            _orchestrator(mock_client, reconciler=reconciler).run()

        assert exc_info.value.__cause__ is error
        reconciler.reconcile.assert_called_once_with(_archive(), {"CARD_1"})


@pytest.mark.unit
class TestFailureSummary:
    """Recorded failures are listed even when cleanup aborts the run."""

    def _failing_batch(self, mock_client: MagicMock, make_raw_pr: MakeRaw) -> None:
        _serve(mock_client, make_raw_pr, 1, 2)

        def fetch(number: int) -> dict[str, Any]:
            if number == 2:
                raise TransportError("rate limited")
            return make_raw_pr(number)

        mock_client.fetch_pr_info.side_effect = fetch

    def test_summary_logged_when_archive_column_missing(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw, caplog: pytest.LogCaptureFixture
    ) -> None:
        self._failing_batch(mock_client, make_raw_pr)
        mock_client.fetch_project_columns.return_value = [
            ProjectColumn(id="COL_author", name="Needs Author Action")
        ]
        caplog.set_level(logging.ERROR, logger="triagebot")

        with pytest.raises(ArchiveColumnNotFoundError):
            _orchestrator(mock_client).run()

        messages = [record.getMessage() for record in caplog.records]
        assert any("The following PRs failed:" in m for m in messages)
        assert "  #2: rate limited" in messages

    def test_summary_logged_when_board_fetch_fails(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw, caplog: pytest.LogCaptureFixture
    ) -> None:
        self._failing_batch(mock_client, make_raw_pr)
        mock_client.fetch_project_columns.side_effect = TransportError("board unavailable")
        caplog.set_level(logging.ERROR, logger="triagebot")

        with pytest.raises(TransportError, match="board unavailable"):
            _orchestrator(mock_client).run()

        assert "  #2: rate limited" in [record.getMessage() for record in caplog.records]


@pytest.mark.unit
class TestHooks:
    """Tests for the observability hooks."""

    def test_hooks_receive_each_stage(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 42)
        hooks = RunHooks(
            show_raw=MagicMock(),
            show_state=MagicMock(),
            show_extended=MagicMock(),
            show_actions=MagicMock(),
            show_mutations=MagicMock(),
        )

        report = _orchestrator(mock_client, hooks=hooks).run()

        hooks.show_raw.assert_called_once_with(make_raw_pr(42))
        assert isinstance(hooks.show_state.call_args.args[0], PrInfo)
        assert isinstance(hooks.show_extended.call_args.args[0], ExtendedInfo)
        assert hooks.show_actions.call_args.args[0][-1].kind == "move_to_column"
        hooks.show_mutations.assert_called_once_with(report.mutations[42])

    def test_hooks_do_not_change_outcome(
        self, mock_client: MagicMock, make_raw_pr: MakeRaw
    ) -> None:
        _serve(mock_client, make_raw_pr, 1, 2)
        plain = _orchestrator(mock_client).run(dry_run=True)

        hooks = RunHooks(show_state=MagicMock(), show_extended=MagicMock())
        observed = _orchestrator(mock_client, hooks=hooks).run(dry_run=True)

        assert observed.mutations == plain.mutations
