"""Orchestrator - runs the triage pipeline over every selected open PR."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from triagebot.executor import ActionExecutor, Mutation
from triagebot.orchestrator.exceptions import BatchFailedError
from triagebot.orchestrator.models import PrFailure, RunHooks, RunReport
from triagebot.planner import Action, ExtendedInfoCallback, plan_actions
from triagebot.pr_info import (
    BotError,
    BotResult,
    BotResultError,
    PullRequestInfo,
    derive_state,
)
from triagebot.reconciler import BoardReconciler
from triagebot.selection import Selection

if TYPE_CHECKING:
    from triagebot.github import GitHubClient

logger = logging.getLogger("triagebot.orchestrator")

Deriver = Callable[[PullRequestInfo], BotResult]
Planner = Callable[[BotResult, ExtendedInfoCallback | None], list[Action]]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Outcome:
    state: BotResult
    mutations: list[Mutation]


class Orchestrator:
    """Sequences derive, plan and execute over the open PRs, then cleans up.

    PRs are processed strictly one after the other. A failure in one PR is
    recorded and the batch goes on; the run fails at the very end, carrying
    the first recorded failure.
    """

    def __init__(
        self,
        client: GitHubClient,
        derive: Deriver = derive_state,
        plan: Planner = plan_actions,
        executor: ActionExecutor | None = None,
        reconciler: BoardReconciler | None = None,
        hooks: RunHooks | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the Orchestrator.

        Args:
            client: GitHub client for fetching PRs and board data.
            derive: PR state deriver.
            plan: Action planner.
            executor: Action executor. Defaults to one over ``client``.
            reconciler: Board reconciler. Defaults to one over ``client``.
            hooks: Observability hooks.
            clock: Source of the snapshot time of each fetched PR.
        """
        self.client = client
        self.derive = derive
        self.plan = plan
        self.executor = executor or ActionExecutor(client)
        self.reconciler = reconciler or BoardReconciler(client)
        self.hooks = hooks or RunHooks()
        self.clock = clock

    def run(
        self,
        selection: Callable[[int], bool] = Selection(),
        dry_run: bool = False,
        cleanup: bool = True,
    ) -> RunReport:
        """Process every selected open PR, then reconcile the board.

        Args:
            selection: PR-number predicate; all PRs by default.
            dry_run: Plan and build mutations without submitting anything.
                Also skips cleanup and never fails the run.
            cleanup: Run the board reconciler after the PRs.

        Returns:
            The run report.

        Raises:
            BatchFailedError: If any PR or card deletion failed (live runs
                with cleanup only).
            ReconcilerError: If the board cannot be cleaned up safely.
            TransportError: If the initial PR list or the board cannot be
                fetched.
        """
        logger.info("Getting open PRs.")
        open_prs = self.client.fetch_open_prs_and_card_ids()
        report = RunReport()

        total = len(open_prs.numbers)
        for index, number in enumerate(open_prs.numbers, start=1):
            if not selection(number):
                continue
            logger.info("Processing #%d (%d of %d)...", number, index, total)
            try:
                outcome = self._process(number, dry_run)
            except Exception as e:
                logger.error("  Error: %s", e)
                report.failures.append(PrFailure(number, e))
                continue

            if outcome is None:
                report.missing.append(number)
                continue
            report.processed.append(number)
            report.mutations[number] = outcome.mutations
            if isinstance(outcome.state, BotError):
                report.failures.append(
                    PrFailure(number, BotResultError(number, outcome.state.message))
                )

        if dry_run or not cleanup:
            self._log_failures(report)
            return report

        logger.info("Cleaning up cards")
        try:
            columns = self.client.fetch_project_columns()
            report.cleanup = self.reconciler.reconcile(columns, open_prs.card_ids)
        except Exception:
            # Recorded PR failures are reported even when cleanup aborts the run
            self._log_failures(report)
            raise

        if report.failed:
            self._log_failures(report)
            raise BatchFailedError(report) from report.first_error

        logger.info("Done")
        return report

    def _process(self, number: int, dry_run: bool) -> _Outcome | None:
        """Fetch, derive, plan and execute one PR.

        Returns:
            The outcome, or None when no PR with this number exists.
        """
        raw = self.client.fetch_pr_info(number)
        if self.hooks.show_raw:
            self.hooks.show_raw(raw)

        if not (raw.get("repository") or {}).get("pullRequest"):
            logger.error("  No PR with this number exists, (%s)", json.dumps(raw))
            return None

        pr = PullRequestInfo.from_graphql(raw, fetched_at=self.clock())
        state = self.derive(pr)
        if self.hooks.show_state:
            self.hooks.show_state(state)

        # Errors are logged but still planned and executed
        if isinstance(state, BotError):
            logger.error("  Error: %s", state.message)
        elif state.message:
            logger.info("  ... %s", state.message)

        actions = self.plan(state, self.hooks.show_extended)
        if self.hooks.show_actions:
            self.hooks.show_actions(actions)

        mutations = self.executor.execute(actions, pr, dry_run)
        if self.hooks.show_mutations:
            self.hooks.show_mutations(mutations)

        return _Outcome(state, mutations)

    def _log_failures(self, report: RunReport) -> None:
        cleanup_failures = report.cleanup.failed if report.cleanup else []
        if not report.failures and not cleanup_failures:
            return
        logger.error("\n\nThe following PRs failed:")
        for failure in report.failures:
            logger.error("  #%d: %s", failure.number, failure.error)
        for card_id, error in cleanup_failures:
            logger.error("  card %s: %s", card_id, error)
