"""Exceptions for the Orchestrator module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from triagebot.orchestrator.models import RunReport


class OrchestratorError(Exception):
    """Base exception for orchestrator errors."""


class BatchFailedError(OrchestratorError):
    """One or more PRs (or card deletions) failed during a run.

    Raised at the very end of a run, chained from the first recorded error;
    ``report`` holds every failure.
    """

    def __init__(self, report: RunReport) -> None:
        self.report = report
        count = len(report.failures) + (len(report.cleanup.failed) if report.cleanup else 0)
        super().__init__(f"{count} failure(s), first: {report.first_error}")
