"""Orchestrator package - runs the triage pipeline over a batch of PRs."""

from triagebot.orchestrator.exceptions import BatchFailedError, OrchestratorError
from triagebot.orchestrator.models import PrFailure, RunHooks, RunReport
from triagebot.orchestrator.orchestrator import Orchestrator

__all__ = [
    "BatchFailedError",
    "Orchestrator",
    "OrchestratorError",
    "PrFailure",
    "RunHooks",
    "RunReport",
]
