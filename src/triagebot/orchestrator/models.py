"""Data models for the Orchestrator module."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from triagebot.executor import Mutation
    from triagebot.planner import Action, ExtendedInfoCallback
    from triagebot.pr_info import BotResult
    from triagebot.reconciler import CleanupResult


@dataclass
class RunHooks:
    """Observability hooks, each optional and purely observational.

    Attributes:
        show_raw: Called with the raw PR query result.
        show_state: Called with the derived BotResult.
        show_extended: Passed to the planner as its diagnostic callback.
        show_actions: Called with the planned actions.
        show_mutations: Called with the submitted (or would-be) mutations.
    """

    show_raw: Callable[[dict[str, Any]], None] | None = None
    show_state: Callable[[BotResult], None] | None = None
    show_extended: ExtendedInfoCallback | None = None
    show_actions: Callable[[list[Action]], None] | None = None
    show_mutations: Callable[[list[Mutation]], None] | None = None


@dataclass
class PrFailure:
    """A PR whose processing failed."""

    number: int
    error: Exception


@dataclass
class RunReport:
    """Everything a run did.

    Attributes:
        processed: PRs that went through the whole pipeline, in order.
        missing: Selected PRs the query could not find.
        failures: Per-PR failures, in the order they happened.
        mutations: Mutations per processed PR.
        cleanup: Result of the cleanup phase, if it ran.
    """

    processed: list[int] = field(default_factory=list)
    missing: list[int] = field(default_factory=list)
    failures: list[PrFailure] = field(default_factory=list)
    mutations: dict[int, list[Mutation]] = field(default_factory=dict)
    cleanup: CleanupResult | None = None

    @property
    def failed(self) -> bool:
        return bool(self.failures) or bool(self.cleanup and self.cleanup.failed)

    @property
    def first_error(self) -> Exception | None:
        if self.failures:
            return self.failures[0].error
        if self.cleanup and self.cleanup.failed:
            return self.cleanup.failed[0][1]
        return None
