"""Data models for the Board Reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShouldDelete:
    """A stale-looking card the bot is not allowed to delete on its own.

    Attributes:
        card_id: The card.
        column: Column the card is in.
        reason: ``???`` when the linked PR could not be resolved, otherwise
            ``#<number>`` of a PR that is not closed.
    """

    card_id: str
    column: str
    reason: str


@dataclass
class CleanupPlan:
    """Cards to delete, and cards only reported.

    Attributes:
        deletions: Card ids to delete, in deletion order.
        should_delete: Cards that look stale but are kept.
        warnings: Data-integrity warnings raised while planning.
    """

    deletions: list[str] = field(default_factory=list)
    should_delete: list[ShouldDelete] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class CleanupResult:
    """Outcome of applying a cleanup plan."""

    plan: CleanupPlan
    deleted: list[str] = field(default_factory=list)
    failed: list[tuple[str, Exception]] = field(default_factory=list)
