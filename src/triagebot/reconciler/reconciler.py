"""Board Reconciler - removes stale cards from the project board."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from triagebot.github.exceptions import GitHubError
from triagebot.reconciler.exceptions import ArchiveColumnNotFoundError
from triagebot.reconciler.models import CleanupPlan, CleanupResult, ShouldDelete

if TYPE_CHECKING:
    from triagebot.github import GitHubClient, ProjectColumn

logger = logging.getLogger("triagebot.reconciler")

DEFAULT_ARCHIVE_COLUMN = "Recently Merged"
DEFAULT_ARCHIVE_KEEP = 50

UNRESOLVED = "???"


class BoardReconciler:
    """Brings the board back in line with the set of open PRs.

    Only deletes a card when it is safe to: archive cards beyond the newest
    ``archive_keep``, and cards of other columns whose PR is confirmed
    closed. Anything ambiguous is reported as "should delete" and left alone.
    """

    def __init__(
        self,
        client: GitHubClient,
        archive_column: str = DEFAULT_ARCHIVE_COLUMN,
        archive_keep: int = DEFAULT_ARCHIVE_KEEP,
    ) -> None:
        """Initialize the reconciler.

        Args:
            client: Client used to resolve cards and delete them.
            archive_column: Name of the column holding merged PRs.
            archive_keep: How many of the newest archive cards to keep.
        """
        self.client = client
        self.archive_column = archive_column
        self.archive_keep = archive_keep

    def plan(self, columns: list[ProjectColumn], open_card_ids: Iterable[str]) -> CleanupPlan:
        """Compute which cards to delete.

        Every column whose card count exceeds the cards this query returned
        adds a warning to the plan, not only the archive. Unseen cards are
        neither trimmed nor checked for closed PRs.

        Args:
            columns: Board columns as fetched.
            open_card_ids: Ids of cards linked to currently open PRs.

        Returns:
            The cleanup plan.

        Raises:
            ArchiveColumnNotFoundError: If the archive column is missing.
        """
        archive = next((c for c in columns if c.name == self.archive_column), None)
        if archive is None:
            raise ArchiveColumnNotFoundError(
                f"Could not find the '{self.archive_column}' column in {[c.name for c in columns]}"
            )

        plan = CleanupPlan()
        for column in columns:
            if column.unseen_count:
                warning = f"{column.unseen_count} cards in '{column.name}' were not seen by this query!"
                logger.warning("  *** Note: %s", warning)
                plan.warnings.append(warning)

        newest_first = sorted(archive.cards, key=lambda card: card.updated_at, reverse=True)
        # Delete oldest first
        expired = list(reversed(newest_first[self.archive_keep :]))
        if expired:
            logger.info(
                "Cutting '%s' to the last %d (%d to delete)",
                archive.name,
                self.archive_keep,
                len(expired),
            )
            plan.deletions.extend(card.id for card in expired)

        open_ids = set(open_card_ids)
        for column in columns:
            if column is archive:
                continue
            stale = [card.id for card in column.cards if card.id not in open_ids]
            if not stale:
                continue
            logger.info("Cleaning up closed PRs in '%s'", column.name)
            for card_id in stale:
                reason = self._deletion_blocker(card_id)
                if reason is None:
                    plan.deletions.append(card_id)
                else:
                    # PRs opened during the scan also end up here
                    logger.info("  Should delete '%s' (%s)", card_id, reason)
                    plan.should_delete.append(ShouldDelete(card_id, column.name, reason))
        return plan

    def apply(self, plan: CleanupPlan) -> CleanupResult:
        """Delete the planned cards, one mutation each.

        A failed deletion is logged and recorded; the remaining cards are
        still attempted.
        """
        result = CleanupResult(plan=plan)
        for card_id in plan.deletions:
            try:
                self.client.delete_card(card_id)
            except GitHubError as e:
                logger.error("  Failed to delete card '%s': %s", card_id, e)
                result.failed.append((card_id, e))
            else:
                result.deleted.append(card_id)
        if result.deleted:
            logger.info("Deleted %d card(s)", len(result.deleted))
        return result

    def reconcile(
        self, columns: list[ProjectColumn], open_card_ids: Iterable[str]
    ) -> CleanupResult:
        """Plan and apply the cleanup."""
        return self.apply(self.plan(columns, open_card_ids))

    def _deletion_blocker(self, card_id: str) -> str | None:
        """Why a card must not be deleted, or None when its PR is closed."""
        try:
            info = self.client.resolve_pr_for_card_id(card_id)
        except GitHubError as e:
            logger.warning("  Could not resolve card '%s': %s", card_id, e)
            return UNRESOLVED
        if info is None:
            return UNRESOLVED
        if info.state != "CLOSED":
            return f"#{info.number}"
        return None
