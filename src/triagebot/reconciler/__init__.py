"""Board Reconciler - deletes project cards that no longer track an open PR."""

from triagebot.reconciler.exceptions import ArchiveColumnNotFoundError, ReconcilerError
from triagebot.reconciler.models import CleanupPlan, CleanupResult, ShouldDelete
from triagebot.reconciler.reconciler import BoardReconciler

__all__ = [
    "ArchiveColumnNotFoundError",
    "BoardReconciler",
    "CleanupPlan",
    "CleanupResult",
    "ReconcilerError",
    "ShouldDelete",
]
