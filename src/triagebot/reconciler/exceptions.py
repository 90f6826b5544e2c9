"""Exceptions for the Board Reconciler."""


class ReconcilerError(Exception):
    """Base exception for board cleanup errors."""


class ArchiveColumnNotFoundError(ReconcilerError):
    """The archive column is missing from the board.

    Cleaning up a board without it is unsafe, so this aborts the whole
    cleanup phase.
    """
