"""Custom exceptions for the Action Executor."""


class ExecutionError(Exception):
    """Base exception for action execution errors."""


class UnknownLabelError(ExecutionError):
    """A planned label does not exist in the repository."""


class UnknownColumnError(ExecutionError):
    """A planned column does not exist on the project board."""
