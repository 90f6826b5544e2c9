"""Action Executor - applies planned actions through the mutation API."""

from triagebot.executor.exceptions import (
    ExecutionError,
    UnknownColumnError,
    UnknownLabelError,
)
from triagebot.executor.executor import ActionExecutor, translate_actions
from triagebot.executor.models import Mutation

__all__ = [
    "ActionExecutor",
    "ExecutionError",
    "Mutation",
    "UnknownColumnError",
    "UnknownLabelError",
    "translate_actions",
]
