"""Action Planner - computes the actions the bot takes on a PR."""

from triagebot.planner.models import (
    Action,
    AddLabel,
    ClosePullRequest,
    ExtendedInfo,
    MoveToColumn,
    PostComment,
    RemoveFromProject,
    RemoveLabel,
)
from triagebot.planner.planner import ExtendedInfoCallback, plan_actions

__all__ = [
    "Action",
    "AddLabel",
    "ClosePullRequest",
    "ExtendedInfo",
    "ExtendedInfoCallback",
    "MoveToColumn",
    "PostComment",
    "RemoveFromProject",
    "RemoveLabel",
    "plan_actions",
]
