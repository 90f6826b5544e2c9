"""Action Planner - turns a BotResult into an ordered list of actions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import assert_never

from triagebot.planner import rules
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
from triagebot.pr_info.models import (
    BotError,
    BotMerged,
    BotRemove,
    BotResult,
    PrInfo,
    Staleness,
)

logger = logging.getLogger("triagebot.planner")

ExtendedInfoCallback = Callable[[ExtendedInfo], None]


def plan_actions(
    result: BotResult,
    on_extended: ExtendedInfoCallback | None = None,
    archive_column: str = rules.ARCHIVE_COLUMN,
) -> list[Action]:
    """Compute the actions for one PR.

    Pure: the returned list depends on the arguments only. ``on_extended`` is
    called with intermediate decisions and has no influence on the return
    value.

    Args:
        result: Derived state of the PR.
        on_extended: Optional diagnostic observer.
        archive_column: Column merged PRs are moved to.

    Returns:
        Actions in the order they must be applied.
    """
    match result:
        case BotError():
            extended = ExtendedInfo(number=result.number, column=None)
            actions: list[Action] = []
        case BotRemove():
            extended = ExtendedInfo(number=result.number, column=None)
            actions = [RemoveFromProject()]
        case BotMerged():
            extended = ExtendedInfo(number=result.number, column=archive_column)
            actions = [MoveToColumn(column=archive_column)]
        case PrInfo():
            extended, actions = _plan_for_info(result)
        case _:
            assert_never(result)

    if on_extended is not None:
        on_extended(extended)
    logger.debug("Planned %d action(s) for #%d", len(actions), result.number)
    return actions


def _plan_for_info(info: PrInfo) -> tuple[ExtendedInfo, list[Action]]:
    wanted = rules.wanted_labels(info)
    planned_comments = rules.comments(info)
    close = info.staleness is Staleness.ABANDONED

    actions: list[Action] = [
        AddLabel(label=label) if label in wanted else RemoveLabel(label=label)
        for label in rules.MANAGED_LABELS
    ]
    actions.extend(PostComment(tag=tag, body=body) for tag, body in planned_comments)

    if close:
        column = None
        actions.append(ClosePullRequest())
        actions.append(RemoveFromProject())
    else:
        column = rules.target_column(info)
        actions.append(MoveToColumn(column=column))

    extended = ExtendedInfo(
        number=info.number,
        column=column,
        labels=tuple(label for label in rules.MANAGED_LABELS if label in wanted),
        comment_tags=tuple(tag for tag, _ in planned_comments),
        waiting_on_author=info.waiting_on_author,
        ready_to_merge=rules.is_ready_to_merge(info),
        close=close,
    )
    return extended, actions
