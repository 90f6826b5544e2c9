"""Data models for the Action Planner.

Actions are plain data: a planned sequence can be inspected, displayed and
compared before anything is executed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias


@dataclass(frozen=True)
class AddLabel:
    kind: Literal["add_label"] = field(default="add_label", init=False)
    label: str


@dataclass(frozen=True)
class RemoveLabel:
    kind: Literal["remove_label"] = field(default="remove_label", init=False)
    label: str


@dataclass(frozen=True)
class PostComment:
    """Post a comment, or update the existing bot comment with the same tag."""

    kind: Literal["post_comment"] = field(default="post_comment", init=False)
    tag: str
    body: str


@dataclass(frozen=True)
class MoveToColumn:
    """Put the PR's card in ``column``, creating the card if needed."""

    kind: Literal["move_to_column"] = field(default="move_to_column", init=False)
    column: str


@dataclass(frozen=True)
class RemoveFromProject:
    kind: Literal["remove_from_project"] = field(default="remove_from_project", init=False)


@dataclass(frozen=True)
class ClosePullRequest:
    kind: Literal["close_pull_request"] = field(default="close_pull_request", init=False)


Action: TypeAlias = (
    AddLabel | RemoveLabel | PostComment | MoveToColumn | RemoveFromProject | ClosePullRequest
)


@dataclass(frozen=True)
class ExtendedInfo:
    """Intermediate planning decisions, for diagnostics only.

    Attributes:
        number: PR number.
        column: Target board column, or None when the card is removed.
        labels: Managed labels the PR should carry.
        comment_tags: Tags of the comments planned for this PR.
        waiting_on_author: Whether the author has something to fix.
        ready_to_merge: Whether the PR is approved and green.
        close: Whether the PR is closed as abandoned.
    """

    number: int
    column: str | None
    labels: tuple[str, ...] = ()
    comment_tags: tuple[str, ...] = ()
    waiting_on_author: bool = False
    ready_to_merge: bool = False
    close: bool = False
