"""Action Executor - translates planned actions into GraphQL mutations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, assert_never

from triagebot.executor.exceptions import (
    ExecutionError,
    UnknownColumnError,
    UnknownLabelError,
)
from triagebot.executor.models import Mutation
from triagebot.planner.models import (
    Action,
    AddLabel,
    ClosePullRequest,
    MoveToColumn,
    PostComment,
    RemoveFromProject,
    RemoveLabel,
)
from triagebot.pr_info.models import tag_marker

if TYPE_CHECKING:
    from triagebot.github import GitHubClient
    from triagebot.pr_info.models import PullRequestInfo

logger = logging.getLogger("triagebot.executor")

# Stand-in id for a card created earlier in the same plan; the real id is
# only known after submission
_NEW_CARD = "<new card>"


class _LabelBatch:
    """Consecutive label changes of one kind, submitted as one mutation."""

    def __init__(self, name: str, labelable_id: str) -> None:
        self.name = name
        self.labelable_id = labelable_id
        self.label_ids: list[str] = []

    def to_mutation(self) -> Mutation:
        return Mutation(
            self.name,
            {"labelableId": self.labelable_id, "labelIds": list(self.label_ids)},
        )


def translate_actions(actions: Iterable[Action], pr: PullRequestInfo) -> list[Mutation]:
    """Translate actions into the mutations needed on the live PR.

    Actions already satisfied by the PR's current state produce nothing.
    Actions are translated in order against a working copy of the PR's
    labels, comments and card, so each one sees the effect of the previous.

    Args:
        actions: Planned actions, in order.
        pr: Live snapshot of the PR the actions apply to.

    Returns:
        Mutations in submission order.

    Raises:
        UnknownLabelError: If a label to add does not exist in the repository.
        UnknownColumnError: If a target column does not exist on the board.
    """
    labels = set(pr.labels)
    comment_bodies: dict[str, tuple[str | None, str]] = {}
    for comment in pr.comments:
        if comment.tag is not None:
            comment_bodies[comment.tag] = (comment.id, comment.body)
    card_id = pr.card.id if pr.card else None
    card_column = pr.card.column_name if pr.card else None
    is_open = pr.state == "OPEN"

    mutations: list[Mutation] = []
    batch: _LabelBatch | None = None

    def emit(mutation: Mutation) -> None:
        nonlocal batch
        if batch is not None:
            mutations.append(batch.to_mutation())
            batch = None
        mutations.append(mutation)

    def add_to_batch(name: str, label_id: str) -> None:
        nonlocal batch
        if batch is not None and batch.name != name:
            mutations.append(batch.to_mutation())
            batch = None
        if batch is None:
            batch = _LabelBatch(name, pr.node_id)
        batch.label_ids.append(label_id)

    for action in actions:
        match action:
            case AddLabel(label=label):
                if label in labels:
                    continue
                label_id = pr.label_ids.get(label)
                if label_id is None:
                    raise UnknownLabelError(f"Label '{label}' does not exist in the repository")
                add_to_batch("addLabelsToLabelable", label_id)
                labels.add(label)
            case RemoveLabel(label=label):
                if label not in labels:
                    continue
                label_id = pr.label_ids.get(label)
                if label_id is None:
                    raise UnknownLabelError(f"Label '{label}' does not exist in the repository")
                add_to_batch("removeLabelsFromLabelable", label_id)
                labels.discard(label)
            case PostComment(tag=tag, body=body):
                full_body = f"{body}\n{tag_marker(tag)}"
                existing = comment_bodies.get(tag)
                if existing is None:
                    emit(Mutation("addComment", {"subjectId": pr.node_id, "body": full_body}))
                    comment_bodies[tag] = (None, full_body)
                elif existing[1] != full_body:
                    comment_id = existing[0]
                    if comment_id is None:
                        # Posted earlier in this same plan; post the newer text instead
                        emit(Mutation("addComment", {"subjectId": pr.node_id, "body": full_body}))
                    else:
                        emit(Mutation("updateIssueComment", {"id": comment_id, "body": full_body}))
                    comment_bodies[tag] = (comment_id, full_body)
            case MoveToColumn(column=column):
                if card_id is not None and card_column == column:
                    continue
                column_id = pr.column_ids.get(column)
                if column_id is None:
                    raise UnknownColumnError(
                        f"Column '{column}' not found. Available: {list(pr.column_ids)}"
                    )
                if card_id == _NEW_CARD:
                    raise ExecutionError(f"Cannot move a card added by the same plan to '{column}'")
                if card_id is None:
                    emit(
                        Mutation(
                            "addProjectCard",
                            {"projectColumnId": column_id, "contentId": pr.node_id},
                        )
                    )
                    card_id = _NEW_CARD
                else:
                    emit(Mutation("moveProjectCard", {"cardId": card_id, "columnId": column_id}))
                card_column = column
            case RemoveFromProject():
                if card_id is None:
                    continue
                if card_id == _NEW_CARD:
                    raise ExecutionError("Cannot remove a card added by the same plan")
                emit(Mutation("deleteProjectCard", {"cardId": card_id}))
                card_id = None
                card_column = None
            case ClosePullRequest():
                if not is_open:
                    continue
                emit(Mutation("closePullRequest", {"pullRequestId": pr.node_id}))
                is_open = False
            case _:
                assert_never(action)

    if batch is not None:
        mutations.append(batch.to_mutation())
    return mutations


class ActionExecutor:
    """Applies planned actions to a live PR.

    In dry-run mode mutations are computed exactly as in live mode but never
    submitted.
    """

    def __init__(self, client: GitHubClient) -> None:
        """Initialize the executor.

        Args:
            client: Client used to submit mutations.
        """
        self.client = client

    def execute(
        self,
        actions: Iterable[Action],
        pr: PullRequestInfo,
        dry_run: bool = False,
    ) -> list[Mutation]:
        """Translate and (unless ``dry_run``) submit the actions for one PR.

        Args:
            actions: Planned actions, in order.
            pr: Live snapshot of the PR.
            dry_run: Compute mutations without submitting them.

        Returns:
            The mutations that were submitted, or would have been.

        Raises:
            ExecutionError: If the actions cannot be translated.
            TransportError: If a submission fails. Later mutations are not
                attempted.
        """
        mutations = translate_actions(actions, pr)
        if dry_run:
            logger.debug("Dry run: not submitting %d mutation(s) for #%d", len(mutations), pr.number)
            return mutations

        for mutation in mutations:
            logger.debug("Submitting %s for #%d", mutation.name, pr.number)
            self.client.submit_mutation(mutation)
        if mutations:
            logger.info("  Submitted %d mutation(s)", len(mutations))
        return mutations
