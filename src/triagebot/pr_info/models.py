"""Data models for PR state derivation.

``PullRequestInfo`` is the raw snapshot fetched once per run; ``BotResult`` is
the classified state derived from it. ``BotResult`` is a tagged union: every
variant carries a literal ``kind`` and call sites switch over it with
``match`` + ``assert_never``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal, TypeAlias

from triagebot.pr_info.exceptions import MalformedPullRequestError

PRState = Literal["OPEN", "CLOSED", "MERGED"]

# Hidden marker embedded in every comment the bot posts
_TAG_PATTERN = re.compile(r"<!--triagebot:(?P<tag>[^>]*?)-->")


def tag_marker(tag: str) -> str:
    """Return the hidden HTML marker identifying a bot comment."""
    return f"<!--triagebot:{tag}-->"


def parse_time(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class CIResult(str, Enum):
    """Status-check rollup of the head commit."""

    PASS = "pass"
    FAIL = "fail"
    PENDING = "pending"
    MISSING = "missing"


class Staleness(str, Enum):
    """How long a PR waiting on its author has been left alone."""

    FRESH = "fresh"
    NEARLY_ABANDONED = "nearly_abandoned"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class DerivationRules:
    """Thresholds used by the deriver."""

    huge_change_lines: int = 5000
    nearly_abandoned_days: int = 21
    abandoned_days: int = 28


@dataclass(frozen=True)
class Review:
    author: str | None
    author_association: str
    state: str  # APPROVED, CHANGES_REQUESTED, COMMENTED, DISMISSED, PENDING
    commit_oid: str | None
    submitted_at: datetime | None


@dataclass(frozen=True)
class IssueComment:
    id: str
    author: str | None
    body: str
    created_at: datetime

    @property
    def tag(self) -> str | None:
        """Tag of the bot marker in this comment, if it is a bot comment."""
        match = _TAG_PATTERN.search(self.body)
        return match.group("tag") if match else None


@dataclass(frozen=True)
class CardRef:
    """The PR's card on the configured project board."""

    id: str
    column_name: str | None


@dataclass(frozen=True)
class PullRequestInfo:
    """Raw snapshot of one pull request, fetched fresh each run.

    Attributes:
        node_id: GraphQL node ID, used as the subject of mutations.
        author: Author login, or None when the account no longer exists.
        check_state: Status-check rollup state of the head commit, or None
            when the commit has no checks at all.
        card: The PR's card on the configured board, if any.
        fetched_at: When the snapshot was taken; the deriver's notion of "now".
        label_ids: Repository label name -> node ID.
        column_ids: Board column name -> node ID.
    """

    node_id: str
    number: int
    title: str
    url: str
    author: str | None
    author_association: str
    state: PRState
    is_draft: bool
    mergeable: str  # MERGEABLE, CONFLICTING, UNKNOWN
    head_oid: str | None
    check_state: str | None
    check_url: str | None
    additions: int
    deletions: int
    created_at: datetime
    last_push_at: datetime | None
    fetched_at: datetime
    labels: tuple[str, ...] = ()
    comments: tuple[IssueComment, ...] = ()
    reviews: tuple[Review, ...] = ()
    card: CardRef | None = None
    label_ids: dict[str, str] = field(default_factory=dict, hash=False)
    column_ids: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_graphql(cls, data: dict[str, Any], fetched_at: datetime) -> PullRequestInfo:
        """Build a snapshot from a raw PR query result.

        Args:
            data: GraphQL ``data`` object with ``repository.pullRequest`` set.
            fetched_at: Time the query was made.

        Returns:
            Parsed snapshot.

        Raises:
            MalformedPullRequestError: If required fields are missing.
        """
        try:
            repository = data["repository"]
            pr = repository["pullRequest"]
            if pr is None:
                raise MalformedPullRequestError("Query result has no pull request")

            project = repository.get("project") or {}
            column_ids = {
                column["name"]: column["id"]
                for column in (project.get("columns") or {}).get("nodes", [])
            }
            label_ids = {
                label["name"]: label["id"]
                for label in (repository.get("labels") or {}).get("nodes", [])
            }

            head_oid = None
            check_state = None
            check_url = None
            last_push_at = None
            commit_nodes = (pr.get("commits") or {}).get("nodes") or []
            if commit_nodes:
                commit = commit_nodes[-1]["commit"]
                head_oid = commit["oid"]
                rollup = commit.get("statusCheckRollup")
                if rollup:
                    check_state = rollup["state"]
                    check_url = f"{pr['url']}/checks"
                pushed = commit.get("pushedDate") or commit.get("committedDate")
                last_push_at = parse_time(pushed) if pushed else None

            card = None
            for node in (pr.get("projectCards") or {}).get("nodes", []):
                if project and (node.get("project") or {}).get("number") != project.get("number"):
                    continue
                card = CardRef(id=node["id"], column_name=(node.get("column") or {}).get("name"))
                break

            return cls(
                node_id=pr["id"],
                number=pr["number"],
                title=pr.get("title") or "",
                url=pr["url"],
                author=(pr.get("author") or {}).get("login"),
                author_association=pr.get("authorAssociation") or "NONE",
                state=pr["state"],
                is_draft=bool(pr.get("isDraft")),
                mergeable=pr.get("mergeable") or "UNKNOWN",
                head_oid=head_oid,
                check_state=check_state,
                check_url=check_url,
                additions=pr.get("additions") or 0,
                deletions=pr.get("deletions") or 0,
                created_at=parse_time(pr["createdAt"]),
                last_push_at=last_push_at,
                fetched_at=fetched_at,
                labels=tuple(
                    label["name"] for label in (pr.get("labels") or {}).get("nodes", [])
                ),
                comments=tuple(
                    IssueComment(
                        id=comment["id"],
                        author=(comment.get("author") or {}).get("login"),
                        body=comment.get("body") or "",
                        created_at=parse_time(comment["createdAt"]),
                    )
                    for comment in (pr.get("comments") or {}).get("nodes", [])
                ),
                reviews=tuple(
                    Review(
                        author=(review.get("author") or {}).get("login"),
                        author_association=review.get("authorAssociation") or "NONE",
                        state=review["state"],
                        commit_oid=(review.get("commit") or {}).get("oid"),
                        submitted_at=(
                            parse_time(review["submittedAt"])
                            if review.get("submittedAt")
                            else None
                        ),
                    )
                    for review in (pr.get("reviews") or {}).get("nodes", [])
                ),
                card=card,
                label_ids=label_ids,
                column_ids=column_ids,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPullRequestError(f"Malformed pull request data: {e!r}") from e


@dataclass(frozen=True)
class BotError:
    """The PR cannot be triaged; ``message`` says why."""

    kind: Literal["error"] = field(default="error", init=False)
    number: int
    message: str


@dataclass(frozen=True)
class BotRemove:
    """The PR should not be on the board (closed or draft)."""

    kind: Literal["remove"] = field(default="remove", init=False)
    number: int
    message: str | None = None


@dataclass(frozen=True)
class BotMerged:
    """The PR was merged and belongs in the archive column."""

    kind: Literal["merged"] = field(default="merged", init=False)
    number: int
    message: str | None = None


@dataclass(frozen=True)
class PrInfo:
    """Normal classification of an open PR."""

    kind: Literal["info"] = field(default="info", init=False)
    number: int
    author: str
    now: datetime
    head_oid: str
    ci_result: CIResult
    ci_url: str | None
    has_merge_conflict: bool
    is_first_contribution: bool
    is_huge_change: bool
    maintainer_approvals: int
    other_approvals: int
    stale_approvals: int
    changes_requested: bool
    last_push_date: datetime
    last_activity_date: datetime
    staleness: Staleness
    message: str | None = None

    @property
    def waiting_on_author(self) -> bool:
        return self.has_merge_conflict or self.ci_result is CIResult.FAIL or self.changes_requested

    @property
    def maintainer_approved(self) -> bool:
        return self.maintainer_approvals > 0


BotResult: TypeAlias = BotError | BotRemove | BotMerged | PrInfo
