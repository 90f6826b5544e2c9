"""PR state deriver - classifies a raw PR snapshot into a BotResult."""

from __future__ import annotations

import logging

from triagebot.pr_info.exceptions import DerivationError
from triagebot.pr_info.models import (
    BotError,
    BotMerged,
    BotRemove,
    BotResult,
    CIResult,
    DerivationRules,
    PrInfo,
    PullRequestInfo,
    Review,
    Staleness,
)

logger = logging.getLogger("triagebot.pr_info")

DEFAULT_RULES = DerivationRules()

MAINTAINER_ASSOCIATIONS = frozenset({"OWNER", "MEMBER", "COLLABORATOR"})
FIRST_TIMER_ASSOCIATIONS = frozenset({"FIRST_TIME_CONTRIBUTOR", "FIRST_TIMER", "NONE"})

_CI_RESULTS = {
    "SUCCESS": CIResult.PASS,
    "FAILURE": CIResult.FAIL,
    "ERROR": CIResult.FAIL,
    "PENDING": CIResult.PENDING,
    "EXPECTED": CIResult.PENDING,
}


def derive_state(pr: PullRequestInfo, rules: DerivationRules = DEFAULT_RULES) -> BotResult:
    """Derive the triage state of a pull request.

    Pure function of its arguments: ``pr.fetched_at`` stands in for the
    current time, so identical input always yields an identical result.

    Args:
        pr: Snapshot of the pull request.
        rules: Thresholds for huge changes and staleness.

    Returns:
        Exactly one BotResult variant.

    Raises:
        DerivationError: If the snapshot is internally inconsistent.
    """
    if pr.state == "MERGED":
        return BotMerged(number=pr.number, message="PR has been merged")
    if pr.state == "CLOSED":
        return BotRemove(number=pr.number, message="PR is closed")
    if pr.is_draft:
        return BotRemove(number=pr.number, message="PR is a draft")
    if pr.author is None:
        return BotError(number=pr.number, message="PR author does not exist")
    if pr.head_oid is None:
        raise DerivationError(f"PR #{pr.number} has no head commit")

    ci_result = _ci_result(pr.check_state)
    latest = _latest_reviews(pr.reviews, pr.author)

    maintainer_approvals = 0
    other_approvals = 0
    stale_approvals = 0
    changes_requested = False
    for review in latest:
        if review.state == "CHANGES_REQUESTED":
            changes_requested = True
        elif review.state == "APPROVED":
            if review.commit_oid != pr.head_oid:
                stale_approvals += 1
            elif review.author_association in MAINTAINER_ASSOCIATIONS:
                maintainer_approvals += 1
            else:
                other_approvals += 1

    last_push_date = pr.last_push_at or pr.created_at
    activity = [last_push_date]
    activity.extend(c.created_at for c in pr.comments if c.tag is None)
    activity.extend(r.submitted_at for r in pr.reviews if r.submitted_at is not None)
    last_activity_date = max(activity)

    has_merge_conflict = pr.mergeable == "CONFLICTING"
    waiting_on_author = has_merge_conflict or ci_result is CIResult.FAIL or changes_requested

    staleness = Staleness.FRESH
    if waiting_on_author:
        idle_days = (pr.fetched_at - last_activity_date).days
        if idle_days >= rules.abandoned_days:
            staleness = Staleness.ABANDONED
        elif idle_days >= rules.nearly_abandoned_days:
            staleness = Staleness.NEARLY_ABANDONED

    message = None
    if pr.mergeable == "UNKNOWN":
        message = "GitHub has not computed mergeability yet"

    return PrInfo(
        number=pr.number,
        author=pr.author,
        now=pr.fetched_at,
        head_oid=pr.head_oid,
        ci_result=ci_result,
        ci_url=pr.check_url,
        has_merge_conflict=has_merge_conflict,
        is_first_contribution=pr.author_association in FIRST_TIMER_ASSOCIATIONS,
        is_huge_change=pr.additions + pr.deletions > rules.huge_change_lines,
        maintainer_approvals=maintainer_approvals,
        other_approvals=other_approvals,
        stale_approvals=stale_approvals,
        changes_requested=changes_requested,
        last_push_date=last_push_date,
        last_activity_date=last_activity_date,
        staleness=staleness,
        message=message,
    )


def _ci_result(check_state: str | None) -> CIResult:
    if check_state is None:
        return CIResult.MISSING
    try:
        return _CI_RESULTS[check_state]
    except KeyError:
        raise DerivationError(f"Unknown status check state: {check_state}") from None


def _latest_reviews(reviews: tuple[Review, ...], author: str) -> list[Review]:
    """Latest decisive review of each reviewer, in first-seen reviewer order.

    Comment-only and pending reviews never override an earlier decision;
    a dismissal clears it.
    """
    latest: dict[str, Review] = {}
    for review in reviews:
        if review.author is None or review.author == author:
            continue
        if review.state not in ("APPROVED", "CHANGES_REQUESTED", "DISMISSED"):
            continue
        previous = latest.get(review.author)
        if previous is not None and _is_older(review, previous):
            continue
        latest[review.author] = review
    return [r for r in latest.values() if r.state != "DISMISSED"]


def _is_older(review: Review, other: Review) -> bool:
    if review.submitted_at is None or other.submitted_at is None:
        return False
    return review.submitted_at < other.submitted_at
