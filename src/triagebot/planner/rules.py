"""Rule table for the planner: board columns, labels and comment texts.

This module is the policy; ``planner.py`` only sequences it. Changing how
PRs are labelled or worded happens here.
"""

from __future__ import annotations

import json

from triagebot.pr_info.models import CIResult, PrInfo, Staleness

ARCHIVE_COLUMN = "Recently Merged"

NEEDS_AUTHOR_ACTION = "Needs Author Action"
WAITING_FOR_AUTHOR_TO_MERGE = "Waiting for Author to Merge"
NEEDS_MAINTAINER_REVIEW = "Needs Maintainer Review"
WAITING_FOR_CODE_REVIEWS = "Waiting for Code Reviews"

MERGE_CONFLICT = "Has Merge Conflict"
CI_FAILED = "The CI failed"
REVISION_NEEDED = "Revision needed"
MAINTAINER_APPROVED = "Maintainer Approved"
OTHER_APPROVED = "Other Approved"
HUGE_CHANGE = "Huge Change"
ABANDONED = "Abandoned"

# Order in which label actions are planned
MANAGED_LABELS = (
    MERGE_CONFLICT,
    CI_FAILED,
    REVISION_NEEDED,
    MAINTAINER_APPROVED,
    OTHER_APPROVED,
    HUGE_CHANGE,
    ABANDONED,
)


def is_ready_to_merge(info: PrInfo) -> bool:
    return info.maintainer_approved and info.ci_result is CIResult.PASS and not info.waiting_on_author


def wanted_labels(info: PrInfo) -> set[str]:
    wanted = set()
    if info.has_merge_conflict:
        wanted.add(MERGE_CONFLICT)
    if info.ci_result is CIResult.FAIL:
        wanted.add(CI_FAILED)
    if info.changes_requested:
        wanted.add(REVISION_NEEDED)
    if info.maintainer_approved:
        wanted.add(MAINTAINER_APPROVED)
    if info.other_approvals > 0:
        wanted.add(OTHER_APPROVED)
    if info.is_huge_change:
        wanted.add(HUGE_CHANGE)
    if info.staleness is Staleness.ABANDONED:
        wanted.add(ABANDONED)
    return wanted


def target_column(info: PrInfo) -> str:
    if info.waiting_on_author:
        return NEEDS_AUTHOR_ACTION
    if is_ready_to_merge(info):
        return WAITING_FOR_AUTHOR_TO_MERGE
    if (info.is_first_contribution or info.is_huge_change) and not info.maintainer_approved:
        return NEEDS_MAINTAINER_REVIEW
    return WAITING_FOR_CODE_REVIEWS


def comments(info: PrInfo) -> list[tuple[str, str]]:
    """Comments the PR should have, as ``(tag, body)`` pairs in posting order.

    Tags that include the head commit or the last activity date make a ping
    fire again once the author pushes or responds.
    """
    planned = [("status", status_comment(info))]
    if info.has_merge_conflict:
        planned.append(
            (
                f"merge-conflict:{info.head_oid}",
                f"@{info.author} Unfortunately, this pull request currently has a merge "
                "conflict 😥. Please update your PR branch to be up-to-date with respect "
                "to the default branch.",
            )
        )
    if info.ci_result is CIResult.FAIL:
        where = f" ([details]({info.ci_url}))" if info.ci_url else ""
        planned.append(
            (
                f"ci-failed:{info.head_oid}",
                f"@{info.author} The CI build failed{where}. Please review the logs "
                "for more information.\n\nOnce you've pushed the fixes, the build "
                "will automatically re-run.",
            )
        )
    if info.staleness is Staleness.NEARLY_ABANDONED:
        planned.append(
            (
                f"stale-ping:{info.last_activity_date.date().isoformat()}",
                f"@{info.author} This PR has been waiting on you for a while. If there "
                "is no activity soon it will be closed as abandoned.",
            )
        )
    elif info.staleness is Staleness.ABANDONED:
        planned.append(
            (
                "abandoned",
                f"@{info.author} This PR has been closed because it needed author "
                "action and has been inactive for too long. Feel free to reopen it "
                "once you are ready to continue.",
            )
        )
    if is_ready_to_merge(info):
        planned.append(
            (
                f"merge-offer:{info.head_oid}",
                f"@{info.author} Everything looks good here. Great job! I am ready to "
                "merge this PR on your behalf once you confirm.",
            )
        )
    return planned


def status_comment(info: PrInfo) -> str:
    if info.is_first_contribution:
        greeting = (
            f"@{info.author} Thank you for submitting this PR! This is your first "
            "contribution here, welcome! 🎉"
        )
    else:
        greeting = f"@{info.author} Thank you for submitting this PR!"

    checks = [
        ("No merge conflict", not info.has_merge_conflict),
        ("Continuous integration tests have passed", info.ci_result is CIResult.PASS),
        ("No changes were requested", not info.changes_requested),
        ("A maintainer has approved the current commit", info.maintainer_approved),
    ]
    status = "\n".join(f"* {'✅' if ok else '❌'} {text}" for text, ok in checks)

    diagnostics = json.dumps(
        {
            "number": info.number,
            "headOid": info.head_oid,
            "ciResult": info.ci_result.value,
            "maintainerApprovals": info.maintainer_approvals,
            "otherApprovals": info.other_approvals,
            "staleApprovals": info.stale_approvals,
            "firstContribution": info.is_first_contribution,
            "hugeChange": info.is_huge_change,
        },
        indent=2,
        sort_keys=True,
    )
    return (
        f"{greeting}\n\n## Status\n\n{status}\n\n"
        f"----------------------\n<details><summary>Diagnostic Information: triagebot</summary>"
        f"\n\n```json\n{diagnostics}\n```\n</details>"
    )
