"""PR State Deriver - classifies raw pull request metadata."""

from triagebot.pr_info.deriver import DEFAULT_RULES, derive_state
from triagebot.pr_info.exceptions import (
    BotResultError,
    DerivationError,
    MalformedPullRequestError,
)
from triagebot.pr_info.models import (
    BotError,
    BotMerged,
    BotRemove,
    BotResult,
    CardRef,
    CIResult,
    DerivationRules,
    IssueComment,
    PrInfo,
    PullRequestInfo,
    Review,
    Staleness,
    tag_marker,
)

__all__ = [
    "DEFAULT_RULES",
    "BotError",
    "BotMerged",
    "BotRemove",
    "BotResult",
    "BotResultError",
    "CIResult",
    "CardRef",
    "DerivationError",
    "DerivationRules",
    "IssueComment",
    "MalformedPullRequestError",
    "PrInfo",
    "PullRequestInfo",
    "Review",
    "Staleness",
    "derive_state",
    "tag_marker",
]
