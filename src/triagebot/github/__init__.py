"""GitHub client - fetches PR and board data, submits mutations."""

from triagebot.github.client import GitHubClient
from triagebot.github.exceptions import GitHubError, ProjectNotFoundError, TransportError
from triagebot.github.models import Card, CardPR, OpenPullRequests, ProjectColumn

__all__ = [
    "Card",
    "CardPR",
    "GitHubClient",
    "GitHubError",
    "OpenPullRequests",
    "ProjectColumn",
    "ProjectNotFoundError",
    "TransportError",
]
