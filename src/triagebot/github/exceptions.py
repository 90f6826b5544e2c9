"""Custom exceptions for the GitHub client."""


class GitHubError(Exception):
    """Base exception for GitHub client errors."""


class TransportError(GitHubError):
    """A GraphQL request failed (network, auth, rate limit, or GraphQL errors)."""


class ProjectNotFoundError(GitHubError):
    """The configured project board does not exist."""
