"""Exceptions for PR state derivation."""


class DerivationError(Exception):
    """PR metadata violates an assumption the triage rules depend on."""


class MalformedPullRequestError(DerivationError):
    """Raw query result is missing fields required to build a PullRequestInfo."""


class BotResultError(DerivationError):
    """A PR derived to an ``error`` result.

    Raised by the orchestrator so the result is recorded like any other
    per-PR failure.
    """

    def __init__(self, number: int, message: str) -> None:
        super().__init__(message)
        self.number = number
        self.message = message
