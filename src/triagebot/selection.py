"""PR selection - which PR numbers a run processes.

Each token is a number (``123``) or an inclusive range (``100-150``). A PR
is selected when any token accepts it; no tokens select every PR.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

_NUMBER = re.compile(r"^\d+$")
_RANGE = re.compile(r"^(\d+)-(\d+)$")


class SelectionError(ValueError):
    """A selection token is neither a number nor an N-M range."""


@dataclass(frozen=True)
class ExactNumber:
    number: int

    def __call__(self, n: int) -> bool:
        return n == self.number


@dataclass(frozen=True)
class NumberRange:
    low: int
    high: int

    def __call__(self, n: int) -> bool:
        return self.low <= n <= self.high


@dataclass(frozen=True)
class Selection:
    """OR-combination of token predicates."""

    predicates: tuple[ExactNumber | NumberRange, ...] = field(default=())

    def __call__(self, n: int) -> bool:
        if not self.predicates:
            return True
        return any(predicate(n) for predicate in self.predicates)


def parse_token(token: str | int) -> ExactNumber | NumberRange:
    """Parse one PR-number or range token.

    Raises:
        SelectionError: If the token is malformed.
    """
    if isinstance(token, int):
        return ExactNumber(token)
    token = token.strip()
    if _NUMBER.match(token):
        return ExactNumber(int(token))
    match = _RANGE.match(token)
    if not match:
        raise SelectionError(f'bad PR or PR range argument: "{token}"')
    return NumberRange(int(match.group(1)), int(match.group(2)))


def build_selection(tokens: Iterable[str | int]) -> Selection:
    """Build the selection predicate for a list of tokens."""
    return Selection(tuple(parse_token(token) for token in tokens))
