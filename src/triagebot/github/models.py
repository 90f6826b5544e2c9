"""Data models for GitHub board data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


@dataclass(frozen=True)
class Card:
    """A card on the project board.

    Attributes:
        id: Card node ID.
        updated_at: Last time the card changed.
        pr_number: Number of the linked PR, if the card links to one.
    """

    id: str
    updated_at: datetime
    pr_number: int | None = None


@dataclass
class ProjectColumn:
    """A board column and the cards the query returned for it.

    ``total_count`` is what GitHub reports for the column and can be larger
    than ``len(cards)`` when the query page was truncated.
    """

    id: str
    name: str
    cards: list[Card] = field(default_factory=list)
    total_count: int = 0

    @property
    def unseen_count(self) -> int:
        return max(0, self.total_count - len(self.cards))


@dataclass(frozen=True)
class CardPR:
    """The PR a card links to."""

    number: int
    state: Literal["OPEN", "CLOSED", "MERGED"]


@dataclass
class OpenPullRequests:
    """Open PR numbers and the ids of the board cards linked to them."""

    numbers: list[int] = field(default_factory=list)
    card_ids: set[str] = field(default_factory=set)
