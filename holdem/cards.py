from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence

from .errors import EmptyDeckError, InsufficientCardsError

RANKS = "A23456789TJQK"
SUITS = "hdcs"


class Suit(str, Enum):
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"
    SPADES = "s"


class Rank(IntEnum):
    # Identity values only; scoring goes through ``high_value``.
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def symbol(self) -> str:
        return RANKS[self.value - 1]

    @property
    def high_value(self) -> int:
        """Rank strength with the ace counted high (2..14)."""
        return 14 if self is Rank.ACE else self.value


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "rank", Rank(self.rank))
        except ValueError:
            raise ValueError(f"Invalid rank: {self.rank}") from None
        try:
            object.__setattr__(self, "suit", Suit(self.suit))
        except ValueError:
            raise ValueError(f"Invalid suit: {self.suit}") from None

    @property
    def label(self) -> str:
        return f"{self.rank.symbol}{self.suit.value}"

    def __str__(self) -> str:
        return self.label


def full_deck() -> List[Card]:
    """All 52 cards in suit-major, rank-ascending order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(cards: List[Card], rng: random.Random) -> List[Card]:
    """Fisher–Yates shuffle in place; every permutation is equally likely.

    ``rng`` supplies the randomness, so a seeded ``random.Random`` replays the
    exact same order.
    """
    for idx in range(len(cards) - 1, 0, -1):
        swap = rng.randrange(idx + 1)
        cards[idx], cards[swap] = cards[swap], cards[idx]
    return cards


class Deck:
    """Ordered stack of unique cards. Only ``draw`` and ``reset`` mutate it."""

    def __init__(self, seed: Optional[int] = None, cards: Optional[Sequence[Card]] = None) -> None:
        self._rng = random.Random(seed)
        if cards is None:
            self.reset()
        else:
            if len(set(cards)) != len(cards):
                raise ValueError("Deck cards must be unique")
            self._cards = list(cards)

    def seed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def next_seed(self) -> int:
        return self._rng.getrandbits(32)

    def reset(self) -> None:
        self._cards = shuffle(full_deck(), self._rng)

    def draw(self) -> Card:
        if not self._cards:
            raise EmptyDeckError("Cannot draw from an empty deck")
        return self._cards.pop(0)

    def deal(self, count: int) -> List[Card]:
        if len(self._cards) < count:
            raise InsufficientCardsError(count, len(self._cards))
        return [self.draw() for _ in range(count)]

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    rank_symbol, suit_symbol = label[0].upper(), label[1].lower()
    if rank_symbol not in RANKS:
        raise ValueError(f"Invalid rank: {label[0]}")
    return Card(Rank(RANKS.index(rank_symbol) + 1), suit_symbol)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
