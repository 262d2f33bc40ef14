from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import Dict, List, Optional, Sequence, Tuple

from .cards import Card
from .errors import ValidationError

WHEEL = (14, 5, 4, 3, 2)


class HandCategory(IntEnum):
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def label(self) -> str:
        return self.name.lower()


@total_ordering
@dataclass(frozen=True, eq=False)
class EvaluatedHand:
    """Best five cards out of a player's hole cards and the board.

    ``value`` is the tie-break sequence for hands of the same category: group
    ranks ordered by group size then rank, followed by kickers, high to low.
    Sequences compare lexicographically, so a later entry can never outweigh an
    earlier one.
    """

    category: HandCategory
    value: Tuple[int, ...]
    cards: Tuple[Card, ...]

    @property
    def key(self) -> Tuple[int, Tuple[int, ...]]:
        return (int(self.category), self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvaluatedHand):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: "EvaluatedHand") -> bool:
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def describe(self) -> str:
        return self.category.label


def evaluate_hand(hole: Sequence[Card], board: Sequence[Card]) -> EvaluatedHand:
    """Best hand for two hole cards plus three to five board cards."""
    if len(hole) != 2:
        raise ValidationError(f"Expected 2 hole cards, got {len(hole)}")
    return evaluate_best(list(hole) + list(board))


def evaluate_best(cards: Sequence[Card]) -> EvaluatedHand:
    """Return the strongest five-card hand among 5 to 7 cards."""
    if not 5 <= len(cards) <= 7:
        raise ValidationError(f"Need 5 to 7 cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValidationError("Duplicate cards in hand")

    best: Optional[EvaluatedHand] = None
    for combo in itertools.combinations(cards, 5):
        hand = _evaluate_five(combo)
        if best is None or hand > best:
            best = hand
    assert best is not None
    return best


def compare(a: EvaluatedHand, b: EvaluatedHand) -> int:
    """Positive if ``a`` wins, negative if ``b`` wins, 0 for an exact tie."""
    if a.category != b.category:
        return int(a.category) - int(b.category)
    return (a.value > b.value) - (a.value < b.value)


def _evaluate_five(cards: Sequence[Card]) -> EvaluatedHand:
    counts: Dict[int, List[Card]] = {}
    for card in cards:
        counts.setdefault(card.rank.high_value, []).append(card)

    # Largest group first, ties broken by rank.
    groups = sorted(counts.items(), key=lambda item: (len(item[1]), item[0]), reverse=True)
    group_ranks = tuple(rank for rank, _ in groups)
    shape = [len(members) for _, members in groups]
    ordered = tuple(card for _, members in groups for card in members)

    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(group_ranks)

    if straight_high is not None:
        if straight_high == 5:
            # Ace plays low in the wheel, so it sorts last.
            ordered = ordered[1:] + ordered[:1]
        if is_flush:
            category = HandCategory.ROYAL_FLUSH if straight_high == 14 else HandCategory.STRAIGHT_FLUSH
            return EvaluatedHand(category, (straight_high,), ordered)
    if shape == [4, 1]:
        return EvaluatedHand(HandCategory.FOUR_OF_A_KIND, group_ranks, ordered)
    if shape == [3, 2]:
        return EvaluatedHand(HandCategory.FULL_HOUSE, group_ranks, ordered)
    if is_flush:
        return EvaluatedHand(HandCategory.FLUSH, group_ranks, ordered)
    if straight_high is not None:
        return EvaluatedHand(HandCategory.STRAIGHT, (straight_high,), ordered)
    if shape == [3, 1, 1]:
        return EvaluatedHand(HandCategory.THREE_OF_A_KIND, group_ranks, ordered)
    if shape == [2, 2, 1]:
        return EvaluatedHand(HandCategory.TWO_PAIR, group_ranks, ordered)
    if shape == [2, 1, 1, 1]:
        return EvaluatedHand(HandCategory.ONE_PAIR, group_ranks, ordered)
    return EvaluatedHand(HandCategory.HIGH_CARD, group_ranks, ordered)


def _straight_high(ranks: Tuple[int, ...]) -> Optional[int]:
    if len(ranks) != 5:
        return None
    ordered = sorted(ranks, reverse=True)
    if tuple(ordered) == WHEEL:
        return 5
    if ordered[0] - ordered[4] == 4:
        return ordered[0]
    return None
