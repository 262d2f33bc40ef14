"""Deterministic No-Limit Texas Hold'em rules engine."""

from .cards import Card, Deck, Rank, Suit, parse_cards
from .errors import (
    EmptyDeckError,
    HoldemError,
    InsufficientCardsError,
    NotFoundError,
    ResourceExhaustionError,
    ValidationError,
)
from .evaluator import EvaluatedHand, HandCategory, compare, evaluate_best, evaluate_hand
from .game import GameEngine
from .models import ActionType, Payout, Player, PlayerAction, Pot, Round, Table, TableConfig, TableEvent

__all__ = [
    "ActionType",
    "Card",
    "Deck",
    "EmptyDeckError",
    "EvaluatedHand",
    "GameEngine",
    "HandCategory",
    "HoldemError",
    "InsufficientCardsError",
    "NotFoundError",
    "Payout",
    "Player",
    "PlayerAction",
    "Pot",
    "Rank",
    "ResourceExhaustionError",
    "Round",
    "Suit",
    "Table",
    "TableConfig",
    "TableEvent",
    "ValidationError",
    "compare",
    "evaluate_best",
    "evaluate_hand",
    "parse_cards",
]
