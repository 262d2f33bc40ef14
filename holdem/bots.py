from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Tuple

from .game import GameEngine
from .models import ActionType, Round

Decision = Tuple[ActionType, Optional[int]]
Strategy = Callable[[GameEngine, int, random.Random], Decision]

_RANK_POINTS = {rank: idx for idx, rank in enumerate("23456789TJQKA", start=2)}


def _rough_hand_strength(hole: List[str]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    ranks = [card[0] for card in hole]
    suits = [card[1] for card in hole]
    values = [_RANK_POINTS.get(rank, 2) for rank in ranks]

    score = sum(values)
    if ranks[0] == ranks[1]:
        score += 14
    elif abs(values[0] - values[1]) == 1:
        score += 4
    if suits[0] == suits[1]:
        score += 3
    return score


def _aggressive_action(legal: List[ActionType]) -> Optional[ActionType]:
    for action in (ActionType.BET, ActionType.RAISE):
        if action in legal:
            return action
    return None


def passive_strategy(engine: GameEngine, player_id: int, rng: random.Random) -> Decision:
    """Check if possible, otherwise call."""
    legal, _, _, _ = engine.legal_actions(player_id)
    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    if ActionType.CALL in legal:
        return ActionType.CALL, None
    return ActionType.FOLD, None


def timid_strategy(engine: GameEngine, player_id: int, rng: random.Random) -> Decision:
    """Passive play that gives up a quarter of the time, even when checking is free."""
    if rng.random() < 0.25:
        return ActionType.FOLD, None
    return passive_strategy(engine, player_id, rng)


def min_raise_strategy(engine: GameEngine, player_id: int, rng: random.Random) -> Decision:
    """Bet or raise the minimum whenever allowed, fall back to call/check."""
    legal, _, min_amount, _ = engine.legal_actions(player_id)
    aggressive = _aggressive_action(legal)
    if aggressive is not None:
        return aggressive, min_amount
    if ActionType.CALL in legal:
        return ActionType.CALL, None
    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    return ActionType.FOLD, None


def random_strategy(engine: GameEngine, player_id: int, rng: random.Random) -> Decision:
    """Mixes folds, calls, raises and the odd shove, weighted by hole-card strength."""
    legal, call_amount, min_amount, max_amount = engine.legal_actions(player_id)
    player = engine.table.find_player(player_id)
    strength = _rough_hand_strength([card.label for card in player.hand])
    roll = rng.random()

    if roll < 0.03 or (strength >= 36 and roll < 0.15):
        return ActionType.ALL_IN, None

    aggressive = _aggressive_action(legal)
    late_street = engine.current_round in (Round.TURN, Round.RIVER)
    if aggressive is not None and roll < 0.2 + min(strength / 100.0, 0.3) + (0.05 if late_street else 0.0):
        assert min_amount is not None and max_amount is not None
        if max_amount <= min_amount or rng.random() < 0.6:
            return aggressive, min_amount
        return aggressive, rng.randint(min_amount, max_amount)

    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    # Weak hands give up more often the more it costs to continue.
    if call_amount is not None and strength < 20 and rng.random() < 0.35:
        return ActionType.FOLD, None
    return ActionType.CALL, None


STRATEGIES: Dict[str, Strategy] = {
    "passive": passive_strategy,
    "min-raise": min_raise_strategy,
    "random": random_strategy,
    "timid": timid_strategy,
}
