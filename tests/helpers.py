from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from holdem.cards import Card, full_deck, parse_cards
from holdem.game import GameEngine
from holdem.models import ActionType, Table, TableConfig


def create_engine(
    *,
    players: int = 4,
    starting_stack: int = 1_000,
    sb: int = 10,
    bb: int = 20,
    stacks: Optional[Sequence[int]] = None,
) -> GameEngine:
    """Instantiate a game engine with a populated table."""
    count = len(stacks) if stacks is not None else players
    engine = GameEngine(TableConfig(seats=max(count, 2), starting_stack=starting_stack, sb=sb, bb=bb))
    for idx in range(count):
        engine.add_player(f"Player{idx + 1}", None if stacks is None else stacks[idx])
    return engine


def start_hand(engine: GameEngine, seed: int = 42) -> Table:
    table = engine.start_hand(seed=seed)
    assert table is not None
    return table


def arrange_deck(holes: Sequence[Sequence[str]], board: Sequence[str] = ()) -> List[Card]:
    """Deck order for the given hole cards (in deal order) and board.

    Burn cards are filled in from whatever cards are left over.
    """
    first = [hole[0] for hole in holes]
    second = [hole[1] for hole in holes]
    wanted: List[Optional[str]] = first + second
    if board:
        wanted += [None, *board[:3], None, board[3], None, board[4]]

    used = set(parse_cards([label for label in wanted if label is not None]))
    spare = iter(card for card in full_deck() if card not in used)
    return [next(spare) if label is None else parse_cards([label])[0] for label in wanted]


def stack_deck(monkeypatch, cards: Sequence[Card]) -> None:
    """Make every shuffle put ``cards`` on top, the rest of the deck after them."""
    top = list(cards)

    def fake_shuffle(deck: List[Card], rng) -> List[Card]:
        return top + [card for card in deck if card not in top]

    monkeypatch.setattr("holdem.cards.shuffle", fake_shuffle)


def perform_actions(engine: GameEngine, actions: Iterable[Tuple[int, ActionType, Optional[int]]]) -> None:
    """Apply a scripted sequence of actions (player id, action, amount)."""
    for player_id, action, amount in actions:
        engine.apply_action(player_id, action, amount)


def passive_action(engine: GameEngine, player_id: int) -> Tuple[ActionType, Optional[int]]:
    legal, *_ = engine.legal_actions(player_id)
    if ActionType.CHECK in legal:
        return ActionType.CHECK, None
    if ActionType.CALL in legal:
        return ActionType.CALL, None
    return ActionType.FOLD, None


def auto_complete_hand(engine: GameEngine) -> None:
    """Check or call every decision until the hand is over."""
    while not engine.is_hand_complete():
        actor = engine.table.current_player
        assert actor is not None
        action, amount = passive_action(engine, actor)
        engine.apply_action(actor, action, amount)
