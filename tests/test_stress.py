import random

import pytest

from holdem.bots import STRATEGIES
from holdem.game import GameEngine
from holdem.models import Round, TableConfig

from .helpers import start_hand


def play_out(engine: GameEngine, strategy, rng: random.Random) -> None:
    while not engine.is_hand_complete():
        actor = engine.table.current_player
        action, amount = strategy(engine, actor, rng)
        engine.apply_action(actor, action, amount)
        check_invariants(engine)


def check_invariants(engine: GameEngine) -> None:
    table = engine.table
    assert all(player.stack >= 0 for player in table.players)
    assert all(pot.amount >= 0 for pot in table.pots())
    expected_board = {Round.PREFLOP: 0, Round.FLOP: 3, Round.TURN: 4, Round.RIVER: 5, Round.SHOWDOWN: 5}
    assert len(table.board) == expected_board[table.current_round]
    assert all(len(player.hand) in (0, 2) for player in table.players)


@pytest.mark.parametrize("strategy_name", sorted(STRATEGIES))
def test_chips_are_conserved_over_many_hands(strategy_name):
    engine = GameEngine(TableConfig(seats=6, starting_stack=2_000, sb=5, bb=10))
    for idx in range(engine.config.seats):
        engine.add_player(f"Stress{idx}")
    total_chips = engine.table.chip_total()
    rng = random.Random(strategy_name)
    strategy = STRATEGIES[strategy_name]

    hands_played = 0
    for seed in range(1_000, 1_400):
        if not engine.can_start_hand():
            break
        start_hand(engine, seed=seed)
        check_invariants(engine)
        play_out(engine, strategy, rng)
        assert engine.table.pot_total() == 0
        assert engine.table.chip_total() == total_chips
        hands_played += 1

    assert hands_played >= 1


def test_uneven_stacks_with_frequent_all_ins():
    rng = random.Random(7)
    engine = GameEngine(TableConfig(seats=5, sb=10, bb=20))
    for idx, stack in enumerate([35, 120, 400, 55, 900]):
        engine.add_player(f"Short{idx}", stack)
    total_chips = engine.table.chip_total()
    strategy = STRATEGIES["random"]

    for seed in range(200):
        if engine.is_match_over():
            break
        start_hand(engine, seed=seed)
        play_out(engine, strategy, rng)
        assert engine.table.chip_total() == total_chips


def test_table_capacity_limit_enforced():
    engine = GameEngine(TableConfig(seats=6))
    for idx in range(6):
        player = engine.add_player(f"Team{idx}")
        assert player.player_id == idx + 1
    assert len(engine.players) == 6


def test_free_folds_beside_all_ins_keep_chips():
    rng = random.Random(21)
    engine = GameEngine(TableConfig(seats=5, sb=10, bb=20))
    for idx, stack in enumerate([60, 1_000, 1_000, 50, 400]):
        engine.add_player(f"Mixed{idx}", stack)
    seat_strategy = {
        player.player_id: STRATEGIES["random" if player.player_id % 2 else "timid"] for player in engine.players
    }
    total_chips = engine.table.chip_total()

    for seed in range(300):
        if engine.is_match_over():
            break
        start_hand(engine, seed=seed)
        while not engine.is_hand_complete():
            actor = engine.table.current_player
            action, amount = seat_strategy[actor](engine, actor, rng)
            engine.apply_action(actor, action, amount)
            check_invariants(engine)
        assert engine.table.pot_total() == 0
        assert engine.table.chip_total() == total_chips
