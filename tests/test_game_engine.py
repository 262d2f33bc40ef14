from holdem.cards import Deck
from holdem.game import GameEngine
from holdem.models import ActionType, PlayerAction, Round, TableConfig, TableEvent

from .helpers import auto_complete_hand, create_engine, perform_actions, start_hand


def test_start_hand_assigns_dealer_and_blinds():
    engine = create_engine(players=4, sb=10, bb=20)
    table = start_hand(engine)

    assert (table.dealer, table.small_blind, table.big_blind) == (1, 2, 3)
    assert table.hand_number == 1
    assert table.current_round == Round.PREFLOP
    assert table.current_player == 4
    assert table.find_player(2).stack == 990
    assert table.find_player(3).stack == 980
    assert engine.pot_total() == 30
    assert table.betting.current_bet == 20

    new_hand, sb_post, bb_post = engine.action_log[:3]
    assert isinstance(new_hand, TableEvent) and new_hand.kind == "NEW_HAND"
    assert (sb_post.player_id, sb_post.action, sb_post.amount) == (2, ActionType.BET, 10)
    assert (bb_post.player_id, bb_post.action, bb_post.amount) == (3, ActionType.BET, 20)


def test_hole_cards_dealt_one_per_pass():
    engine = create_engine(players=3)
    start_hand(engine, seed=9)
    table = engine.table
    dealt = [card for player in table.players for card in player.hand]
    assert all(len(player.hand) == 2 for player in table.players)
    assert len(set(dealt)) == 6
    assert len(engine.deck) == 46

    # Replaying the shuffle shows the deal order: 2, 3, 1 then 2, 3, 1 again.
    replay = GameEngine(TableConfig(seats=3))
    replay.deck.seed(9)
    replay.deck.reset()
    top = replay.deck.cards[:6]
    assert table.find_player(2).hand == [top[0], top[3]]
    assert table.find_player(3).hand == [top[1], top[4]]
    assert table.find_player(1).hand == [top[2], top[5]]


def test_dealer_rotates_to_next_funded_player():
    engine = create_engine(players=3)
    start_hand(engine, seed=1)
    auto_complete_hand(engine)
    start_hand(engine, seed=2)
    assert engine.table.dealer == 2
    auto_complete_hand(engine)
    engine.table.find_player(3).stack = 0
    start_hand(engine, seed=3)
    # Player 3 is out of chips, so the button skips them.
    assert engine.table.dealer == 1
    assert engine.table.find_player(3).hand == []


def test_heads_up_dealer_posts_big_blind():
    engine = create_engine(players=2, sb=10, bb=20)
    table = start_hand(engine)
    assert (table.dealer, table.small_blind, table.big_blind) == (1, 2, 1)
    assert table.current_player == 2


def test_start_hand_is_noop_without_two_funded_players():
    engine = create_engine(stacks=[500, 0])
    assert engine.start_hand(seed=1) is None
    assert engine.table.hand_number == 0
    assert engine.action_log == ()


def test_same_seed_replays_same_hand():
    first = create_engine(players=3)
    second = create_engine(players=3)
    start_hand(first, seed=1234)
    start_hand(second, seed=1234)
    assert [p.hand for p in first.players] == [p.hand for p in second.players]
    assert first.table.hand_seed == 1234


def test_unseeded_hand_draws_seed_from_deck():
    engines = [GameEngine(TableConfig(seats=3), deck=Deck(seed=42)) for _ in range(2)]
    for engine in engines:
        for name in ("Ann", "Ben", "Cid"):
            engine.add_player(name)
        engine.start_hand()
    first, second = engines
    assert first.table.hand_seed == second.table.hand_seed
    assert [p.hand for p in first.players] == [p.hand for p in second.players]


def test_hand_number_increments_and_log_is_append_only():
    engine = create_engine(players=2)
    start_hand(engine, seed=1)
    auto_complete_hand(engine)
    first_log = engine.action_log
    start_hand(engine, seed=2)
    assert engine.table.hand_number == 2
    assert engine.action_log[: len(first_log)] == first_log


def test_apply_action_returns_new_entries():
    engine = create_engine(players=2, sb=5, bb=10)
    start_hand(engine)
    entries = engine.apply_action(2, ActionType.CALL)
    assert entries == [PlayerAction(hand_number=1, round=Round.PREFLOP, player_id=2, action=ActionType.CALL, amount=5)]

    entries = engine.apply_action(1, "CHECK")
    assert [entry.kind for entry in entries] == ["CHECK", "FLOP"]


def test_fold_around_awards_pot_to_big_blind():
    engine = create_engine(players=4, sb=10, bb=20)
    start_hand(engine)
    perform_actions(engine, [(4, ActionType.FOLD, None), (1, ActionType.FOLD, None), (2, ActionType.FOLD, None)])
    assert engine.is_hand_complete()
    assert engine.table.find_player(3).stack == 1_010
    assert engine.table.find_player(2).stack == 990


def test_add_and_remove_players():
    engine = GameEngine(TableConfig(seats=3))
    alice = engine.add_player("  Alice ")
    bob = engine.add_player("Bob", 500)
    assert (alice.player_id, alice.name, alice.stack) == (1, "Alice", 10_000)
    assert (bob.player_id, bob.stack) == (2, 500)

    engine.remove_player(alice.player_id)
    carol = engine.add_player("Carol")
    assert carol.player_id == 3
    assert [p.player_id for p in engine.players] == [2, 3]


def test_player_joining_mid_hand_sits_out():
    engine = create_engine(players=2)
    engine.table.config.seats = 3
    start_hand(engine)
    late = engine.add_player("Late")
    assert late.is_folded
    assert not late.is_live
    auto_complete_hand(engine)
    start_hand(engine, seed=5)
    assert len(late.hand) == 2


def test_removing_dealer_keeps_rotation():
    engine = create_engine(players=3)
    start_hand(engine)
    auto_complete_hand(engine)
    engine.remove_player(1)
    start_hand(engine, seed=7)
    # The button moves on to the player seated after the one who left.
    assert engine.table.dealer == 2


def test_is_match_over_when_one_player_has_chips():
    engine = create_engine(players=2)
    assert not engine.is_match_over()
    engine.table.find_player(2).stack = 0
    assert engine.is_match_over()


def test_snapshot_exposes_table_state():
    engine = create_engine(players=3, sb=10, bb=20)
    start_hand(engine, seed=77)
    snap = engine.snapshot()
    assert snap["hand_number"] == 1
    assert snap["seed"] == 77
    assert snap["round"] == "PREFLOP"
    assert snap["pot"] == 30
    assert snap["main_pot"] == {"amount": 30, "eligible": [1, 2, 3], "created_in_round": "PREFLOP"}
    assert snap["side_pots"] == []
    assert [p["id"] for p in snap["players"]] == [1, 2, 3]
    assert snap["players"][0]["is_dealer"] is True
    assert all(len(p["hole"]) == 2 for p in snap["players"])
