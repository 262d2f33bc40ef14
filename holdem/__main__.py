from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional

from .bots import STRATEGIES
from .game import GameEngine
from .models import TableConfig

LOGGER = logging.getLogger("holdem.sim")

# A hand that runs longer than this is abandoned.
MAX_ACTIONS_PER_HAND = 1_000


def play_hand(engine: GameEngine, strategy_name: str, rng: random.Random, seed: int) -> None:
    strategy = STRATEGIES[strategy_name]
    if engine.start_hand(seed=seed) is None:
        return
    for _ in range(MAX_ACTIONS_PER_HAND):
        if engine.is_hand_complete():
            return
        player_id = engine.table.current_player
        assert player_id is not None
        action, amount = strategy(engine, player_id, rng)
        engine.apply_action(player_id, action, amount)
    raise RuntimeError(f"Hand {engine.table.hand_number} did not finish")


def run_simulation(args: argparse.Namespace) -> int:
    config = TableConfig(
        seats=max(args.players, 2),
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
    )
    engine = GameEngine(config)
    for idx in range(args.players):
        engine.add_player(f"Bot{idx + 1}")

    expected = engine.table.chip_total()
    rng = random.Random(args.seed)
    LOGGER.info(
        "Simulating %s hands for %s players (%s strategy, seed=%s)",
        args.hands,
        args.players,
        args.strategy,
        args.seed,
    )

    played = 0
    for _ in range(args.hands):
        if engine.is_match_over():
            LOGGER.info("Only one player has chips left; stopping early")
            break
        play_hand(engine, args.strategy, rng, rng.getrandbits(32))
        played += 1
        total = engine.table.chip_total()
        if total != expected:
            LOGGER.error("Chip total drifted to %s after hand %s (expected %s)", total, engine.table.hand_number, expected)
            return 1

    LOGGER.info("Simulation complete after %s hands. Summary:", played)
    for player in engine.players:
        LOGGER.info("  %-8s -> %6d chips", player.name, player.stack)
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play seeded hands between scripted bots.")
    parser.add_argument("--players", type=int, default=4, help="Number of bots to seat.")
    parser.add_argument("--hands", type=int, default=100, help="Number of hands to play.")
    parser.add_argument("--starting-stack", type=int, default=10_000, help="Starting stack per player.")
    parser.add_argument("--sb", type=int, default=50, help="Small blind size.")
    parser.add_argument("--bb", type=int, default=100, help="Big blind size.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bot decisions.")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="random", help="Strategy every bot plays.")
    parser.add_argument("--verbose", action="store_true", help="Log every action.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")
    if args.players < 2:
        LOGGER.error("Need at least two players")
        return 2
    return run_simulation(args)


if __name__ == "__main__":
    sys.exit(main())
